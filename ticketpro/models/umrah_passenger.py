from sqlalchemy import String, Integer, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime

from ticketpro.models.base import Base


class UmrahWithTransport(Base):
    __tablename__ = "umrah_with_transport"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    passenger_name: Mapped[str] = mapped_column(String(255), index=True)
    pnr: Mapped[str] = mapped_column(String(32), index=True)
    passport_number: Mapped[str] = mapped_column(String(32), index=True)
    flight_airline_name: Mapped[str] = mapped_column(String(120))
    departure_date: Mapped[date] = mapped_column(Date)
    return_date: Mapped[date] = mapped_column(Date)
    approved_by: Mapped[str] = mapped_column(String(255))
    reference_agency: Mapped[str] = mapped_column(String(255))
    emergency_flight_contact: Mapped[str] = mapped_column(String(32))
    passenger_mobile: Mapped[str] = mapped_column(String(32))
    group_ticket_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("umrah_group_tickets.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UmrahWithoutTransport(Base):
    __tablename__ = "umrah_without_transport"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    flight_departure_date: Mapped[date] = mapped_column(Date)
    return_date: Mapped[date] = mapped_column(Date)
    passenger_name: Mapped[str] = mapped_column(String(255), index=True)
    passport_number: Mapped[str] = mapped_column(String(32), index=True)
    entry_recorded_by: Mapped[str] = mapped_column(String(255))
    total_amount: Mapped[int] = mapped_column(Integer)
    amount_paid: Mapped[int] = mapped_column(Integer, default=0)
    last_payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    group_ticket_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("umrah_group_tickets.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def remaining_amount(self) -> int:
        return self.total_amount - self.amount_paid


# Passenger category -> table holding passengers of that category
PASSENGER_MODELS = {
    "with-transport": UmrahWithTransport,
    "without-transport": UmrahWithoutTransport,
}
