from sqlalchemy import String, Integer, Date, DateTime, Numeric, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime
from decimal import Decimal

from ticketpro.models.base import Base

class TicketBatch(Base):
    """Tickets bought from an agent for one country/airline/flight date."""

    __tablename__ = "ticket_batches"
    __table_args__ = (
        CheckConstraint("available_count >= 0", name="ck_ticket_batch_available_floor"),
        CheckConstraint("available_count <= quantity", name="ck_ticket_batch_available_cap"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    country_code: Mapped[str] = mapped_column(String(2), index=True)
    airline: Mapped[str] = mapped_column(String(120), index=True)
    flight_date: Mapped[date] = mapped_column(Date, index=True)
    flight_time: Mapped[str] = mapped_column(String(5))
    buying_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    quantity: Mapped[int] = mapped_column(Integer)
    available_count: Mapped[int] = mapped_column(Integer)
    agent_name: Mapped[str] = mapped_column(String(255))
    agent_contact: Mapped[str] = mapped_column(String(32))
    agent_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
