from sqlalchemy import String, Integer, Date, DateTime, Text, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime

from ticketpro.models.base import Base
from ticketpro.services.currency import round_half_up

PACKAGE_TYPES = ("with-transport", "without-transport")


class GroupTicket(Base):
    """A purchased block of Umrah tickets consumed one passenger at a time.

    remaining_tickets is only changed through conditional UPDATE statements
    (see services.group_tickets), never assigned from request data.
    """

    __tablename__ = "umrah_group_tickets"
    __table_args__ = (
        CheckConstraint("ticket_count > 0", name="ck_group_ticket_count_positive"),
        CheckConstraint("total_cost > 0", name="ck_group_ticket_cost_positive"),
        CheckConstraint("remaining_tickets >= 0", name="ck_group_ticket_remaining_floor"),
        CheckConstraint("remaining_tickets <= ticket_count", name="ck_group_ticket_remaining_cap"),
        CheckConstraint("return_date > departure_date", name="ck_group_ticket_dates"),
        Index("ix_group_tickets_lookup", "package_type", "departure_date", "return_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_name: Mapped[str] = mapped_column(String(255))
    package_type: Mapped[str] = mapped_column(String(32), default="with-transport")
    departure_date: Mapped[date] = mapped_column(Date)
    return_date: Mapped[date] = mapped_column(Date)
    ticket_count: Mapped[int] = mapped_column(Integer)
    total_cost: Mapped[int] = mapped_column(Integer)  # whole BDT
    remaining_tickets: Mapped[int] = mapped_column(Integer)
    agent_name: Mapped[str] = mapped_column(String(255))
    agent_contact: Mapped[str | None] = mapped_column(String(64), nullable=True)
    purchase_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Flight details, each leg optional
    departure_airline: Mapped[str | None] = mapped_column(String(120), nullable=True)
    departure_flight_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    departure_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # HH:MM
    departure_route: Mapped[str | None] = mapped_column(String(64), nullable=True)
    return_airline: Mapped[str | None] = mapped_column(String(120), nullable=True)
    return_flight_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    return_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    return_route: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def average_cost_per_ticket(self) -> int:
        return average_cost(self.total_cost, self.ticket_count)

    @property
    def assigned_count(self) -> int:
        return self.ticket_count - self.remaining_tickets


def average_cost(total_cost: int, ticket_count: int) -> int:
    if not ticket_count:
        return 0
    return round_half_up(total_cost / ticket_count)
