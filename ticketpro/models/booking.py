from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from decimal import Decimal

from ticketpro.models.base import Base

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    batch_id: Mapped[int] = mapped_column(Integer, ForeignKey("ticket_batches.id"), index=True)
    passenger_name: Mapped[str] = mapped_column(String(255))
    passenger_passport: Mapped[str] = mapped_column(String(32))
    passenger_phone: Mapped[str] = mapped_column(String(32))
    passenger_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pax_count: Mapped[int] = mapped_column(Integer, default=1)
    selling_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    payment_type: Mapped[str] = mapped_column(String(16), default="full")  # full | partial
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
