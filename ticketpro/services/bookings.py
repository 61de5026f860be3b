import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, List

from sqlalchemy.orm import Session

from ticketpro.models.booking import Booking
from ticketpro.services.currency import format_currency, safe_multiply
from ticketpro.services.errors import (
    BookingNotFoundError,
    ConfirmationRequiredError,
    PermissionDeniedError,
    ValidationFailedError,
)
from ticketpro.services.ticket_batches import TicketBatchService
from ticketpro.services.validation import (
    SEAT_RELEASING_STATUSES,
    STATUS_PERMISSIONS,
    has_permission,
    requires_large_amount_confirmation,
    validate_passenger_count,
    validate_passenger_info,
    validate_price,
    validate_status_change,
    validate_status_transition,
)

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.batches = TicketBatchService(db)

    def list(self, status: str | None = None) -> List[Booking]:
        q = self.db.query(Booking)
        if status:
            q = q.filter(Booking.status == status)
        return q.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def get(self, booking_id: int) -> Booking:
        booking = self.db.get(Booking, booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def create(self, data: Mapping[str, Any], created_by: str) -> Booking:
        result = validate_passenger_info(
            data.get("passenger_name"), data.get("passenger_passport"),
            data.get("passenger_phone"), data.get("passenger_email"),
        )
        result.merge(
            validate_passenger_count(data.get("pax_count", 1)),
            # Selling prices are not bound by the buying-price range
            validate_price(data.get("selling_price"), min_price=1, max_price=10_000_000),
        )
        if not result.is_valid:
            raise ValidationFailedError(result)

        self.batches.take_seat(data["batch_id"])
        booking = Booking(**data, status="pending", created_by=created_by)
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.info("Booking %s created on batch %s by %s", booking.id, booking.batch_id, created_by)
        return booking

    def change_status(
        self,
        booking_id: int,
        new_status: str,
        roles: Iterable[str],
        actor: str,
        confirmed: bool = False,
        today: date | None = None,
    ) -> Booking:
        """Move a booking through the status table.

        Checks run in order: legal transition, permission, flight date, then
        the large-amount rule which needs a second call with ``confirmed``.
        """
        booking = self.get(booking_id)
        current = booking.status

        result = validate_status_transition(current, new_status)
        if not result.is_valid:
            raise ValidationFailedError(result)
        permission = STATUS_PERMISSIONS.get(new_status)
        if permission and not has_permission(roles, permission):
            raise PermissionDeniedError(f"No permission for this action: {permission}")

        batch = self.batches.get(booking.batch_id)
        result = validate_status_change(current, new_status, batch.flight_date, today=today)
        if not result.is_valid:
            raise ValidationFailedError(result)

        amount = safe_multiply(booking.selling_price, booking.pax_count)
        if requires_large_amount_confirmation(new_status, amount) and not confirmed:
            raise ConfirmationRequiredError(f"Large booking confirmation: {format_currency(amount)}", amount=amount)

        booking.status = new_status
        if new_status == "confirmed":
            booking.confirmed_at = datetime.utcnow()
        if new_status in SEAT_RELEASING_STATUSES:
            self.batches.return_seat(booking.batch_id)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(
            "[audit] booking %s (%s) status %s -> %s by %s",
            booking.id, booking.passenger_name, current, new_status, actor,
        )
        return booking
