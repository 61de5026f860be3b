from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketpro.api.deps import get_current_identity, require_permission
from ticketpro.db.session import get_db
from ticketpro.schemas.booking import BookingCreate, BookingOut, BookingStatusUpdate
from ticketpro.services.bookings import BookingService
from ticketpro.services.currency import calculate_profit
from ticketpro.services.ticket_batches import TicketBatchService
from ticketpro.services.validation import has_permission

router = APIRouter()


def _serialize(db: Session, booking, roles: List[str]) -> dict:
    data = BookingOut.model_validate(booking).model_dump()
    if has_permission(roles, "view_profit"):
        batch = TicketBatchService(db).get(booking.batch_id)
        data["profit"] = calculate_profit(booking.selling_price, batch.buying_price, booking.pax_count)
    return data


@router.get("")
def list_bookings(status: str | None = None, identity=Depends(get_current_identity), db: Session = Depends(get_db)):
    email, roles = identity
    bookings = BookingService(db).list(status)
    if not has_permission(roles, "view_all_bookings"):
        bookings = [b for b in bookings if b.created_by == email]
    return [_serialize(db, b, roles) for b in bookings]


@router.post("", status_code=201, dependencies=[Depends(require_permission("create_bookings"))])
def create_booking(payload: BookingCreate, identity=Depends(get_current_identity), db: Session = Depends(get_db)):
    email, roles = identity
    booking = BookingService(db).create(payload.model_dump(), created_by=email)
    return _serialize(db, booking, roles)


@router.get("/{booking_id}")
def get_booking(booking_id: int, identity=Depends(get_current_identity), db: Session = Depends(get_db)):
    _email, roles = identity
    return _serialize(db, BookingService(db).get(booking_id), roles)


@router.patch("/{booking_id}/status")
def change_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    identity=Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Large confirmations answer 409 ``requires_confirmation`` until repeated with ``confirmed``."""
    email, roles = identity
    booking = BookingService(db).change_status(
        booking_id, payload.status, roles=roles, actor=email, confirmed=payload.confirmed
    )
    return _serialize(db, booking, roles)
