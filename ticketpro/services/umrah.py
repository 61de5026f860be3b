"""Umrah passenger records and their group-ticket links.

Saving a passenger with ``group_ticket_id`` is the point where a pool ticket
is actually taken; the claim and the passenger row commit together.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from ticketpro.models.umrah_passenger import UmrahWithTransport, UmrahWithoutTransport
from ticketpro.services.errors import PassengerNotFoundError, ValidationFailedError
from ticketpro.services.group_tickets import GroupTicketService
from ticketpro.services.validation import ValidationResult, validate_date_range

logger = logging.getLogger(__name__)

WITH_TRANSPORT = "with-transport"
WITHOUT_TRANSPORT = "without-transport"


def _like(value: str) -> str:
    return f"%{value.strip().lower()}%"


class UmrahPassengerService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.pool = GroupTicketService(db)

    # With transport

    def list_with_transport(self, search: str | None = None) -> list[UmrahWithTransport]:
        q = self.db.query(UmrahWithTransport)
        if search and search.strip():
            s = _like(search)
            q = q.filter(or_(
                func.lower(UmrahWithTransport.passenger_name).like(s),
                func.lower(UmrahWithTransport.pnr).like(s),
                func.lower(UmrahWithTransport.passport_number).like(s),
            ))
        return q.order_by(UmrahWithTransport.created_at.desc(), UmrahWithTransport.id.desc()).all()

    def get_with_transport(self, passenger_id: int) -> UmrahWithTransport:
        passenger = self.db.get(UmrahWithTransport, passenger_id)
        if passenger is None:
            raise PassengerNotFoundError(WITH_TRANSPORT, passenger_id)
        return passenger

    def create_with_transport(self, data: Mapping[str, Any]) -> UmrahWithTransport:
        values = dict(data)
        self._check_dates(values["departure_date"], values["return_date"])
        group_ticket_id = values.pop("group_ticket_id", None)
        passenger = UmrahWithTransport(**values)
        return self._save_new(passenger, WITH_TRANSPORT, group_ticket_id)

    def update_with_transport(self, passenger_id: int, data: Mapping[str, Any]) -> UmrahWithTransport:
        passenger = self.get_with_transport(passenger_id)
        self._check_dates(data.get("departure_date", passenger.departure_date), data.get("return_date", passenger.return_date))
        return self._save_existing(passenger, WITH_TRANSPORT, data)

    def delete_with_transport(self, passenger_id: int) -> None:
        self._delete(self.get_with_transport(passenger_id), WITH_TRANSPORT)

    # Without transport

    def list_without_transport(self, search: str | None = None, pending_only: bool = False) -> list[UmrahWithoutTransport]:
        q = self.db.query(UmrahWithoutTransport)
        if pending_only:
            q = q.filter(UmrahWithoutTransport.amount_paid < UmrahWithoutTransport.total_amount)
        if search and search.strip():
            s = _like(search)
            q = q.filter(or_(
                func.lower(UmrahWithoutTransport.passenger_name).like(s),
                func.lower(UmrahWithoutTransport.passport_number).like(s),
                func.lower(func.coalesce(UmrahWithoutTransport.remarks, "")).like(s),
            ))
        return q.order_by(UmrahWithoutTransport.created_at.desc(), UmrahWithoutTransport.id.desc()).all()

    def get_without_transport(self, passenger_id: int) -> UmrahWithoutTransport:
        passenger = self.db.get(UmrahWithoutTransport, passenger_id)
        if passenger is None:
            raise PassengerNotFoundError(WITHOUT_TRANSPORT, passenger_id)
        return passenger

    def create_without_transport(self, data: Mapping[str, Any]) -> UmrahWithoutTransport:
        values = dict(data)
        self._check_dates(values["flight_departure_date"], values["return_date"])
        self._check_amounts(values["total_amount"], values.get("amount_paid", 0))
        group_ticket_id = values.pop("group_ticket_id", None)
        passenger = UmrahWithoutTransport(**values)
        return self._save_new(passenger, WITHOUT_TRANSPORT, group_ticket_id)

    def update_without_transport(self, passenger_id: int, data: Mapping[str, Any]) -> UmrahWithoutTransport:
        passenger = self.get_without_transport(passenger_id)
        self._check_dates(
            data.get("flight_departure_date", passenger.flight_departure_date),
            data.get("return_date", passenger.return_date),
        )
        self._check_amounts(data.get("total_amount", passenger.total_amount), data.get("amount_paid", passenger.amount_paid))
        return self._save_existing(passenger, WITHOUT_TRANSPORT, data)

    def delete_without_transport(self, passenger_id: int) -> None:
        self._delete(self.get_without_transport(passenger_id), WITHOUT_TRANSPORT)

    def record_payment(self, passenger_id: int, amount: int, payment_date: date | None = None) -> UmrahWithoutTransport:
        passenger = self.get_without_transport(passenger_id)
        if amount <= 0:
            raise ValidationFailedError(ValidationResult(errors=["Payment amount must be greater than 0"]))
        if amount > passenger.remaining_amount:
            raise ValidationFailedError(
                ValidationResult(errors=[f"Payment exceeds the remaining amount of {passenger.remaining_amount}"])
            )
        # The balance check is repeated by the database against the current row
        res = self.db.execute(
            update(UmrahWithoutTransport)
            .where(
                UmrahWithoutTransport.id == passenger_id,
                UmrahWithoutTransport.amount_paid + amount <= UmrahWithoutTransport.total_amount,
            )
            .values(
                amount_paid=UmrahWithoutTransport.amount_paid + amount,
                last_payment_date=payment_date or date.today(),
            )
            .execution_options(synchronize_session=False)
        )
        if res.rowcount == 0:
            self.db.rollback()
            logger.warning("Rejected payment of %s for Umrah passenger %s: balance changed", amount, passenger_id)
            raise ValidationFailedError(ValidationResult(errors=["Payment exceeds the remaining amount"]))
        self.db.commit()
        self.db.refresh(passenger)
        logger.info("Recorded payment of %s for Umrah passenger %s", amount, passenger.id)
        return passenger

    # Shared

    def _check_dates(self, departure, return_) -> None:
        result = validate_date_range(departure, return_)
        if not result.is_valid:
            raise ValidationFailedError(result)

    def _check_amounts(self, total_amount: int, amount_paid: int) -> None:
        if amount_paid > total_amount:
            raise ValidationFailedError(ValidationResult(errors=["Amount paid cannot exceed the total amount"]))

    def _save_new(self, passenger, passenger_type: str, group_ticket_id: int | None):
        if group_ticket_id is not None:
            self.pool.claim(group_ticket_id, passenger_type)
            passenger.group_ticket_id = group_ticket_id
        self.db.add(passenger)
        self.db.commit()
        self.db.refresh(passenger)
        logger.info("Created Umrah %s passenger %s (group ticket %s)", passenger_type, passenger.id, group_ticket_id)
        return passenger

    def _save_existing(self, passenger, passenger_type: str, data: Mapping[str, Any]):
        values = dict(data)
        if "group_ticket_id" in values:
            self.pool.relink(passenger, passenger_type, values.pop("group_ticket_id"))
        for key, value in values.items():
            setattr(passenger, key, value)
        self.db.commit()
        self.db.refresh(passenger)
        return passenger

    def _delete(self, passenger, passenger_type: str) -> None:
        if passenger.group_ticket_id is not None:
            self.pool.release(passenger.group_ticket_id)
        self.db.delete(passenger)
        self.db.commit()
        logger.info("Deleted Umrah %s passenger %s", passenger_type, passenger.id)
