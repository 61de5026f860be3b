"""Umrah group-ticket pools.

A group ticket is a block of tickets bought for one departure/return date
pair. Passengers draw one ticket each from it. ``remaining_tickets`` is only
moved by conditional UPDATE statements, so the floor at zero is decided by the
database at write time and never by a value the caller read earlier.

Claim/release helpers do not commit: the passenger row and the counter change
belong to the caller's transaction. Operations that stand on their own
(create, update, assign, unassign, delete) commit.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from ticketpro.models.group_ticket import GroupTicket, PACKAGE_TYPES
from ticketpro.models.umrah_passenger import PASSENGER_MODELS, UmrahWithTransport, UmrahWithoutTransport
from ticketpro.services.errors import (
    GroupTicketInUseError,
    GroupTicketNotFoundError,
    NoTicketsRemainingError,
    PackageTypeMismatchError,
    PassengerAlreadyAssignedError,
    PassengerNotAssignedError,
    PassengerNotFoundError,
    ValidationFailedError,
)
from ticketpro.services.validation import ValidationResult, validate_group_ticket

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "group_name",
    "package_type",
    "departure_date",
    "return_date",
    "ticket_count",
    "total_cost",
    "agent_name",
    "agent_contact",
    "purchase_notes",
    "departure_airline",
    "departure_flight_number",
    "departure_time",
    "departure_route",
    "return_airline",
    "return_flight_number",
    "return_time",
    "return_route",
)


@dataclass
class DateGroup:
    """Group tickets sharing one (departure_date, return_date) pair."""

    departure_date: date
    return_date: date
    groups: list[GroupTicket] = field(default_factory=list)

    @property
    def group_count(self) -> int:
        return len(self.groups)

    @property
    def total_tickets(self) -> int:
        return sum(g.ticket_count for g in self.groups)

    @property
    def total_cost(self) -> int:
        return sum(g.total_cost for g in self.groups)

    @property
    def remaining_tickets(self) -> int:
        return sum(g.remaining_tickets for g in self.groups)


def _clean(values: Mapping[str, Any]) -> dict[str, Any]:
    cleaned = {}
    for key in EDITABLE_FIELDS:
        if key not in values:
            continue
        value = values[key]
        if isinstance(value, str):
            value = value.strip() or None
        cleaned[key] = value
    return cleaned


def _passenger_model(passenger_type: str):
    model = PASSENGER_MODELS.get(passenger_type)
    if model is None:
        raise ValidationFailedError(
            ValidationResult(errors=[f"Passenger type must be one of: {', '.join(PACKAGE_TYPES)}"])
        )
    return model


class GroupTicketService:
    """Create, allocate from and delete group-ticket pools."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # Queries

    def list(self, package_type: str | None = None, search: str | None = None) -> List[GroupTicket]:
        q = self.db.query(GroupTicket)
        if package_type:
            q = q.filter(GroupTicket.package_type == package_type)
        if search and search.strip():
            s = f"%{search.strip().lower()}%"
            q = q.filter(or_(func.lower(GroupTicket.group_name).like(s), func.lower(GroupTicket.agent_name).like(s)))
        return q.order_by(GroupTicket.created_at.desc(), GroupTicket.id.desc()).all()

    def get(self, group_ticket_id: int) -> GroupTicket:
        ticket = self.db.get(GroupTicket, group_ticket_id)
        if ticket is None:
            raise GroupTicketNotFoundError(group_ticket_id)
        return ticket

    def find_available(self, package_type: str, departure_date: date, return_date: date) -> List[GroupTicket]:
        """Pools for the exact date pair that still have tickets.

        Advisory only: a pool listed here can be exhausted before the
        passenger is saved, in which case ``claim`` rejects it.
        """
        return (
            self.db.query(GroupTicket)
            .filter(
                GroupTicket.package_type == package_type,
                GroupTicket.departure_date == departure_date,
                GroupTicket.return_date == return_date,
                GroupTicket.remaining_tickets > 0,
            )
            .order_by(GroupTicket.id.asc())
            .all()
        )

    def group_by_dates(self, package_type: str | None = None) -> List[DateGroup]:
        buckets: dict[tuple[date, date], DateGroup] = {}
        for ticket in self.list(package_type):
            key = (ticket.departure_date, ticket.return_date)
            if key not in buckets:
                buckets[key] = DateGroup(departure_date=key[0], return_date=key[1])
            buckets[key].groups.append(ticket)
        return [buckets[key] for key in sorted(buckets)]

    def assigned_passengers(self, group_ticket_id: int) -> List[dict[str, Any]]:
        passengers = []
        with_transport = (
            self.db.query(UmrahWithTransport)
            .filter(UmrahWithTransport.group_ticket_id == group_ticket_id)
            .order_by(UmrahWithTransport.id)
        )
        for p in with_transport:
            passengers.append({
                "id": p.id,
                "name": p.passenger_name,
                "type": "with-transport",
                "pnr": p.pnr,
                "passport": p.passport_number,
            })
        without_transport = (
            self.db.query(UmrahWithoutTransport)
            .filter(UmrahWithoutTransport.group_ticket_id == group_ticket_id)
            .order_by(UmrahWithoutTransport.id)
        )
        for p in without_transport:
            passengers.append({
                "id": p.id,
                "name": p.passenger_name,
                "type": "without-transport",
                "pnr": None,
                "passport": p.passport_number,
            })
        return passengers

    # Pool lifecycle

    def create(self, data: Mapping[str, Any]) -> tuple[GroupTicket, ValidationResult]:
        values = _clean(data)
        result = validate_group_ticket(values)
        if not result.is_valid:
            raise ValidationFailedError(result)
        ticket = GroupTicket(**values, remaining_tickets=values["ticket_count"])
        self.db.add(ticket)
        self.db.commit()
        self.db.refresh(ticket)
        logger.info(
            "Created group ticket %s '%s' (%s tickets, %s -> %s)",
            ticket.id, ticket.group_name, ticket.ticket_count, ticket.departure_date, ticket.return_date,
        )
        return ticket, result

    def update(self, group_ticket_id: int, changes: Mapping[str, Any]) -> tuple[GroupTicket, ValidationResult]:
        """Apply a partial update. ``remaining_tickets`` is not an editable field."""
        ticket = self.get(group_ticket_id)
        merged = {key: getattr(ticket, key) for key in EDITABLE_FIELDS}
        merged.update(_clean(changes))
        result = validate_group_ticket(merged)

        assigned = ticket.assigned_count
        if assigned and merged["package_type"] != ticket.package_type:
            result.errors.append("Package type cannot change while passengers are assigned")
        if isinstance(merged["ticket_count"], int) and merged["ticket_count"] < assigned:
            result.errors.append(f"Ticket count cannot be lower than the {assigned} passenger(s) already assigned")
        if assigned and (merged["departure_date"], merged["return_date"]) != (ticket.departure_date, ticket.return_date):
            result.warnings.append(
                f"Travel dates changed while {assigned} passenger(s) are assigned; their own dates were not updated"
            )
        if not result.is_valid:
            raise ValidationFailedError(result)

        new_count = merged.pop("ticket_count")
        delta = new_count - ticket.ticket_count
        if delta:
            # Capacity moves with remaining so the number of assigned passengers is kept
            res = self.db.execute(
                update(GroupTicket)
                .where(GroupTicket.id == group_ticket_id, GroupTicket.remaining_tickets + delta >= 0)
                .values(ticket_count=new_count, remaining_tickets=GroupTicket.remaining_tickets + delta)
                .execution_options(synchronize_session=False)
            )
            if res.rowcount == 0:
                self.db.rollback()
                raise ValidationFailedError(
                    ValidationResult(errors=["Ticket count cannot be lower than the passengers already assigned"])
                )
        for key, value in merged.items():
            setattr(ticket, key, value)
        self.db.commit()
        self.db.refresh(ticket)
        logger.info("Updated group ticket %s", ticket.id)
        return ticket, result

    def delete(self, group_ticket_id: int, force: bool = False) -> int:
        """Delete a pool, returning how many passengers were unassigned.

        With passengers assigned the first call fails with the passenger list;
        repeating it with ``force=True`` clears their references (the
        passengers stay) and deletes the pool.
        """
        ticket = self.get(group_ticket_id)
        passengers = self.assigned_passengers(group_ticket_id)
        if passengers and not force:
            raise GroupTicketInUseError(group_ticket_id, passengers)
        for model in PASSENGER_MODELS.values():
            self.db.execute(
                update(model).where(model.group_ticket_id == group_ticket_id).values(group_ticket_id=None)
            )
        self.db.delete(ticket)
        self.db.commit()
        if passengers:
            logger.warning(
                "Force-deleted group ticket %s, unassigned %d passenger(s)", group_ticket_id, len(passengers)
            )
        else:
            logger.info("Deleted group ticket %s", group_ticket_id)
        return len(passengers)

    # Allocation

    def claim(self, group_ticket_id: int, passenger_type: str) -> None:
        """Take one ticket from the pool inside the caller's transaction."""
        ticket = self.get(group_ticket_id)
        if ticket.package_type != passenger_type:
            raise PackageTypeMismatchError(ticket.package_type, passenger_type)
        res = self.db.execute(
            update(GroupTicket)
            .where(GroupTicket.id == group_ticket_id, GroupTicket.remaining_tickets > 0)
            .values(remaining_tickets=GroupTicket.remaining_tickets - 1)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount == 0:
            logger.warning("Rejected claim on exhausted group ticket %s", group_ticket_id)
            raise NoTicketsRemainingError(group_ticket_id)

    def release(self, group_ticket_id: int) -> None:
        """Return one ticket to the pool inside the caller's transaction."""
        res = self.db.execute(
            update(GroupTicket)
            .where(GroupTicket.id == group_ticket_id, GroupTicket.remaining_tickets < GroupTicket.ticket_count)
            .values(remaining_tickets=GroupTicket.remaining_tickets + 1)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount == 0:
            logger.warning("Release on group ticket %s ignored (missing or already full)", group_ticket_id)

    def relink(self, passenger, passenger_type: str, group_ticket_id: int | None) -> None:
        """Point a passenger row at another pool (or none), moving one ticket."""
        current = passenger.group_ticket_id
        if current == group_ticket_id:
            return
        if group_ticket_id is not None:
            self.claim(group_ticket_id, passenger_type)
        if current is not None:
            self.release(current)
        passenger.group_ticket_id = group_ticket_id

    def assign_passenger(self, group_ticket_id: int, passenger_id: int, passenger_type: str):
        model = _passenger_model(passenger_type)
        passenger = self.db.get(model, passenger_id)
        if passenger is None:
            raise PassengerNotFoundError(passenger_type, passenger_id)
        if passenger.group_ticket_id == group_ticket_id:
            return passenger
        if passenger.group_ticket_id is not None:
            raise PassengerAlreadyAssignedError(passenger_id, passenger.group_ticket_id)

        self.claim(group_ticket_id, passenger_type)
        res = self.db.execute(
            update(model)
            .where(model.id == passenger_id, model.group_ticket_id.is_(None))
            .values(group_ticket_id=group_ticket_id)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount == 0:
            self.db.rollback()
            self.db.refresh(passenger)
            raise PassengerAlreadyAssignedError(passenger_id, passenger.group_ticket_id)
        self.db.commit()
        self.db.refresh(passenger)
        logger.info("Assigned %s passenger %s to group ticket %s", passenger_type, passenger_id, group_ticket_id)
        return passenger

    def unassign_passenger(self, passenger_id: int, passenger_type: str):
        model = _passenger_model(passenger_type)
        passenger = self.db.get(model, passenger_id)
        if passenger is None:
            raise PassengerNotFoundError(passenger_type, passenger_id)
        group_ticket_id = passenger.group_ticket_id
        if group_ticket_id is None:
            raise PassengerNotAssignedError(passenger_id)

        res = self.db.execute(
            update(model)
            .where(model.id == passenger_id, model.group_ticket_id == group_ticket_id)
            .values(group_ticket_id=None)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount:
            self.release(group_ticket_id)
        self.db.commit()
        self.db.refresh(passenger)
        logger.info("Unassigned %s passenger %s from group ticket %s", passenger_type, passenger_id, group_ticket_id)
        return passenger
