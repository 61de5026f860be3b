from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ticketpro.api.deps import get_current_identity, require_permission
from ticketpro.db.session import get_db
from ticketpro.schemas.group_ticket import (
    AssignedPassengerOut,
    AssignmentCreate,
    DateGroupOut,
    GroupTicketCreate,
    GroupTicketOut,
    GroupTicketUpdate,
)
from ticketpro.services.group_tickets import GroupTicketService

router = APIRouter(dependencies=[Depends(get_current_identity)])

PACKAGE_TYPE_PATTERN = "^(with-transport|without-transport)$"


def _with_warnings(ticket, result) -> dict:
    return {**GroupTicketOut.model_validate(ticket).model_dump(mode="json"), "warnings": list(result.warnings)}


# Static paths are declared before /{group_ticket_id}

@router.get("", response_model=List[GroupTicketOut])
def list_group_tickets(
    package_type: str | None = Query(None, pattern=PACKAGE_TYPE_PATTERN),
    search: str | None = None,
    db: Session = Depends(get_db),
):
    return GroupTicketService(db).list(package_type=package_type, search=search)


@router.get("/by-dates", response_model=List[DateGroupOut])
def group_tickets_by_dates(
    package_type: str | None = Query(None, pattern=PACKAGE_TYPE_PATTERN),
    db: Session = Depends(get_db),
):
    return [DateGroupOut.model_validate(g) for g in GroupTicketService(db).group_by_dates(package_type)]


@router.get("/available", response_model=List[GroupTicketOut])
def available_group_tickets(
    package_type: str = Query(..., pattern=PACKAGE_TYPE_PATTERN),
    departure_date: date = Query(...),
    return_date: date = Query(...),
    db: Session = Depends(get_db),
):
    """Pools with tickets left for an exact date pair. Advisory: the pick is re-checked on save."""
    return GroupTicketService(db).find_available(package_type, departure_date, return_date)


@router.post("", status_code=201, dependencies=[Depends(require_permission("create_batches"))])
def create_group_ticket(payload: GroupTicketCreate, db: Session = Depends(get_db)):
    ticket, result = GroupTicketService(db).create(payload.model_dump())
    return _with_warnings(ticket, result)


@router.delete("/assignments/{passenger_type}/{passenger_id}", dependencies=[Depends(require_permission("create_bookings"))])
def unassign_passenger(passenger_type: str, passenger_id: int, db: Session = Depends(get_db)):
    GroupTicketService(db).unassign_passenger(passenger_id, passenger_type)
    return {"ok": True}


@router.get("/{group_ticket_id}", response_model=GroupTicketOut)
def get_group_ticket(group_ticket_id: int, db: Session = Depends(get_db)):
    return GroupTicketService(db).get(group_ticket_id)


@router.put("/{group_ticket_id}", dependencies=[Depends(require_permission("edit_batches"))])
def update_group_ticket(group_ticket_id: int, payload: GroupTicketUpdate, db: Session = Depends(get_db)):
    ticket, result = GroupTicketService(db).update(group_ticket_id, payload.model_dump(exclude_unset=True))
    return _with_warnings(ticket, result)


@router.delete("/{group_ticket_id}", dependencies=[Depends(require_permission("delete_batches"))])
def delete_group_ticket(group_ticket_id: int, force: bool = False, db: Session = Depends(get_db)):
    """First call without ``force`` answers 409 with the assigned passengers when there are any."""
    unassigned = GroupTicketService(db).delete(group_ticket_id, force=force)
    return {"ok": True, "unassigned_count": unassigned}


@router.get("/{group_ticket_id}/passengers", response_model=List[AssignedPassengerOut])
def group_ticket_passengers(group_ticket_id: int, db: Session = Depends(get_db)):
    service = GroupTicketService(db)
    service.get(group_ticket_id)
    return service.assigned_passengers(group_ticket_id)


@router.post("/{group_ticket_id}/assignments", dependencies=[Depends(require_permission("create_bookings"))])
def assign_passenger(group_ticket_id: int, payload: AssignmentCreate, db: Session = Depends(get_db)):
    service = GroupTicketService(db)
    passenger = service.assign_passenger(group_ticket_id, payload.passenger_id, payload.passenger_type)
    ticket = service.get(group_ticket_id)
    return {
        "passenger_id": passenger.id,
        "passenger_type": payload.passenger_type,
        "group_ticket": GroupTicketOut.model_validate(ticket).model_dump(),
    }
