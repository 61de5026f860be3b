from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketpro.api.deps import get_current_identity, require_permission
from ticketpro.db.session import get_db
from ticketpro.schemas.umrah import (
    PaymentIn,
    UmrahWithoutTransportIn,
    UmrahWithoutTransportOut,
    UmrahWithTransportIn,
    UmrahWithTransportOut,
)
from ticketpro.services.umrah import UmrahPassengerService

router = APIRouter(dependencies=[Depends(get_current_identity)])

can_write = [Depends(require_permission("create_bookings"))]


# With transport

@router.get("/with-transport", response_model=List[UmrahWithTransportOut])
def list_with_transport(search: str | None = None, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).list_with_transport(search)


@router.post("/with-transport", response_model=UmrahWithTransportOut, status_code=201, dependencies=can_write)
def create_with_transport(payload: UmrahWithTransportIn, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).create_with_transport(payload.model_dump())


@router.get("/with-transport/{passenger_id}", response_model=UmrahWithTransportOut)
def get_with_transport(passenger_id: int, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).get_with_transport(passenger_id)


@router.put("/with-transport/{passenger_id}", response_model=UmrahWithTransportOut, dependencies=can_write)
def update_with_transport(passenger_id: int, payload: UmrahWithTransportIn, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).update_with_transport(passenger_id, payload.model_dump(exclude_unset=True))


@router.delete("/with-transport/{passenger_id}", dependencies=can_write)
def delete_with_transport(passenger_id: int, db: Session = Depends(get_db)):
    UmrahPassengerService(db).delete_with_transport(passenger_id)
    return {"ok": True}


# Without transport

@router.get("/without-transport", response_model=List[UmrahWithoutTransportOut])
def list_without_transport(search: str | None = None, pending_only: bool = False, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).list_without_transport(search, pending_only=pending_only)


@router.post("/without-transport", response_model=UmrahWithoutTransportOut, status_code=201, dependencies=can_write)
def create_without_transport(payload: UmrahWithoutTransportIn, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).create_without_transport(payload.model_dump())


@router.get("/without-transport/{passenger_id}", response_model=UmrahWithoutTransportOut)
def get_without_transport(passenger_id: int, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).get_without_transport(passenger_id)


@router.put("/without-transport/{passenger_id}", response_model=UmrahWithoutTransportOut, dependencies=can_write)
def update_without_transport(passenger_id: int, payload: UmrahWithoutTransportIn, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).update_without_transport(passenger_id, payload.model_dump(exclude_unset=True))


@router.delete("/without-transport/{passenger_id}", dependencies=can_write)
def delete_without_transport(passenger_id: int, db: Session = Depends(get_db)):
    UmrahPassengerService(db).delete_without_transport(passenger_id)
    return {"ok": True}


@router.post(
    "/without-transport/{passenger_id}/payments",
    response_model=UmrahWithoutTransportOut,
    dependencies=[Depends(require_permission("partial_payments"))],
)
def record_payment(passenger_id: int, payload: PaymentIn, db: Session = Depends(get_db)):
    return UmrahPassengerService(db).record_payment(passenger_id, payload.amount, payload.payment_date)
