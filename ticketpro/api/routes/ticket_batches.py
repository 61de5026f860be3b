from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ticketpro.api.deps import get_current_identity, get_current_roles, require_permission
from ticketpro.db.session import get_db
from ticketpro.schemas.booking import TicketBatchCreate, TicketBatchOut
from ticketpro.services.ticket_batches import TicketBatchService
from ticketpro.services.validation import has_permission

router = APIRouter(dependencies=[Depends(require_permission("view_tickets"))])


def _serialize(batch, roles: List[str]) -> dict:
    data = TicketBatchOut.model_validate(batch).model_dump()
    if not has_permission(roles, "view_buying_price"):
        data["buying_price"] = None
    return data


@router.get("")
def list_ticket_batches(
    country_code: str | None = Query(None, min_length=2, max_length=2),
    roles: List[str] = Depends(get_current_roles),
    db: Session = Depends(get_db),
):
    return [_serialize(b, roles) for b in TicketBatchService(db).list(country_code)]


@router.post("", status_code=201, dependencies=[Depends(require_permission("create_batches"))])
def create_ticket_batch(payload: TicketBatchCreate, identity=Depends(get_current_identity), db: Session = Depends(get_db)):
    email, roles = identity
    batch, result, financials = TicketBatchService(db).create(payload.model_dump(), created_by=email)
    return {**_serialize(batch, roles), "warnings": list(result.warnings), "financials": financials.to_dict()}


@router.get("/{batch_id}")
def get_ticket_batch(batch_id: int, roles: List[str] = Depends(get_current_roles), db: Session = Depends(get_db)):
    return _serialize(TicketBatchService(db).get(batch_id), roles)
