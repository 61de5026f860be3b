import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, List

from sqlalchemy import update
from sqlalchemy.orm import Session

from ticketpro.models.ticket_batch import TicketBatch
from ticketpro.services.errors import SoldOutError, TicketBatchNotFoundError, ValidationFailedError
from ticketpro.services.validation import (
    FinancialCalculation,
    ValidationResult,
    calculate_financials,
    validate_business_rules,
    validate_ticket_batch,
)

logger = logging.getLogger(__name__)


class TicketBatchService:
    """Tickets bought from agents, sold one seat per booking."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, country_code: str | None = None) -> List[TicketBatch]:
        q = self.db.query(TicketBatch)
        if country_code:
            q = q.filter(TicketBatch.country_code == country_code.upper())
        return q.order_by(TicketBatch.flight_date.asc(), TicketBatch.id.asc()).all()

    def get(self, batch_id: int) -> TicketBatch:
        batch = self.db.get(TicketBatch, batch_id)
        if batch is None:
            raise TicketBatchNotFoundError(batch_id)
        return batch

    def create(
        self, data: Mapping[str, Any], created_by: str, today: date | None = None
    ) -> tuple[TicketBatch, ValidationResult, FinancialCalculation]:
        values = dict(data)
        if isinstance(values.get("country_code"), str):
            values["country_code"] = values["country_code"].strip().upper()
        result = validate_ticket_batch(values, today=today)
        if result.is_valid:
            same_day = self.db.query(TicketBatch).filter(TicketBatch.flight_date == values["flight_date"])
            result.merge(validate_business_rules(values, same_day))
        if not result.is_valid:
            raise ValidationFailedError(result)

        batch = TicketBatch(**values, available_count=values["quantity"], created_by=created_by)
        self.db.add(batch)
        self.db.commit()
        self.db.refresh(batch)
        financials = calculate_financials(batch.buying_price, batch.quantity)
        logger.info(
            "Ticket batch %s bought by %s: %s x %s %s on %s (risk %s)",
            batch.id, created_by, batch.quantity, batch.airline, batch.country_code, batch.flight_date,
            financials.risk_level,
        )
        return batch, result, financials

    def take_seat(self, batch_id: int) -> TicketBatch:
        """Decrement available seats atomically inside the caller's transaction."""
        batch = self.get(batch_id)
        res = self.db.execute(
            update(TicketBatch)
            .where(TicketBatch.id == batch_id, TicketBatch.available_count > 0)
            .values(available_count=TicketBatch.available_count - 1)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount == 0:
            raise SoldOutError(batch_id)
        return batch

    def return_seat(self, batch_id: int) -> None:
        self.db.execute(
            update(TicketBatch)
            .where(TicketBatch.id == batch_id, TicketBatch.available_count < TicketBatch.quantity)
            .values(available_count=TicketBatch.available_count + 1)
            .execution_options(synchronize_session=False)
        )
