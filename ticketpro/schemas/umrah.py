from datetime import date, datetime
from typing import Optional

from pydantic import Field

from ticketpro.schemas.base import InputModel, OutputModel


class UmrahWithTransportIn(InputModel):
    passenger_name: str = Field(..., min_length=2, max_length=255)
    pnr: str = Field(..., min_length=1, max_length=32)
    passport_number: str = Field(..., min_length=1, max_length=32)
    flight_airline_name: str = Field(..., min_length=1, max_length=120)
    departure_date: date
    return_date: date
    approved_by: str = Field(..., min_length=1, max_length=255)
    reference_agency: str = Field(..., min_length=1, max_length=255)
    emergency_flight_contact: str = Field(..., min_length=1, max_length=32)
    passenger_mobile: str = Field(..., min_length=1, max_length=32)
    group_ticket_id: Optional[int] = None


class UmrahWithTransportOut(OutputModel):
    id: int
    passenger_name: str
    pnr: str
    passport_number: str
    flight_airline_name: str
    departure_date: date
    return_date: date
    approved_by: str
    reference_agency: str
    emergency_flight_contact: str
    passenger_mobile: str
    group_ticket_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class UmrahWithoutTransportIn(InputModel):
    flight_departure_date: date
    return_date: date
    passenger_name: str = Field(..., min_length=2, max_length=255)
    passport_number: str = Field(..., min_length=1, max_length=32)
    entry_recorded_by: str = Field(..., min_length=1, max_length=255)
    total_amount: int = Field(..., ge=0)
    amount_paid: int = Field(0, ge=0)
    last_payment_date: Optional[date] = None
    remarks: Optional[str] = None
    group_ticket_id: Optional[int] = None


class UmrahWithoutTransportOut(OutputModel):
    id: int
    flight_departure_date: date
    return_date: date
    passenger_name: str
    passport_number: str
    entry_recorded_by: str
    total_amount: int
    amount_paid: int
    remaining_amount: int
    last_payment_date: Optional[date] = None
    remarks: Optional[str] = None
    group_ticket_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class PaymentIn(InputModel):
    amount: int = Field(..., gt=0)
    payment_date: Optional[date] = None
