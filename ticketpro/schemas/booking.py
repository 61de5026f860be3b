from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from ticketpro.schemas.base import InputModel, OutputModel


class TicketBatchCreate(InputModel):
    country_code: str = ""
    airline: str = ""
    flight_date: Optional[date] = None
    flight_time: Optional[str] = None
    buying_price: Optional[Decimal] = None
    quantity: Optional[int] = None
    agent_name: str = ""
    agent_contact: str = ""
    agent_address: Optional[str] = None
    remarks: Optional[str] = None


class TicketBatchOut(OutputModel):
    id: int
    country_code: str
    airline: str
    flight_date: date
    flight_time: str
    buying_price: float
    quantity: int
    available_count: int
    agent_name: str
    agent_contact: str
    agent_address: Optional[str] = None
    remarks: Optional[str] = None
    created_by: str
    created_at: datetime


class BookingCreate(InputModel):
    batch_id: int
    passenger_name: str
    passenger_passport: str
    passenger_phone: str
    passenger_email: Optional[str] = None
    pax_count: int = 1
    selling_price: Decimal
    payment_type: Literal["full", "partial"] = "full"
    comments: Optional[str] = None


class BookingStatusUpdate(InputModel):
    status: str
    # Second step for confirmations that need an explicit acknowledgement
    confirmed: bool = False


class BookingOut(OutputModel):
    id: int
    batch_id: int
    passenger_name: str
    passenger_passport: str
    passenger_phone: str
    passenger_email: Optional[str] = None
    pax_count: int
    selling_price: float
    payment_type: str
    status: str
    comments: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime
    confirmed_at: Optional[datetime] = None
