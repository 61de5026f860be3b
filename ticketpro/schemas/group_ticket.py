from datetime import date, datetime
from typing import Optional

from ticketpro.schemas.base import InputModel, OutputModel


class GroupTicketCreate(InputModel):
    # Loose types: missing or non-positive values are reported by the validator as field errors
    group_name: str = ""
    package_type: str = "with-transport"
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    ticket_count: int = 0
    total_cost: int = 0
    agent_name: str = ""
    agent_contact: Optional[str] = None
    purchase_notes: Optional[str] = None
    departure_airline: Optional[str] = None
    departure_flight_number: Optional[str] = None
    departure_time: Optional[str] = None
    departure_route: Optional[str] = None
    return_airline: Optional[str] = None
    return_flight_number: Optional[str] = None
    return_time: Optional[str] = None
    return_route: Optional[str] = None


class GroupTicketUpdate(InputModel):
    """Partial update; remaining_tickets is deliberately absent."""

    group_name: Optional[str] = None
    package_type: Optional[str] = None
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    ticket_count: Optional[int] = None
    total_cost: Optional[int] = None
    agent_name: Optional[str] = None
    agent_contact: Optional[str] = None
    purchase_notes: Optional[str] = None
    departure_airline: Optional[str] = None
    departure_flight_number: Optional[str] = None
    departure_time: Optional[str] = None
    departure_route: Optional[str] = None
    return_airline: Optional[str] = None
    return_flight_number: Optional[str] = None
    return_time: Optional[str] = None
    return_route: Optional[str] = None


class GroupTicketOut(OutputModel):
    id: int
    group_name: str
    package_type: str
    departure_date: date
    return_date: date
    ticket_count: int
    total_cost: int
    average_cost_per_ticket: int
    remaining_tickets: int
    assigned_count: int
    agent_name: str
    agent_contact: Optional[str] = None
    purchase_notes: Optional[str] = None
    departure_airline: Optional[str] = None
    departure_flight_number: Optional[str] = None
    departure_time: Optional[str] = None
    departure_route: Optional[str] = None
    return_airline: Optional[str] = None
    return_flight_number: Optional[str] = None
    return_time: Optional[str] = None
    return_route: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DateGroupOut(OutputModel):
    departure_date: date
    return_date: date
    group_count: int
    total_tickets: int
    total_cost: int
    remaining_tickets: int
    groups: list[GroupTicketOut]


class AssignedPassengerOut(OutputModel):
    id: int
    name: str
    type: str
    pnr: Optional[str] = None
    passport: Optional[str] = None


class AssignmentCreate(InputModel):
    passenger_id: int
    passenger_type: str
