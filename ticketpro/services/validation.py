"""Field validators, business rules and the booking status table.

Validators never raise for bad input: they return a ``ValidationResult``
whose ``errors`` block a submission and whose ``warnings`` are advisory.
Services turn a failed result into ``ValidationFailedError``.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from ticketpro.models.group_ticket import PACKAGE_TYPES
from ticketpro.services.currency import (
    format_currency,
    is_valid_number,
    round_half_up,
    safe_add,
    safe_multiply,
)

PRICE_MIN = 1000
PRICE_MAX = 500000
MAX_BATCH_QUANTITY = 1000
LARGE_QUANTITY_WARNING = 500
MAX_BATCH_TOTAL_COST = 50_000_000  # 5 crore
LARGE_BOOKING_AMOUNT = 500_000  # 5 lakh
RUSH_SALE_DAYS = 3

_PHONE_RE = re.compile(r"^(\+880|880|0)?(1[3-9]\d{8})$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PASSPORT_RE = re.compile(r"^[A-Z]{2}\d{7}$")
_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def merge(self, *others: "ValidationResult") -> "ValidationResult":
        for other in others:
            self.errors.extend(other.errors)
            self.warnings.extend(other.warnings)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def _field(obj, name: str, default=None):
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _as_date(value) -> date | None:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# Predicates

def validate_bangladeshi_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return bool(_PHONE_RE.match(re.sub(r"[\s-]", "", phone)))


def validate_email(email: str | None) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


def validate_passport_number(passport: str | None) -> bool:
    return bool(passport) and bool(_PASSPORT_RE.match(passport.upper()))


# Field validators

def validate_price(price, min_price: int = PRICE_MIN, max_price: int = PRICE_MAX) -> ValidationResult:
    result = ValidationResult()
    if not is_valid_number(price) or price <= 0:
        result.errors.append("Price must be greater than 0")
    elif price < min_price:
        result.errors.append(f"Price must be at least {format_currency(min_price)}")
    elif price > max_price:
        result.errors.append(f"Price cannot exceed {format_currency(max_price)}")
    return result


def validate_flight_date(value, today: date | None = None) -> ValidationResult:
    result = ValidationResult()
    if _blank(value):
        result.errors.append("Flight date is required")
        return result
    flight_date = _as_date(value)
    if flight_date is None:
        result.errors.append("Flight date must be a valid YYYY-MM-DD date")
        return result

    today = today or date.today()
    try:
        max_date = today.replace(year=today.year + 1)
    except ValueError:  # 29 February
        max_date = today.replace(year=today.year + 1, day=28)

    if flight_date < today:
        result.errors.append("Please select a future date")
        return result
    if flight_date > max_date:
        result.errors.append("Please select a date within 1 year")
    if flight_date <= today + timedelta(days=RUSH_SALE_DAYS):
        result.warnings.append("Very soon flight - rush sale required")
    return result


def validate_flight_time(value: str | None) -> ValidationResult:
    result = ValidationResult()
    if _blank(value):
        result.errors.append("Flight time is required")
    elif not _TIME_RE.match(value):
        result.errors.append("Please use correct time format (HH:MM)")
    return result


def validate_date_range(departure, return_, label: str = "Return date") -> ValidationResult:
    result = ValidationResult()
    departure_date = _as_date(departure)
    return_date = _as_date(return_)
    if departure_date is None:
        result.errors.append("Departure date is required")
    if return_date is None:
        result.errors.append(f"{label} is required")
    if departure_date and return_date and return_date <= departure_date:
        result.errors.append(f"{label} must be after the departure date")
    return result


def validate_ticket_quantity(quantity, max_quantity: int = MAX_BATCH_QUANTITY) -> ValidationResult:
    result = ValidationResult()
    if not is_valid_number(quantity) or quantity <= 0:
        result.errors.append("Quantity must be greater than 0")
        return result
    if quantity > max_quantity:
        result.errors.append(f"Maximum {max_quantity} tickets can be purchased at once")
    if quantity > LARGE_QUANTITY_WARNING:
        result.warnings.append("Large quantity - ensure sales plan")
    return result


def validate_agent_info(name: str | None, contact: str | None, address: str | None = None) -> ValidationResult:
    result = ValidationResult()
    if not name or len(name.strip()) < 3:
        result.errors.append("Agent name must be at least 3 characters")
    if not validate_bangladeshi_phone(contact):
        result.errors.append("Please provide valid Bangladeshi mobile number")
    if address and address.strip() and len(address.strip()) < 10:
        result.errors.append("Address must be at least 10 characters")
    return result


def validate_passenger_info(name: str | None, passport: str | None, phone: str | None, email: str | None = None) -> ValidationResult:
    result = ValidationResult()
    if not name or len(name.strip()) < 2:
        result.errors.append("Passenger name must be at least 2 characters")
    if not validate_passport_number(passport):
        result.errors.append("Please provide valid passport number (e.g., AB1234567)")
    if not validate_bangladeshi_phone(phone):
        result.errors.append("Please provide valid Bangladeshi mobile number")
    if email and not validate_email(email):
        result.errors.append("Please provide valid email address")
    return result


def validate_passenger_count(pax_count) -> ValidationResult:
    """One booking is one ticket for one passenger."""
    result = ValidationResult()
    if pax_count != 1:
        result.errors.append(
            f"Rule violation: 1 Passenger = 1 Ticket. Please book {pax_count} separate tickets for {pax_count} passengers"
        )
    return result


# Composite validators

def validate_ticket_batch(batch: Mapping, today: date | None = None) -> ValidationResult:
    result = ValidationResult()
    if _blank(batch.get("country_code")):
        result.errors.append("Country selection is required")
    if _blank(batch.get("airline")):
        result.errors.append("Airline selection is required")

    buying_price = batch.get("buying_price")
    quantity = batch.get("quantity")
    result.merge(
        validate_flight_date(batch.get("flight_date"), today=today),
        validate_flight_time(batch.get("flight_time")),
        validate_price(buying_price),
        validate_ticket_quantity(quantity),
        validate_agent_info(batch.get("agent_name"), batch.get("agent_contact"), batch.get("agent_address")),
    )

    if safe_multiply(buying_price, quantity) > MAX_BATCH_TOTAL_COST:
        result.errors.append(f"Total cost cannot exceed {format_currency(MAX_BATCH_TOTAL_COST)}")
    return result


def validate_business_rules(candidate: Mapping, existing: Iterable) -> ValidationResult:
    """Reject buying the same airline's tickets for the same country and date twice."""
    result = ValidationResult()
    key = (candidate.get("country_code"), candidate.get("airline"), _as_date(candidate.get("flight_date")))
    for other in existing:
        if (_field(other, "country_code"), _field(other, "airline"), _as_date(_field(other, "flight_date"))) == key:
            result.errors.append("Tickets already purchased for same airline on this date")
            break
    return result


def validate_group_ticket(data: Mapping) -> ValidationResult:
    result = ValidationResult()
    if _blank(data.get("group_name")):
        result.errors.append("Group name is required")
    if _blank(data.get("agent_name")):
        result.errors.append("Agent name is required")
    if data.get("package_type") not in PACKAGE_TYPES:
        result.errors.append(f"Package type must be one of: {', '.join(PACKAGE_TYPES)}")

    ticket_count = data.get("ticket_count")
    if not isinstance(ticket_count, int) or isinstance(ticket_count, bool) or ticket_count <= 0:
        result.errors.append("Ticket count must be a whole number greater than 0")
    total_cost = data.get("total_cost")
    if not is_valid_number(total_cost) or total_cost <= 0:
        result.errors.append("Total cost must be greater than 0")

    result.merge(validate_date_range(data.get("departure_date"), data.get("return_date")))

    for leg in ("departure", "return"):
        leg_time = data.get(f"{leg}_time")
        if leg_time and not _TIME_RE.match(leg_time):
            result.errors.append(f"{leg.capitalize()} time must use HH:MM format")

    contact = data.get("agent_contact")
    if contact and not validate_bangladeshi_phone(contact):
        result.warnings.append("Agent contact is not a Bangladeshi mobile number")
    return result


# Booking status

STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"confirmed", "cancelled", "expired"}),
    "confirmed": frozenset({"cancelled"}),
    "cancelled": frozenset(),
    "expired": frozenset(),
    # Recognised status with no legal transitions defined yet
    "locked": frozenset(),
}

# Statuses that give the booked seat back to its batch
SEAT_RELEASING_STATUSES = frozenset({"cancelled", "expired"})


def validate_status_transition(current: str, new: str, transitions: Mapping[str, Iterable[str]] = STATUS_TRANSITIONS) -> ValidationResult:
    result = ValidationResult()
    if new not in transitions:
        result.errors.append(f"Unknown status: {new}")
    elif new not in transitions.get(current, ()):
        result.errors.append(f"Invalid status transition: Cannot change from {current} to {new}")
    return result


def validate_status_change(
    current: str,
    new: str,
    flight_date: date | None,
    today: date | None = None,
    transitions: Mapping[str, Iterable[str]] = STATUS_TRANSITIONS,
) -> ValidationResult:
    """Transition table plus the date rule for confirmations."""
    result = validate_status_transition(current, new, transitions)
    if result.is_valid and new == "confirmed":
        today = today or date.today()
        if flight_date is None or flight_date <= today:
            result.errors.append("Cannot confirm booking for past flights")
    return result


def requires_large_amount_confirmation(new_status: str, amount) -> bool:
    return new_status == "confirmed" and is_valid_number(amount) and amount > LARGE_BOOKING_AMOUNT


# Permissions, checked independently of the status table

PERMISSIONS: dict[str, frozenset[str]] = {
    "admin": frozenset({
        "view_buying_price",
        "view_profit",
        "create_batches",
        "edit_batches",
        "delete_batches",
        "override_locks",
        "manage_users",
        "view_tickets",
        "view_all_bookings",
        "create_bookings",
        "confirm_sales",
        "cancel_bookings",
        "partial_payments",
        "system_settings",
    }),
    "manager": frozenset({
        "view_tickets",
        "view_all_bookings",
        "create_bookings",
        "confirm_sales",
        "cancel_bookings",
        "partial_payments",
    }),
    "staff": frozenset({"view_tickets", "create_bookings", "partial_payments"}),
}

STATUS_PERMISSIONS = {"confirmed": "confirm_sales", "cancelled": "cancel_bookings"}


def has_permission(roles: Iterable[str], permission: str) -> bool:
    return any(permission in PERMISSIONS.get(role, ()) for role in roles)


def validate_permission(roles: Iterable[str] | None, permission: str) -> ValidationResult:
    result = ValidationResult()
    roles = list(roles or [])
    if not roles:
        result.errors.append("User must be logged in")
    elif not has_permission(roles, permission):
        result.errors.append(f"No permission for this action: {permission}")
    return result


# Advisory pricing

@dataclass(frozen=True)
class FinancialCalculation:
    total_cost: float
    estimated_selling_price: int
    estimated_revenue: float
    estimated_profit: float
    profit_margin: float
    risk_level: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_cost": self.total_cost,
            "estimated_selling_price": self.estimated_selling_price,
            "estimated_revenue": self.estimated_revenue,
            "estimated_profit": self.estimated_profit,
            "profit_margin": self.profit_margin,
            "risk_level": self.risk_level,
        }


def calculate_financials(buying_price, quantity, markup_percentage=20) -> FinancialCalculation:
    total_cost = safe_multiply(buying_price, quantity)
    selling_price = round_half_up(safe_multiply(buying_price, safe_add(1, markup_percentage / 100)))
    revenue = safe_multiply(selling_price, quantity)
    profit = safe_add(revenue, -total_cost)
    margin = float(round(profit / total_cost * 100, 1)) if total_cost > 0 else 0.0
    quantity = quantity if is_valid_number(quantity) else 0

    if total_cost > 5_000_000 or margin < 10 or quantity > 500:
        risk_level = "high"
    elif total_cost > 1_000_000 or margin < 15 or quantity > 200:
        risk_level = "medium"
    else:
        risk_level = "low"

    return FinancialCalculation(
        total_cost=total_cost,
        estimated_selling_price=selling_price,
        estimated_revenue=revenue,
        estimated_profit=profit,
        profit_margin=margin,
        risk_level=risk_level,
    )
