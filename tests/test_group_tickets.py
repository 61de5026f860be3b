from datetime import timedelta
from typing import List, get_type_hints

import pytest

from conftest import DEPARTURE, RETURN
from ticketpro.models.group_ticket import GroupTicket
from ticketpro.models.umrah_passenger import UmrahWithTransport, UmrahWithoutTransport
from ticketpro.services.errors import (
    GroupTicketInUseError,
    GroupTicketNotFoundError,
    NoTicketsRemainingError,
    PackageTypeMismatchError,
    PassengerAlreadyAssignedError,
    PassengerNotAssignedError,
    ValidationFailedError,
)
from ticketpro.services.group_tickets import DateGroup, GroupTicketService


def new_group(service, **overrides):
    data = {
        "group_name": "Ramadan Group",
        "package_type": "with-transport",
        "departure_date": DEPARTURE,
        "return_date": RETURN,
        "ticket_count": 3,
        "total_cost": 100000,
        "agent_name": "Makkah Tours",
    }
    data.update(overrides)
    ticket, _ = service.create(data)
    return ticket


def add_passenger(db, name="Abdul Karim"):
    p = UmrahWithTransport(
        passenger_name=name,
        pnr="PNR123",
        passport_number="AB1234567",
        flight_airline_name="Biman Bangladesh",
        departure_date=DEPARTURE,
        return_date=RETURN,
        approved_by="Manager",
        reference_agency="Makkah Tours",
        emergency_flight_contact="01712345678",
        passenger_mobile="01812345678",
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def test_create_sets_remaining_and_average(db):
    service = GroupTicketService(db)
    ticket = new_group(service, group_name="  Spaced  ", agent_contact="")
    assert ticket.remaining_tickets == 3
    assert ticket.assigned_count == 0
    assert ticket.average_cost_per_ticket == 33333
    assert ticket.group_name == "Spaced"
    assert ticket.agent_contact is None


def test_create_rejects_invalid_payload(db):
    service = GroupTicketService(db)
    with pytest.raises(ValidationFailedError) as exc:
        new_group(service, ticket_count=0, return_date=DEPARTURE)
    assert "Ticket count must be a whole number greater than 0" in exc.value.result.errors
    assert db.query(GroupTicket).count() == 0


def test_get_missing(db):
    with pytest.raises(GroupTicketNotFoundError):
        GroupTicketService(db).get(999)


def test_claims_exhaust_the_pool(db):
    service = GroupTicketService(db)
    ticket = new_group(service, ticket_count=2)
    for name in ("One", "Two"):
        p = add_passenger(db, name)
        service.assign_passenger(ticket.id, p.id, "with-transport")

    extra = add_passenger(db, "Three")
    with pytest.raises(NoTicketsRemainingError):
        service.assign_passenger(ticket.id, extra.id, "with-transport")
    db.rollback()

    ticket = service.get(ticket.id)
    assert ticket.remaining_tickets == 0
    assert ticket.assigned_count == 2
    assert db.get(UmrahWithTransport, extra.id).group_ticket_id is None


def test_assign_is_idempotent_and_exclusive(db):
    service = GroupTicketService(db)
    first = new_group(service)
    second = new_group(service, group_name="Second")
    p = add_passenger(db)

    service.assign_passenger(first.id, p.id, "with-transport")
    service.assign_passenger(first.id, p.id, "with-transport")
    assert service.get(first.id).remaining_tickets == 2

    with pytest.raises(PassengerAlreadyAssignedError):
        service.assign_passenger(second.id, p.id, "with-transport")
    assert service.get(second.id).remaining_tickets == 3


def test_package_type_must_match(db):
    service = GroupTicketService(db)
    ticket = new_group(service, package_type="without-transport")
    p = add_passenger(db)
    with pytest.raises(PackageTypeMismatchError):
        service.assign_passenger(ticket.id, p.id, "with-transport")


def test_unassign_returns_the_ticket(db):
    service = GroupTicketService(db)
    ticket = new_group(service)
    p = add_passenger(db)
    service.assign_passenger(ticket.id, p.id, "with-transport")

    service.unassign_passenger(p.id, "with-transport")
    assert service.get(ticket.id).remaining_tickets == 3
    with pytest.raises(PassengerNotAssignedError):
        service.unassign_passenger(p.id, "with-transport")


def test_release_never_exceeds_capacity(db):
    service = GroupTicketService(db)
    ticket = new_group(service)
    service.release(ticket.id)
    db.commit()
    assert service.get(ticket.id).remaining_tickets == 3


def test_find_available_filters_exact_dates_and_empty_pools(db):
    service = GroupTicketService(db)
    open_pool = new_group(service, ticket_count=1)
    full_pool = new_group(service, group_name="Full", ticket_count=1)
    new_group(service, group_name="Other dates", return_date=RETURN + timedelta(days=1))
    new_group(service, group_name="Other type", package_type="without-transport")
    service.assign_passenger(full_pool.id, add_passenger(db).id, "with-transport")

    found = service.find_available("with-transport", DEPARTURE, RETURN)
    assert [t.id for t in found] == [open_pool.id]


def test_delete_without_passengers(db):
    service = GroupTicketService(db)
    ticket = new_group(service)
    assert service.delete(ticket.id) == 0
    assert db.query(GroupTicket).count() == 0


def test_delete_in_use_needs_force(db):
    service = GroupTicketService(db)
    ticket = new_group(service)
    p = add_passenger(db)
    service.assign_passenger(ticket.id, p.id, "with-transport")

    with pytest.raises(GroupTicketInUseError) as exc:
        service.delete(ticket.id)
    detail = exc.value.to_detail()
    assert detail["can_force_delete"] is True
    assert detail["assigned_count"] == 1
    assert detail["passengers"][0]["name"] == "Abdul Karim"
    assert db.query(GroupTicket).count() == 1

    assert service.delete(ticket.id, force=True) == 1
    assert db.query(GroupTicket).count() == 0
    passenger = db.get(UmrahWithTransport, p.id)
    db.refresh(passenger)
    assert passenger.group_ticket_id is None


def test_update_capacity_keeps_assigned_count(db):
    service = GroupTicketService(db)
    ticket = new_group(service, ticket_count=3)
    service.assign_passenger(ticket.id, add_passenger(db).id, "with-transport")

    ticket, _ = service.update(ticket.id, {"ticket_count": 5, "total_cost": 150000})
    assert ticket.ticket_count == 5
    assert ticket.remaining_tickets == 4
    assert ticket.average_cost_per_ticket == 30000

    ticket, _ = service.update(ticket.id, {"ticket_count": 1})
    assert ticket.remaining_tickets == 0

    with pytest.raises(ValidationFailedError):
        service.update(ticket.id, {"ticket_count": 0})


def test_update_rejects_capacity_below_assigned_and_type_change(db):
    service = GroupTicketService(db)
    ticket = new_group(service, ticket_count=3)
    service.assign_passenger(ticket.id, add_passenger(db, "One").id, "with-transport")
    service.assign_passenger(ticket.id, add_passenger(db, "Two").id, "with-transport")

    with pytest.raises(ValidationFailedError) as exc:
        service.update(ticket.id, {"ticket_count": 1, "package_type": "without-transport"})
    errors = exc.value.result.errors
    assert "Package type cannot change while passengers are assigned" in errors
    assert any(e.startswith("Ticket count cannot be lower") for e in errors)
    assert service.get(ticket.id).ticket_count == 3


def test_update_ignores_remaining_tickets(db):
    service = GroupTicketService(db)
    ticket = new_group(service)
    ticket, _ = service.update(ticket.id, {"remaining_tickets": 0, "group_name": "Renamed"})
    assert ticket.group_name == "Renamed"
    assert ticket.remaining_tickets == 3


def test_group_by_dates(db):
    service = GroupTicketService(db)
    later = DEPARTURE + timedelta(days=7)
    new_group(service, departure_date=later, return_date=later + timedelta(days=10))
    new_group(service, group_name="A", ticket_count=2, total_cost=50000)
    new_group(service, group_name="B", ticket_count=4, total_cost=70000)

    groups = service.group_by_dates()
    assert [(g.departure_date, g.return_date) for g in groups] == [
        (DEPARTURE, RETURN),
        (later, later + timedelta(days=10)),
    ]
    first = groups[0]
    assert first.group_count == 2
    assert first.total_tickets == 6
    assert first.total_cost == 120000


def test_assigned_passengers_spans_both_tables(db):
    service = GroupTicketService(db)
    ticket = new_group(service, package_type="without-transport")
    p = UmrahWithoutTransport(
        flight_departure_date=DEPARTURE,
        return_date=RETURN,
        passenger_name="Fatema Begum",
        passport_number="BC7654321",
        entry_recorded_by="Staff",
        total_amount=120000,
        amount_paid=0,
    )
    db.add(p)
    db.commit()
    service.assign_passenger(ticket.id, p.id, "without-transport")

    assert service.assigned_passengers(ticket.id) == [
        {"id": p.id, "name": "Fatema Begum", "type": "without-transport", "pnr": None, "passport": "BC7654321"}
    ]


def test_query_method_annotations_resolve():
    hints = get_type_hints(GroupTicketService.group_by_dates)
    assert hints["return"] == List[DateGroup]
    assert get_type_hints(GroupTicketService.find_available)["return"] == List[GroupTicket]


def test_date_change_with_passengers_warns(db):
    service = GroupTicketService(db)
    ticket = new_group(service)
    later = RETURN + timedelta(days=3)

    _, result = service.update(ticket.id, {"return_date": later})
    assert result.warnings == []

    p = add_passenger(db)
    service.assign_passenger(ticket.id, p.id, "with-transport")
    ticket, result = service.update(ticket.id, {"departure_date": DEPARTURE + timedelta(days=1)})
    assert ticket.departure_date == DEPARTURE + timedelta(days=1)
    assert result.warnings == [
        "Travel dates changed while 1 passenger(s) are assigned; their own dates were not updated"
    ]
    assert db.get(UmrahWithTransport, p.id).departure_date == DEPARTURE
