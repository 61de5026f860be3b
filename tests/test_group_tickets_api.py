from datetime import timedelta

from conftest import DEPARTURE, RETURN, seed_group_ticket


def group_payload(**overrides):
    payload = {
        "groupName": "Ramadan Group",
        "packageType": "with-transport",
        "departureDate": DEPARTURE.isoformat(),
        "returnDate": RETURN.isoformat(),
        "ticketCount": 40,
        "totalCost": 3400000,
        "agentName": "Makkah Tours",
        "departureTime": "10:30",
    }
    payload.update(overrides)
    return payload


def passenger_payload(**overrides):
    payload = {
        "passenger_name": "Abdul Karim",
        "pnr": "PNR123",
        "passport_number": "AB1234567",
        "flight_airline_name": "Biman Bangladesh",
        "departure_date": DEPARTURE.isoformat(),
        "return_date": RETURN.isoformat(),
        "approved_by": "Manager",
        "reference_agency": "Makkah Tours",
        "emergency_flight_contact": "01712345678",
        "passenger_mobile": "01812345678",
    }
    payload.update(overrides)
    return payload


def test_requires_token(client):
    r = client.get("/umrah/group-tickets")
    assert r.status_code == 401


def test_create_accepts_camel_case_and_returns_canonical_names(client, admin_headers):
    r = client.post("/umrah/group-tickets", json=group_payload(), headers=admin_headers)
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["group_name"] == "Ramadan Group"
    assert data["remaining_tickets"] == 40
    assert data["average_cost_per_ticket"] == 85000
    assert data["departure_time"] == "10:30"
    assert data["warnings"] == []


def test_create_validation_errors(client, admin_headers):
    r = client.post(
        "/umrah/group-tickets",
        json=group_payload(ticketCount=0, returnDate=DEPARTURE.isoformat()),
        headers=admin_headers,
    )
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["code"] == "VALIDATION_FAILED"
    assert "Ticket count must be a whole number greater than 0" in detail["errors"]
    assert "Return date must be after the departure date" in detail["errors"]


def test_create_requires_permission(client, staff_headers, manager_headers):
    assert client.post("/umrah/group-tickets", json=group_payload(), headers=staff_headers).status_code == 403
    assert client.post("/umrah/group-tickets", json=group_payload(), headers=manager_headers).status_code == 403


def test_list_search_and_get(client, staff_headers, admin_headers):
    client.post("/umrah/group-tickets", json=group_payload(), headers=admin_headers)
    client.post("/umrah/group-tickets", json=group_payload(groupName="Hajj Prep", agentName="Other"), headers=admin_headers)

    r = client.get("/umrah/group-tickets", params={"search": "hajj"}, headers=staff_headers)
    assert r.status_code == 200
    assert [g["group_name"] for g in r.json()] == ["Hajj Prep"]

    group_id = r.json()[0]["id"]
    r = client.get(f"/umrah/group-tickets/{group_id}", headers=staff_headers)
    assert r.status_code == 200
    assert r.json()["agent_name"] == "Other"

    r = client.get("/umrah/group-tickets/9999", headers=staff_headers)
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "GROUP_TICKET_NOT_FOUND"


def test_get_returns_every_saved_field(client, staff_headers, admin_headers):
    submitted = group_payload(
        agentContact="01712345678",
        purchaseNotes="Block booked through Dhaka office",
        departureAirline="Saudia",
        departureFlightNumber="SV803",
        departureRoute="DAC-JED",
        returnAirline="Biman Bangladesh",
        returnFlightNumber="BG136",
        returnTime="22:15",
        returnRoute="MED-DAC",
    )
    r = client.post("/umrah/group-tickets", json=submitted, headers=admin_headers)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created.pop("warnings") == []

    fetched = client.get(f"/umrah/group-tickets/{created['id']}", headers=staff_headers).json()
    assert fetched == created
    for camel, value in submitted.items():
        snake = "".join("_" + c.lower() if c.isupper() else c for c in camel)
        assert fetched[snake] == value, snake


def test_by_dates(client, staff_headers):
    seed_group_ticket(ticket_count=2, total_cost=100000)
    seed_group_ticket(ticket_count=3, total_cost=200000)
    seed_group_ticket(departure_date=RETURN, return_date=RETURN + timedelta(days=10))

    r = client.get("/umrah/group-tickets/by-dates", headers=staff_headers)
    assert r.status_code == 200
    groups = r.json()
    assert len(groups) == 2
    assert groups[0]["departure_date"] == DEPARTURE.isoformat()
    assert groups[0]["group_count"] == 2
    assert groups[0]["total_tickets"] == 5
    assert groups[0]["total_cost"] == 300000
    assert len(groups[0]["groups"]) == 2


def test_available_excludes_exhausted(client, staff_headers):
    open_id = seed_group_ticket(ticket_count=2)
    seed_group_ticket(ticket_count=2, remaining=0)
    seed_group_ticket(package_type="without-transport")

    r = client.get(
        "/umrah/group-tickets/available",
        params={
            "package_type": "with-transport",
            "departure_date": DEPARTURE.isoformat(),
            "return_date": RETURN.isoformat(),
        },
        headers=staff_headers,
    )
    assert r.status_code == 200
    assert [g["id"] for g in r.json()] == [open_id]


def test_update_does_not_accept_remaining(client, admin_headers):
    group_id = seed_group_ticket(ticket_count=3)
    r = client.put(
        f"/umrah/group-tickets/{group_id}",
        json={"ticketCount": 6, "remainingTickets": 0},
        headers=admin_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["ticket_count"] == 6
    assert r.json()["remaining_tickets"] == 6


def test_assign_list_and_unassign(client, admin_headers, staff_headers):
    group_id = seed_group_ticket(ticket_count=2)
    r = client.post("/umrah/with-transport", json=passenger_payload(), headers=staff_headers)
    assert r.status_code == 201, r.text
    passenger_id = r.json()["id"]

    r = client.post(
        f"/umrah/group-tickets/{group_id}/assignments",
        json={"passengerId": passenger_id, "passengerType": "with-transport"},
        headers=staff_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["group_ticket"]["remaining_tickets"] == 1

    r = client.get(f"/umrah/group-tickets/{group_id}/passengers", headers=staff_headers)
    assert r.json() == [
        {"id": passenger_id, "name": "Abdul Karim", "type": "with-transport", "pnr": "PNR123", "passport": "AB1234567"}
    ]

    r = client.delete(f"/umrah/group-tickets/assignments/with-transport/{passenger_id}", headers=staff_headers)
    assert r.status_code == 200
    assert client.get(f"/umrah/group-tickets/{group_id}", headers=staff_headers).json()["remaining_tickets"] == 2


def test_delete_two_step_force(client, admin_headers):
    group_id = seed_group_ticket(ticket_count=2)
    r = client.post("/umrah/with-transport", json=passenger_payload(group_ticket_id=group_id), headers=admin_headers)
    assert r.status_code == 201, r.text
    passenger_id = r.json()["id"]

    r = client.delete(f"/umrah/group-tickets/{group_id}", headers=admin_headers)
    assert r.status_code == 409
    detail = r.json()["detail"]
    assert detail["can_force_delete"] is True
    assert detail["assigned_count"] == 1
    assert detail["passengers"][0]["id"] == passenger_id

    r = client.delete(f"/umrah/group-tickets/{group_id}", params={"force": "true"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"ok": True, "unassigned_count": 1}

    r = client.get(f"/umrah/with-transport/{passenger_id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["group_ticket_id"] is None


def test_delete_requires_admin(client, manager_headers):
    group_id = seed_group_ticket()
    assert client.delete(f"/umrah/group-tickets/{group_id}", headers=manager_headers).status_code == 403
