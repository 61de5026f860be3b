import os

# Must be set before ticketpro is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from ticketpro.core.security import create_access_token
from ticketpro.db.init_db import create_tables
from ticketpro.db.session import SessionLocal, engine
from ticketpro.main import app
from ticketpro.models.base import Base
from ticketpro.models.group_ticket import GroupTicket


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    create_tables()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def auth_headers(role: str, email: str | None = None) -> dict:
    token = create_access_token(subject=email or f"{role}@example.com", roles=[role])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_headers("admin")


@pytest.fixture
def manager_headers():
    return auth_headers("manager")


@pytest.fixture
def staff_headers():
    return auth_headers("staff")


DEPARTURE = date.today() + timedelta(days=30)
RETURN = DEPARTURE + timedelta(days=14)


def seed_group_ticket(
    ticket_count: int = 3,
    total_cost: int = 300000,
    package_type: str = "with-transport",
    departure_date: date = DEPARTURE,
    return_date: date = RETURN,
    remaining: int | None = None,
) -> int:
    db = SessionLocal()
    try:
        ticket = GroupTicket(
            group_name="Test Group",
            package_type=package_type,
            departure_date=departure_date,
            return_date=return_date,
            ticket_count=ticket_count,
            total_cost=total_cost,
            remaining_tickets=ticket_count if remaining is None else remaining,
            agent_name="Test Agent",
        )
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket.id
    finally:
        db.close()
