import logging
from datetime import date, timedelta

from ticketpro.db.session import engine, SessionLocal
from ticketpro.models import booking  # noqa: F401
from ticketpro.models import group_ticket  # noqa: F401
from ticketpro.models import ticket_batch  # noqa: F401
from ticketpro.models import umrah_passenger  # noqa: F401
from ticketpro.models import user  # noqa: F401
from ticketpro.models.base import Base
from ticketpro.models.group_ticket import GroupTicket
from ticketpro.models.user import User
from ticketpro.core.config import settings
from ticketpro.core.security import get_password_hash

logger = logging.getLogger(__name__)


def create_tables():
    Base.metadata.create_all(bind=engine)


def _ensure_user(db, email: str, password: str, full_name: str, role: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(
            email=email,
            full_name=full_name,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("[startup] Seeded %s user %s", role, email)
    return user


def seed_demo_data():
    db = SessionLocal()
    try:
        # Seed default admin, manager and staff (idempotent)
        _ensure_user(
            db,
            (settings.seed_admin_email or "admin@example.com").lower(),
            settings.seed_admin_password or "Admin1234!",
            "Admin",
            "admin",
        )
        _ensure_user(
            db,
            (settings.seed_manager_email or "manager@example.com").lower(),
            settings.seed_manager_password or "Manager1234!",
            "Manager",
            "manager",
        )
        _ensure_user(
            db,
            (settings.seed_staff_email or "staff@example.com").lower(),
            settings.seed_staff_password or "Staff1234!",
            "Staff",
            "staff",
        )

        if db.query(GroupTicket).count() == 0:
            departure = date.today() + timedelta(days=30)
            db.add_all([
                GroupTicket(
                    group_name="Demo Umrah Group A",
                    package_type="with-transport",
                    departure_date=departure,
                    return_date=departure + timedelta(days=14),
                    ticket_count=40,
                    remaining_tickets=40,
                    total_cost=3_400_000,
                    agent_name="Demo Travels",
                    agent_contact="01712345678",
                    departure_airline="Biman Bangladesh",
                    departure_route="DAC-JED",
                    return_airline="Biman Bangladesh",
                    return_route="JED-DAC",
                ),
                GroupTicket(
                    group_name="Demo Umrah Group B",
                    package_type="without-transport",
                    departure_date=departure,
                    return_date=departure + timedelta(days=14),
                    ticket_count=20,
                    remaining_tickets=20,
                    total_cost=1_500_000,
                    agent_name="Demo Travels",
                ),
            ])
            db.commit()
            logger.info("[startup] Seeded demo group tickets")
    finally:
        db.close()
