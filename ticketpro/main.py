import logging
import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ticketpro.api.router import api_router
from ticketpro.core.config import settings
from ticketpro.db.init_db import seed_demo_data
from ticketpro.services.errors import DomainError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _run_migrations_if_needed():
    """Apply Alembic migrations automatically in production if enabled.

    Controlled by env var AUTO_APPLY_MIGRATIONS (default: '1'). Safe to run repeatedly.
    """
    if settings.env.lower() != "prod":
        return
    if os.getenv("AUTO_APPLY_MIGRATIONS", "1") != "1":
        return
    from alembic import command
    from alembic.config import Config

    alembic_ini = Path(__file__).resolve().parents[1] / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("[migrate] alembic.ini not found at %s, skipping auto-migrations", alembic_ini)
        return
    cfg = Config(str(alembic_ini))
    # Resolve script_location when launched from an arbitrary CWD
    script_location = Path(__file__).resolve().parents[1] / "alembic"
    if script_location.exists():
        cfg.set_main_option("script_location", str(script_location))
    logger.info("[migrate] Applying Alembic migrations -> head ...")
    try:
        command.upgrade(cfg, "head")
    except Exception:  # pragma: no cover
        # Keep serving; migrations can be retried manually
        logger.exception("[migrate] Migration failed")
        return
    logger.info("[migrate] Migrations applied successfully")


app = FastAPI(title=settings.app_name, version="0.1.0")

# Configurable CORS origins (CORS_ORIGINS env). If empty -> dev defaults.
origins = settings.cors_origins
logger.info("[startup] Resolved CORS origins: %s", origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content={"detail": jsonable_encoder(exc.to_detail())})


app.include_router(api_router)


@app.on_event("startup")
def startup():
    # Seed only after migrations are applied
    _run_migrations_if_needed()
    if settings.env.lower() in {"dev", "development"}:
        seed_demo_data()
