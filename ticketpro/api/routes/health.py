from fastapi import APIRouter

from ticketpro.core.config import settings

router = APIRouter()


@router.get("/")
def health():
    return {"status": "ok", "env": settings.env}
