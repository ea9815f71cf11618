from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import settings
from app.models import Envelope

router = APIRouter(prefix="/setup", tags=["setup"])


class SetupStatus(BaseModel):
    is_configured: bool
    has_ai_key: bool
    has_jwt_secret: bool
    missing_configs: list[str]


def get_setup_status() -> SetupStatus:
    missing: list[str] = []
    if not settings.has_ai_key:
        missing.append("LLM_API_KEY")
    if not settings.has_custom_secret:
        missing.append("SECRET_KEY")
    return SetupStatus(
        is_configured=not missing,
        has_ai_key=settings.has_ai_key,
        has_jwt_secret=settings.has_custom_secret,
        missing_configs=missing,
    )


@router.get("/status", response_model=Envelope[SetupStatus])
def read_setup_status() -> Any:
    """Report which optional settings are still missing; never exposes their values."""
    return Envelope(data=get_setup_status())
