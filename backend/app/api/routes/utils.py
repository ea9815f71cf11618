from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel
from sqlmodel import select

from app.api.deps import SessionDep
from app.core.config import settings
from app.models import Envelope

router = APIRouter(prefix="/utils", tags=["utils"])


class HealthStatus(BaseModel):
    database: str
    environment: str


@router.get("/health-check/", response_model=Envelope[HealthStatus])
def health_check(session: SessionDep) -> Any:
    session.exec(select(1))
    return Envelope(data=HealthStatus(database="ok", environment=settings.ENVIRONMENT))
