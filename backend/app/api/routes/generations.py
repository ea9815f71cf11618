import uuid
from typing import Any

from fastapi import APIRouter, HTTPException

from app import crud
from app.api.deps import CurrentUser, SessionDep
from app.models import Envelope, Generation, GenerationPublic

router = APIRouter(prefix="/generations", tags=["generations"])


@router.get("/", response_model=Envelope[list[GenerationPublic]])
def read_generations(session: SessionDep, current_user: CurrentUser) -> Any:
    """
    Latest generation runs across all of the user's projects.
    """
    return Envelope(data=crud.list_generations(session=session, owner_id=current_user.id))


@router.get("/{id}", response_model=Envelope[GenerationPublic])
def read_generation(id: uuid.UUID, session: SessionDep, current_user: CurrentUser) -> Any:
    generation = session.get(Generation, id)
    if not generation:
        raise HTTPException(status_code=404, detail="Generation not found")
    if generation.owner_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not enough permissions")
    return Envelope(data=generation)
