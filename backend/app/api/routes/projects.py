import json
import logging
import uuid
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlmodel import Session
from sse_starlette.sse import EventSourceResponse

from app import crud
from app.api.deps import CurrentUser, SessionDep
from app.api.rate_limit import generation_limiter
from app.core.db import get_session
from app.core.errors import GenerationInProgressError, InvalidRequestError
from app.models import (
    Envelope,
    GenerationPublic,
    GenerationTriggered,
    Project,
    ProjectPublic,
    ProjectStatus,
    ProjectWithGenerations,
    User,
)
from app.packaging import archive_download_name
from app.project_config import parse_project_config, validate_project_config
from app.services.generation import build_download, iter_generation, run_generation_in_background

router = APIRouter(prefix="/projects", tags=["projects"])
logger = logging.getLogger(__name__)


def _get_owned_project(session: Session, project_id: uuid.UUID, user: User) -> Project:
    project = session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if project.owner_id != user.id:
        raise HTTPException(status_code=403, detail="Not enough permissions")
    return project


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Envelope[ProjectPublic])
def create_new_project(
    session: SessionDep,
    current_user: CurrentUser,
    payload: dict[str, Any] = Body(...),
) -> Any:
    """
    Validate a project configuration and store it as a DRAFT project.
    """
    result = validate_project_config(payload)
    if not result.valid:
        raise InvalidRequestError([error.model_dump() for error in result.errors])
    config = parse_project_config(payload)
    project = crud.create_project(session=session, config=config, owner_id=current_user.id)
    logger.info("Project %s created by %s (template=%s)", project.id, current_user.id, project.template)
    return Envelope(data=project)


@router.get("/", response_model=Envelope[list[ProjectPublic]])
def read_projects(session: SessionDep, current_user: CurrentUser) -> Any:
    return Envelope(data=crud.list_projects(session=session, owner_id=current_user.id))


@router.get("/{id}", response_model=Envelope[ProjectWithGenerations])
def read_project(id: uuid.UUID, session: SessionDep, current_user: CurrentUser) -> Any:
    project = _get_owned_project(session, id, current_user)
    generations = crud.list_recent_generations_for_project(session=session, project_id=project.id)
    data = ProjectWithGenerations.model_validate(
        project,
        update={"generations": [GenerationPublic.model_validate(g) for g in generations]},
    )
    return Envelope(data=data)


@router.post(
    "/{id}/generate",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=Envelope[GenerationTriggered],
    dependencies=[Depends(generation_limiter)],
)
def trigger_generation(
    id: uuid.UUID,
    background_tasks: BackgroundTasks,
    session: SessionDep,
    current_user: CurrentUser,
) -> Any:
    """
    Start generating the project and return immediately.

    Progress is visible through the project status and its generation history.
    """
    project = _get_owned_project(session, id, current_user)
    if not crud.mark_project_generating(session=session, project_id=project.id):
        raise GenerationInProgressError()
    background_tasks.add_task(run_generation_in_background, project.id, current_user.id)
    logger.info("Generation queued for project %s", project.id)
    return Envelope(data=GenerationTriggered(project_id=project.id, status=ProjectStatus.GENERATING))


async def _generation_event_stream(project_id: uuid.UUID, user_id: uuid.UUID):
    with get_session() as session:
        project = session.get(Project, project_id)
        if project is None:
            yield {"event": "error", "data": json.dumps({"status": "error", "message": "Project not found"})}
            return
        try:
            async for event in iter_generation(session, project, user_id):
                yield {"event": "phase", "data": event.model_dump_json()}
        except Exception:
            # Details are logged and stored on the generation row
            yield {"event": "error", "data": json.dumps({"status": "error", "message": "Generation failed"})}
            return
        session.refresh(project)
        yield {
            "event": "done",
            "data": json.dumps({"status": project.status.value, "project_id": str(project_id)}),
        }


@router.get("/{id}/generate/stream", dependencies=[Depends(generation_limiter)])
def stream_generation(id: uuid.UUID, session: SessionDep, current_user: CurrentUser):
    """Run the generation inline and stream phase progress via SSE."""
    project = _get_owned_project(session, id, current_user)
    if not crud.mark_project_generating(session=session, project_id=project.id):
        raise GenerationInProgressError()
    return EventSourceResponse(_generation_event_stream(project.id, current_user.id))


@router.get("/{id}/download")
def download_project(id: uuid.UUID, session: SessionDep, current_user: CurrentUser) -> FileResponse:
    project = _get_owned_project(session, id, current_user)
    archive = build_download(project)
    return FileResponse(archive, media_type="application/zip", filename=archive_download_name(project.id))
