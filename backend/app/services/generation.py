"""
Runs a project's generation pipeline and persists the outcome.

The HTTP layer only flips the project into GENERATING; everything after that
happens here, on a session owned by the run.
"""

import asyncio
import json
import logging
import shutil
import uuid
from collections.abc import AsyncIterator
from pathlib import Path

from sqlmodel import Session

from app import crud
from app.agent.artifacts import GeneratedFile, GeneratedProject, PhaseEvent
from app.agent.assembly import render_env_file
from app.agent.orchestrator import Orchestrator
from app.core.config import settings
from app.core.db import get_session
from app.core.errors import ProjectNotReadyError
from app.models import Generation, GenerationStatus, Project, ProjectStatus
from app.packaging import build_archive, write_generated_files
from app.project_config import parse_project_config

logger = logging.getLogger(__name__)

GENERATION_ERROR_MAX_CHARS = 2000


def project_output_dir(project_id: uuid.UUID | str) -> Path:
    return Path(settings.GENERATED_PROJECTS_DIR) / str(project_id)


def build_output_files(result: GeneratedProject) -> list[GeneratedFile]:
    """Agent files plus the derived package.json, README.md and .env.example."""
    derived = [
        GeneratedFile(
            path="package.json",
            content=json.dumps(result.package_manifest, indent=2) + "\n",
            language="json",
            description="Workspace manifest",
        ),
        GeneratedFile(path="README.md", content=result.readme, language="markdown"),
        GeneratedFile(
            path=".env.example",
            content=render_env_file(result.env_example),
            language="dotenv",
            description="Environment variables the project expects",
        ),
    ]
    derived_paths = {file.path for file in derived}
    return [file for file in result.files if file.path not in derived_paths] + derived


def _record_failure(
    session: Session,
    project_id: uuid.UUID,
    generation_id: uuid.UUID | None,
    orchestrator: Orchestrator | None,
    error: str,
) -> None:
    session.rollback()
    completed = orchestrator.get_context().completed_tasks if orchestrator else []
    crud.finish_project(session=session, project_id=project_id, status=ProjectStatus.ERROR)
    if generation_id is not None:
        crud.finish_generation(
            session=session,
            generation_id=generation_id,
            status=GenerationStatus.FAILED,
            error=error,
            completed_phases=list(completed),
        )


async def iter_generation(
    session: Session,
    project: Project,
    user_id: uuid.UUID,
) -> AsyncIterator[PhaseEvent]:
    """
    Run the pipeline for a project already marked GENERATING, yielding phase events.

    On success the files are written to disk and the project becomes READY. Any
    failure marks the project ERROR and the generation row failed, then
    propagates. Closing the iterator before it finishes counts as a failure.
    """
    project_id = project.id
    generation_id: uuid.UUID | None = None
    orchestrator: Orchestrator | None = None

    try:
        generation_id = crud.create_generation(session=session, project_id=project_id, owner_id=user_id).id
        config = parse_project_config(project.config)
        orchestrator = Orchestrator(str(project_id), str(user_id), config)
        async for event in orchestrator.iter_phases():
            yield event
        result = orchestrator.result

        files = build_output_files(result)
        output_dir = project_output_dir(project_id)
        if output_dir.exists():
            shutil.rmtree(output_dir)
        written = write_generated_files(output_dir, files)
    except Exception as exc:
        logger.error("Generation %s failed for project %s", generation_id, project_id, exc_info=True)
        error = str(exc)[:GENERATION_ERROR_MAX_CHARS] or type(exc).__name__
        _record_failure(session, project_id, generation_id, orchestrator, error)
        raise
    except (GeneratorExit, asyncio.CancelledError):
        logger.warning("Generation %s for project %s was cancelled", generation_id, project_id)
        _record_failure(session, project_id, generation_id, orchestrator, "cancelled")
        raise

    crud.finish_project(
        session=session,
        project_id=project_id,
        status=ProjectStatus.READY,
        generated_path=str(written),
    )
    crud.finish_generation(
        session=session,
        generation_id=generation_id,
        status=GenerationStatus.COMPLETED,
        files_count=len(files),
        completed_phases=list(orchestrator.get_context().completed_tasks),
    )
    logger.info("Generation %s completed for project %s (%s files)", generation_id, project_id, len(files))


async def run_generation(project_id: uuid.UUID, user_id: uuid.UUID) -> Generation | None:
    """Generate a project end to end on a fresh session. Returns the finished generation row."""
    with get_session() as session:
        project = session.get(Project, project_id)
        if project is None:
            logger.warning("Project %s disappeared before generation started", project_id)
            return None
        async for _ in iter_generation(session, project, user_id):
            pass
        return crud.list_recent_generations_for_project(session=session, project_id=project_id, limit=1)[0]


async def run_generation_in_background(project_id: uuid.UUID, user_id: uuid.UUID) -> None:
    try:
        await run_generation(project_id, user_id)
    except Exception:
        logger.exception("Background generation failed for project %s", project_id)
        _release_project(project_id)


def _release_project(project_id: uuid.UUID) -> None:
    """Move a project still stuck in GENERATING to ERROR so it can be regenerated."""
    with get_session() as session:
        project = session.get(Project, project_id)
        if project is not None and project.status == ProjectStatus.GENERATING:
            crud.finish_project(session=session, project_id=project_id, status=ProjectStatus.ERROR)


def build_download(project: Project) -> Path:
    """Zip a READY project's output into ARCHIVES_DIR and return the archive path."""
    if project.status != ProjectStatus.READY or not project.generated_path:
        raise ProjectNotReadyError()
    source = Path(project.generated_path)
    if not source.is_dir():
        raise ProjectNotReadyError("Generated files are no longer available, regenerate the project")
    return build_archive(source, Path(settings.ARCHIVES_DIR) / f"{project.id}.zip")
