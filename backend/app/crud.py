import uuid
from typing import Any

from sqlalchemy import update
from sqlmodel import Session, col, select

from app.core.security import get_password_hash, verify_password
from app.models import (
    Generation,
    GenerationStatus,
    Project,
    ProjectStatus,
    User,
    UserRegister,
    get_datetime_utc,
)
from app.project_config import ProjectConfig


def create_user(*, session: Session, user_create: UserRegister) -> User:
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def update_user_password(*, session: Session, db_user: User, new_password: str) -> User:
    db_user.hashed_password = get_password_hash(new_password)
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    session_user = session.exec(statement).first()
    return session_user


# Dummy hash to use for timing attack prevention when user is not found
# This is an Argon2 hash of a random password, used to ensure constant-time comparison
DUMMY_HASH = "$argon2id$v=19$m=65536,t=3,p=4$MjQyZWE1MzBjYjJlZTI0Yw$YTU4NGM5ZTZmYjE2NzZlZjY0ZWY3ZGRkY2U2OWFjNjk"


def authenticate(*, session: Session, email: str, password: str) -> User | None:
    db_user = get_user_by_email(session=session, email=email)
    if not db_user:
        # Keep response time independent of whether the email exists
        verify_password(password, DUMMY_HASH)
        return None
    verified, updated_password_hash = verify_password(password, db_user.hashed_password)
    if not verified:
        return None
    if updated_password_hash:
        db_user.hashed_password = updated_password_hash
    db_user.last_login_at = get_datetime_utc()
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


def create_project(*, session: Session, config: ProjectConfig, owner_id: uuid.UUID) -> Project:
    db_project = Project(
        name=config.name,
        description=config.description,
        template=config.template.value,
        config=config.model_dump(mode="json", by_alias=True, exclude_none=True),
        owner_id=owner_id,
        status=ProjectStatus.DRAFT,
    )
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project


def list_projects(*, session: Session, owner_id: uuid.UUID) -> list[Project]:
    statement = (
        select(Project)
        .where(Project.owner_id == owner_id)
        .order_by(col(Project.created_at).desc())
    )
    return list(session.exec(statement).all())


def list_recent_generations_for_project(
    *, session: Session, project_id: uuid.UUID, limit: int = 10
) -> list[Generation]:
    statement = (
        select(Generation)
        .where(Generation.project_id == project_id)
        .order_by(col(Generation.created_at).desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())


def mark_project_generating(*, session: Session, project_id: uuid.UUID) -> bool:
    """
    Move a project into GENERATING unless it is already there.

    The check and the write are one conditional UPDATE, so of two concurrent
    triggers for the same project exactly one wins.
    """
    statement = (
        update(Project)
        .where(col(Project.id) == project_id, col(Project.status) != ProjectStatus.GENERATING)
        .values(status=ProjectStatus.GENERATING, updated_at=get_datetime_utc())
    )
    result = session.connection().execute(statement)
    session.commit()
    session.expire_all()
    return result.rowcount == 1


def finish_project(
    *,
    session: Session,
    project_id: uuid.UUID,
    status: ProjectStatus,
    generated_path: str | None = None,
) -> Project | None:
    if status not in (ProjectStatus.READY, ProjectStatus.ERROR):
        raise ValueError(f"{status} is not a terminal project status")
    db_project = session.get(Project, project_id)
    if db_project is None:
        return None
    db_project.status = status
    if generated_path is not None:
        db_project.generated_path = generated_path
    db_project.updated_at = get_datetime_utc()
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project


def create_generation(*, session: Session, project_id: uuid.UUID, owner_id: uuid.UUID) -> Generation:
    db_generation = Generation(project_id=project_id, owner_id=owner_id)
    session.add(db_generation)
    session.commit()
    session.refresh(db_generation)
    return db_generation


def finish_generation(
    *,
    session: Session,
    generation_id: uuid.UUID,
    status: GenerationStatus,
    **fields: Any,
) -> Generation | None:
    db_generation = session.get(Generation, generation_id)
    if db_generation is None:
        return None
    db_generation.sqlmodel_update({"status": status, "completed_at": get_datetime_utc(), **fields})
    session.add(db_generation)
    session.commit()
    session.refresh(db_generation)
    return db_generation


def list_generations(*, session: Session, owner_id: uuid.UUID, limit: int = 50) -> list[Generation]:
    statement = (
        select(Generation)
        .where(Generation.owner_id == owner_id)
        .order_by(col(Generation.created_at).desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())
