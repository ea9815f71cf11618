import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, EmailStr
from sqlalchemy import JSON, DateTime
from sqlmodel import Column, Field, Relationship, SQLModel

T = TypeVar("T")


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Response envelope shared by every JSON route
class Envelope(BaseModel, Generic[T]):
    status: str = "success"
    data: T


class Message(SQLModel):
    status: str = "success"
    message: str


# Shared properties
class UserBase(SQLModel):
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    is_active: bool = True
    full_name: str | None = Field(default=None, max_length=100)


class UserRegister(SQLModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=100)
    full_name: str | None = Field(default=None, min_length=1, max_length=100)


class UserLogin(SQLModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=1)


class UpdatePassword(SQLModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=100)


class RefreshRequest(SQLModel):
    refresh_token: str = Field(min_length=1)


# Database model, database table inferred from class name
class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    last_login_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    projects: list["Project"] = Relationship(back_populates="owner", cascade_delete=True)


# Properties to return via API, id is always required
class UserPublic(UserBase):
    id: uuid.UUID
    created_at: datetime | None = None
    last_login_at: datetime | None = None


class AuthTokens(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthSession(SQLModel):
    user: UserPublic
    tokens: AuthTokens


# Project records

class ProjectStatus(str, Enum):
    DRAFT = "DRAFT"
    GENERATING = "GENERATING"
    READY = "READY"
    ERROR = "ERROR"


class ProjectBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    template: str = Field(max_length=20)


class Project(ProjectBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    config: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    status: ProjectStatus = Field(default=ProjectStatus.DRAFT, index=True)
    generated_path: str | None = Field(default=None, max_length=1024)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    owner_id: uuid.UUID = Field(
        foreign_key="user.id", nullable=False, ondelete="CASCADE"
    )
    owner: User | None = Relationship(back_populates="projects")
    generations: list["Generation"] = Relationship(back_populates="project", cascade_delete=True)


class ProjectPublic(ProjectBase):
    id: uuid.UUID
    owner_id: uuid.UUID
    config: dict[str, Any]
    status: ProjectStatus
    generated_path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# Generation history

class GenerationStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationBase(SQLModel):
    status: GenerationStatus = Field(default=GenerationStatus.RUNNING)
    files_count: int = 0
    completed_phases: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    error: str | None = Field(default=None, max_length=2000)


class Generation(GenerationBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    completed_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE"
    )
    owner_id: uuid.UUID = Field(foreign_key="user.id", nullable=False, index=True)
    project: Project | None = Relationship(back_populates="generations")


class GenerationPublic(GenerationBase):
    id: uuid.UUID
    project_id: uuid.UUID
    owner_id: uuid.UUID
    created_at: datetime | None = None
    completed_at: datetime | None = None


class ProjectWithGenerations(ProjectPublic):
    generations: list[GenerationPublic]


class GenerationTriggered(SQLModel):
    project_id: uuid.UUID
    status: ProjectStatus
