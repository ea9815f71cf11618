from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.project_config import ProjectConfig


class GeneratedFile(BaseModel):
    path: str = Field(description="Relative path of the file inside the generated project")
    content: str = Field(description="Complete contents of the file")
    language: str = Field(description="Language tag such as 'typescript', 'prisma', 'yaml'")
    description: str | None = None


class DraftFile(BaseModel):
    path: str = Field(description="Relative path of the file to create, e.g. 'src/routes/users.ts'")
    content: str = Field(description="Complete source code of the file")
    description: str | None = Field(default=None, description="One-line summary of what the file does")


class AgentFileBundle(BaseModel):
    """Structured response requested from the model by every domain agent."""
    files: list[DraftFile] = Field(description="Files generated for this part of the project")


class ProjectPlan(BaseModel):
    """Artifact produced by the planning phase and shared with later agents."""
    summary: str = Field(description="Short description of the application architecture")
    directories: list[str] = Field(default_factory=list, description="Top-level directories of the project")
    tech_stack: list[str] = Field(default_factory=list, description="Frameworks and libraries to use")
    components: list[str] = Field(default_factory=list, description="Main UI and backend components")
    api_endpoints: list[str] = Field(default_factory=list, description="REST endpoints, e.g. 'GET /api/users'")
    data_models: list[str] = Field(default_factory=list, description="Persistent entities and key fields")
    integration_points: list[str] = Field(default_factory=list, description="Third-party services to wire in")


class AgentResult(BaseModel):
    files: list[GeneratedFile] = Field(default_factory=list)


class OrchestratorContext(BaseModel):
    """Accumulator for one orchestration run. Only the orchestrator writes to it."""
    project_id: str
    user_id: str
    config: ProjectConfig
    current_phase: str = "initialization"
    completed_tasks: list[str] = Field(default_factory=list)
    pending_tasks: list[str] = Field(default_factory=list)
    skipped_phases: list[str] = Field(default_factory=list)
    plan: ProjectPlan | None = None
    generated_files: list[GeneratedFile] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class GeneratedProject(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    files: tuple[GeneratedFile, ...]
    package_manifest: dict[str, Any]
    readme: str
    env_example: dict[str, str]


class PhaseEvent(BaseModel):
    status: Literal["started", "completed", "skipped", "failed"]
    phase: str
    message: str
    files_count: int = 0
