import posixpath
import re
from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel

from app.agent.artifacts import AgentFileBundle, AgentResult, GeneratedFile, OrchestratorContext
from app.agent.llm_client import LLMClient
from app.core.config import settings

InType = TypeVar("InType", bound=BaseModel | str)
OutType = TypeVar("OutType", bound=BaseModel)

LANGUAGE_BY_EXTENSION = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".json": "json",
    ".prisma": "prisma",
    ".sql": "sql",
    ".css": "css",
    ".scss": "scss",
    ".html": "html",
    ".md": "markdown",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".toml": "toml",
    ".sh": "shell",
    ".py": "python",
    ".env": "dotenv",
}

LANGUAGE_BY_FILENAME = {
    "dockerfile": "dockerfile",
    ".dockerignore": "text",
    ".gitignore": "text",
    ".env.example": "dotenv",
    "makefile": "makefile",
}


def language_for_path(path: str) -> str:
    filename = posixpath.basename(path).lower()
    if filename in LANGUAGE_BY_FILENAME:
        return LANGUAGE_BY_FILENAME[filename]
    _, ext = posixpath.splitext(filename)
    return LANGUAGE_BY_EXTENSION.get(ext, "text")


def sanitize_relative_path(path: str) -> str:
    """Normalise a model-supplied path to a safe, relative POSIX path ('' if unusable)."""
    normalized = (path or "").replace("\\", "/").strip()
    normalized = re.sub(r"/{2,}", "/", normalized).lstrip("/")
    parts = [part for part in normalized.split("/") if part not in ("", ".", "..")]
    return "/".join(parts)


class BaseAgent(ABC, Generic[InType, OutType]):
    """Abstract base class for all agents in the pipeline."""

    def __init__(self, model_name: str | None = None):
        model_to_use = model_name or settings.MODEL_DEFAULT
        self.llm = LLMClient(model_name=model_to_use)

    @abstractmethod
    async def run(self, input_data: InType) -> OutType:
        """Run the agent on the given input to produce the output artifact."""
        pass


class GenerationAgent(BaseAgent[OrchestratorContext, AgentResult]):
    """
    Shared behaviour of the per-domain code generators.

    Subclasses declare the phase they serve, their system prompt and the
    directory their files belong under, and describe the slice of the project
    configuration they care about. Each run issues exactly one model request.
    """

    phase: ClassVar[str]
    system_prompt: ClassVar[str]
    output_root: ClassVar[str] = ""

    def describe_scope(self, context: OrchestratorContext) -> str:
        return ""

    def build_prompt(self, context: OrchestratorContext) -> str:
        config = context.config
        sections = [
            f"Project Name: {config.name}",
            f"Template: {config.template.value}",
            f"Description: {config.description or 'N/A'}",
            "Enabled features:\n"
            + ("\n".join(f"- {f.name} ({f.id})" for f in config.enabled_features) or "- (none)"),
        ]
        if context.plan is not None:
            sections.append(f"Architecture plan:\n{context.plan.model_dump_json(indent=2)}")
        scope = self.describe_scope(context)
        if scope:
            sections.append(scope)
        if context.generated_files:
            sections.append(
                "Files already generated by earlier phases (do not regenerate them):\n"
                + "\n".join(f"- {f.path}" for f in context.generated_files)
            )
        if self.output_root:
            sections.append(f"All paths must be relative to '{self.output_root}/'.")
        return "\n\n".join(sections)

    def normalize_files(self, bundle: AgentFileBundle) -> list[GeneratedFile]:
        files: list[GeneratedFile] = []
        seen: set[str] = set()
        for draft in bundle.files:
            path = sanitize_relative_path(draft.path)
            if not path:
                continue
            if self.output_root and not path.startswith(f"{self.output_root}/"):
                path = f"{self.output_root}/{path}"
            if path in seen:
                continue
            seen.add(path)
            files.append(
                GeneratedFile(
                    path=path,
                    content=draft.content,
                    language=language_for_path(path),
                    description=(draft.description or "").strip() or None,
                )
            )
        return files

    async def run(self, input_data: OrchestratorContext) -> AgentResult:
        bundle = await self.llm.generate_structured(
            system_prompt=self.system_prompt,
            user_prompt=self.build_prompt(input_data),
            response_schema=AgentFileBundle,
        )
        files = self.normalize_files(bundle)
        if not files:
            raise ValueError(f"{type(self).__name__} produced no files for phase '{self.phase}'.")
        return AgentResult(files=files)
