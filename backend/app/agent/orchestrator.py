import logging
from collections.abc import AsyncIterator, Callable, Mapping
from dataclasses import dataclass

from app.agent.artifacts import (
    GeneratedProject,
    OrchestratorContext,
    PhaseEvent,
)
from app.agent.assembly import build_env_example, build_package_manifest, build_readme
from app.agent.auth_agent import AuthAgent
from app.agent.backend_agent import BackendAgent
from app.agent.base import BaseAgent, GenerationAgent
from app.agent.database_agent import DatabaseAgent
from app.agent.devops_agent import DevOpsAgent
from app.agent.frontend_agent import FrontendAgent
from app.agent.integrations_agent import IntegrationsAgent
from app.agent.planner_agent import PlannerAgent
from app.project_config import ProjectConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Phase:
    name: str
    should_run: Callable[[ProjectConfig], bool]


def _always(config: ProjectConfig) -> bool:
    return True


PLAN_PHASE = "plan"
ASSEMBLE_PHASE = "assemble"

PHASES: tuple[Phase, ...] = (
    Phase(PLAN_PHASE, _always),
    Phase("database", lambda config: config.database is not None),
    Phase("backend", _always),
    Phase("auth", lambda config: config.auth is not None),
    Phase("frontend", _always),
    Phase("integrations", lambda config: bool(config.integrations)),
    Phase("devops", _always),
    Phase(ASSEMBLE_PHASE, _always),
)

AGENT_CLASSES: dict[str, type[GenerationAgent]] = {
    "database": DatabaseAgent,
    "backend": BackendAgent,
    "auth": AuthAgent,
    "frontend": FrontendAgent,
    "integrations": IntegrationsAgent,
    "devops": DevOpsAgent,
}


def default_agents() -> dict[str, GenerationAgent]:
    return {phase: agent_cls() for phase, agent_cls in AGENT_CLASSES.items()}


class Orchestrator:
    """
    Runs the fixed generation pipeline for one project.

    Phases execute strictly in order; a phase whose configuration section is
    absent is skipped without invoking its agent. Agents only ever see a
    snapshot of the context, so the orchestrator is the single writer of the
    accumulated files. The first failing phase aborts the run and its
    exception propagates unchanged.
    """

    def __init__(
        self,
        project_id: str,
        user_id: str,
        config: ProjectConfig,
        *,
        agents: Mapping[str, BaseAgent] | None = None,
        planner: BaseAgent | None = None,
    ):
        self._context = OrchestratorContext(
            project_id=str(project_id),
            user_id=str(user_id),
            config=config,
        )
        # Agents (and their API clients) are built lazily so construction does no I/O.
        self._agents = dict(agents) if agents is not None else None
        self._planner = planner
        self._result: GeneratedProject | None = None
        self._started = False

    def get_context(self) -> OrchestratorContext:
        return self._context

    def _snapshot(self) -> OrchestratorContext:
        return self._context.model_copy(deep=True)

    def _agent_for(self, phase: str) -> BaseAgent:
        if self._agents is None:
            self._agents = default_agents()
        return self._agents[phase]

    async def _run_phase(self, phase: str) -> int:
        if phase == PLAN_PHASE:
            planner = self._planner or PlannerAgent()
            self._context.plan = await planner.run(self._snapshot())
            return 0
        if phase == ASSEMBLE_PHASE:
            self._result = self.assemble_project()
            return len(self._result.files)

        result = await self._agent_for(phase).run(self._snapshot())
        self._context.generated_files.extend(result.files)
        return len(result.files)

    async def iter_phases(self) -> AsyncIterator[PhaseEvent]:
        """Run the pipeline, yielding a progress event as each phase starts, skips or finishes."""
        if self._started:
            raise RuntimeError("An Orchestrator runs exactly once; create a new one per generation.")
        self._started = True

        context = self._context
        config = context.config
        context.pending_tasks = [phase.name for phase in PHASES if phase.should_run(config)]
        context.skipped_phases = [phase.name for phase in PHASES if not phase.should_run(config)]

        logger.info(
            "Starting project orchestration for %s (template=%s, phases=%s)",
            context.project_id,
            config.template.value,
            ",".join(context.pending_tasks),
        )

        for phase in PHASES:
            if phase.name in context.skipped_phases:
                logger.info("Skipping %s phase: not configured", phase.name)
                yield PhaseEvent(status="skipped", phase=phase.name, message=f"Skipped {phase.name}: not configured")
                continue

            context.current_phase = phase.name
            logger.info("Phase %s started", phase.name)
            yield PhaseEvent(status="started", phase=phase.name, message=f"Running {phase.name} phase...")

            try:
                files_count = await self._run_phase(phase.name)
            except Exception as exc:
                context.errors.append(f"{phase.name}: {exc}")
                logger.error(
                    "Orchestration failed for %s during %s phase: %s",
                    context.project_id,
                    phase.name,
                    exc,
                )
                yield PhaseEvent(status="failed", phase=phase.name, message=str(exc))
                raise

            context.pending_tasks.remove(phase.name)
            context.completed_tasks.append(phase.name)
            logger.info("Phase %s completed (%s files)", phase.name, files_count)
            yield PhaseEvent(
                status="completed",
                phase=phase.name,
                message=f"Completed {phase.name} phase.",
                files_count=files_count,
            )

        logger.info(
            "Project orchestration completed for %s: %s files generated",
            context.project_id,
            len(context.generated_files),
        )

    @property
    def result(self) -> GeneratedProject:
        if self._result is None:
            raise RuntimeError("Pipeline finished without assembling a project")
        return self._result

    async def orchestrate(self) -> GeneratedProject:
        async for _ in self.iter_phases():
            pass
        return self.result

    def assemble_project(self) -> GeneratedProject:
        """Synthesise the final project. Only valid once every earlier phase has succeeded."""
        if not self._started:
            raise RuntimeError("Cannot assemble a project before the pipeline has run")
        outstanding = [name for name in self._context.pending_tasks if name != ASSEMBLE_PHASE]
        if outstanding:
            raise RuntimeError(f"Cannot assemble before phases complete: {', '.join(outstanding)}")

        config = self._context.config
        files = list(self._context.generated_files)
        return GeneratedProject(
            name=config.name,
            files=tuple(files),
            package_manifest=build_package_manifest(config, files),
            readme=build_readme(config),
            env_example=build_env_example(config),
        )
