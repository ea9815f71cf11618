from app.agent.artifacts import OrchestratorContext, ProjectPlan
from app.agent.base import BaseAgent
from app.agent.prompts.planner import PLANNER_SYSTEM_PROMPT
from app.core.config import settings


class PlannerAgent(BaseAgent[OrchestratorContext, ProjectPlan]):
    """
    Agent responsible for the architecture plan every later phase builds on.
    """

    def __init__(self):
        super().__init__(model_name=settings.MODEL_PLANNER)

    @staticmethod
    def _config_summary(context: OrchestratorContext) -> str:
        config = context.config
        features = "\n".join(
            f"- {f.name} ({'enabled' if f.enabled else 'disabled'})" for f in config.features
        ) or "- (none)"
        lines = [
            f"Plan the architecture for a {config.template.value} application.",
            "",
            f"Project Name: {config.name}",
            f"Description: {config.description or 'N/A'}",
            "",
            "Features requested:",
            features,
        ]
        if config.database is not None:
            lines.append(f"\nDatabase: {config.database.type} ({config.database.database})")
        if config.auth is not None:
            lines.append(f"Auth providers: {', '.join(config.auth.providers) or 'email'}")
        if config.integrations:
            lines.append(f"Integrations: {', '.join(i.type for i in config.integrations)}")
        if config.deployment is not None:
            lines.append(
                f"Deployment: {config.deployment.provider} ({config.deployment.environment})"
            )
        return "\n".join(lines)

    async def run(self, input_data: OrchestratorContext) -> ProjectPlan:
        plan = await self.llm.generate_structured(
            system_prompt=PLANNER_SYSTEM_PROMPT,
            user_prompt=self._config_summary(input_data),
            response_schema=ProjectPlan,
        )
        if not plan.summary.strip():
            raise ValueError("PlannerAgent returned an empty architecture summary.")
        return plan
