from app.agent.artifacts import OrchestratorContext
from app.agent.base import GenerationAgent
from app.agent.prompts.devops import DEVOPS_SYSTEM_PROMPT


class DevOpsAgent(GenerationAgent):
    """Generates Docker, CI and deployment-target configuration at the project root."""

    phase = "devops"
    system_prompt = DEVOPS_SYSTEM_PROMPT

    def describe_scope(self, context: OrchestratorContext) -> str:
        config = context.config
        lines = []
        if config.database is not None:
            lines.append(f"Database service: {config.database.type}.")
        deployment = config.deployment
        if deployment is not None:
            target = f"Deployment target: {deployment.provider}, environment {deployment.environment}"
            if deployment.region:
                target += f", region {deployment.region}"
            if deployment.custom_domain:
                target += f", custom domain {deployment.custom_domain}"
            lines.append(target + ".")
        return "\n".join(lines)
