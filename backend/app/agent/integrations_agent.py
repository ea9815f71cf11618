from app.agent.artifacts import OrchestratorContext
from app.agent.base import GenerationAgent
from app.agent.prompts.integrations import INTEGRATIONS_SYSTEM_PROMPT


class IntegrationsAgent(GenerationAgent):
    phase = "integrations"
    system_prompt = INTEGRATIONS_SYSTEM_PROMPT
    output_root = "backend"

    def describe_scope(self, context: OrchestratorContext) -> str:
        integrations = context.config.integrations or []
        # Credential values never reach the model, only the names of the keys.
        return "Integrations:\n" + "\n".join(
            f"- {integration.type} (credential keys: {', '.join(sorted(integration.credentials)) or 'none'})"
            for integration in integrations
        )
