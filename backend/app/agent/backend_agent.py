from app.agent.artifacts import OrchestratorContext
from app.agent.base import GenerationAgent
from app.agent.prompts.backend import BACKEND_SYSTEM_PROMPT


class BackendAgent(GenerationAgent):
    """Generates the Express API: entrypoint, routers, controllers and services."""

    phase = "backend"
    system_prompt = BACKEND_SYSTEM_PROMPT
    output_root = "backend"

    def describe_scope(self, context: OrchestratorContext) -> str:
        config = context.config
        notes = []
        if config.database is None:
            notes.append("No database is configured: keep data in memory behind the service layer.")
        if config.auth is not None:
            notes.append("Authentication exists: protect non-public routes with the `authenticate` middleware from `src/middleware/auth.ts`.")
        return "\n".join(notes)
