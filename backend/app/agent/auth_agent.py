from app.agent.artifacts import OrchestratorContext
from app.agent.base import GenerationAgent
from app.agent.prompts.auth import AUTH_SYSTEM_PROMPT


class AuthAgent(GenerationAgent):
    phase = "auth"
    system_prompt = AUTH_SYSTEM_PROMPT
    output_root = "backend"

    def describe_scope(self, context: OrchestratorContext) -> str:
        auth = context.config.auth
        if auth is None:
            return ""
        lines = [f"Auth providers: {', '.join(auth.providers) or 'email'}."]
        if auth.session_duration:
            lines.append(f"Access sessions last {auth.session_duration}.")
        if auth.enable_mfa:
            lines.append("Multi-factor authentication is enabled.")
        return "\n".join(lines)
