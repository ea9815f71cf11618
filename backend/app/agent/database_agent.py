from app.agent.artifacts import OrchestratorContext
from app.agent.base import GenerationAgent
from app.agent.prompts.database import DATABASE_SYSTEM_PROMPT


class DatabaseAgent(GenerationAgent):
    """Generates the Prisma schema, client and seed data."""

    phase = "database"
    system_prompt = DATABASE_SYSTEM_PROMPT
    output_root = "backend"

    def describe_scope(self, context: OrchestratorContext) -> str:
        database = context.config.database
        if database is None:
            return ""
        location = ""
        if database.host:
            location = f" at {database.host}" + (f":{database.port}" if database.port else "")
        lines = [f"Database: {database.type}{location}, database name '{database.database}'."]
        if database.schema_name:
            lines.append(f"Use the '{database.schema_name}' schema.")
        return "\n".join(lines)
