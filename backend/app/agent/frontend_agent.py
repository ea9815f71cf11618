from app.agent.artifacts import OrchestratorContext
from app.agent.base import GenerationAgent
from app.agent.prompts.frontend import FRONTEND_SYSTEM_PROMPT

TEMPLATE_SCREENS = {
    "SAAS": "landing page, pricing, dashboard, settings",
    "ECOMMERCE": "storefront, product detail, cart, checkout, order history",
    "BLOG": "post list, post detail, author page, editor",
    "API": "API documentation page and a minimal admin dashboard",
    "CUSTOM": "home page and one screen per resource in the plan",
}


class FrontendAgent(GenerationAgent):
    """Generates the React single-page application."""

    phase = "frontend"
    system_prompt = FRONTEND_SYSTEM_PROMPT
    output_root = "frontend"

    def describe_scope(self, context: OrchestratorContext) -> str:
        config = context.config
        lines = [f"Screens to include: {TEMPLATE_SCREENS[config.template.value]}."]
        if config.auth is not None:
            lines.append("Include login and registration pages.")
        return "\n".join(lines)
