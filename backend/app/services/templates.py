"""Built-in starter templates offered on the project creation form."""

from pydantic import BaseModel, Field

from app.project_config import TemplateKind


class TemplateStructure(BaseModel):
    directories: list[str] = Field(default_factory=list)


class Template(BaseModel):
    id: str
    name: str
    description: str
    category: TemplateKind
    version: str = "1.0.0"
    structure: TemplateStructure
    dependencies: dict[str, str] = Field(default_factory=dict)
    suggested_features: list[str] = Field(default_factory=list)
    is_official: bool = True


_COMMON_BACKEND = {
    "express": "^4.19.2",
    "cors": "^2.8.5",
    "helmet": "^7.1.0",
    "zod": "^3.23.8",
}

_COMMON_FRONTEND = {
    "react": "^18.3.1",
    "react-dom": "^18.3.1",
    "react-router-dom": "^6.26.0",
    "tailwindcss": "^3.4.1",
}

BUILT_IN_TEMPLATES: tuple[Template, ...] = (
    Template(
        id="saas-starter",
        name="SaaS Starter",
        description="Subscription SaaS with a marketing site, user dashboard, team settings and Stripe billing.",
        category=TemplateKind.SAAS,
        structure=TemplateStructure(
            directories=["backend/src/routes", "backend/src/services", "frontend/src/pages", "frontend/src/components"]
        ),
        dependencies={**_COMMON_BACKEND, **_COMMON_FRONTEND, "stripe": "^16.12.0"},
        suggested_features=["dashboard", "billing", "team-management"],
    ),
    Template(
        id="ecommerce-platform",
        name="E-Commerce Store",
        description="Storefront with product catalog, cart, checkout, order history and an inventory admin.",
        category=TemplateKind.ECOMMERCE,
        structure=TemplateStructure(
            directories=["backend/src/routes", "backend/src/models", "frontend/src/pages", "frontend/src/store"]
        ),
        dependencies={**_COMMON_BACKEND, **_COMMON_FRONTEND, "stripe": "^16.12.0", "zustand": "^4.5.4"},
        suggested_features=["catalog", "cart", "checkout", "inventory"],
    ),
    Template(
        id="blog-cms",
        name="Blog & CMS",
        description="Content site with posts, authors, tags, a markdown editor and SEO-friendly pages.",
        category=TemplateKind.BLOG,
        structure=TemplateStructure(
            directories=["backend/src/routes", "backend/src/models", "frontend/src/pages", "frontend/src/editor"]
        ),
        dependencies={**_COMMON_BACKEND, **_COMMON_FRONTEND, "marked": "^14.1.0"},
        suggested_features=["posts", "comments", "tags"],
    ),
    Template(
        id="rest-api",
        name="REST API",
        description="Headless REST API with validation, JWT auth, OpenAPI docs and request rate limiting.",
        category=TemplateKind.API,
        structure=TemplateStructure(
            directories=["backend/src/routes", "backend/src/middleware", "backend/src/services", "backend/tests"]
        ),
        dependencies={**_COMMON_BACKEND, "swagger-ui-express": "^5.0.1", "express-rate-limit": "^7.4.0"},
        suggested_features=["crud", "api-docs"],
    ),
    Template(
        id="custom-app",
        name="Custom Application",
        description="Blank full-stack starter: the architecture is planned entirely from the selected features.",
        category=TemplateKind.CUSTOM,
        structure=TemplateStructure(directories=["backend/src", "frontend/src"]),
        dependencies={**_COMMON_BACKEND, **_COMMON_FRONTEND},
    ),
)


def list_templates(category: TemplateKind | None = None) -> list[Template]:
    if category is None:
        return list(BUILT_IN_TEMPLATES)
    return [template for template in BUILT_IN_TEMPLATES if template.category == category]


def get_template(template_id: str) -> Template | None:
    return next((template for template in BUILT_IN_TEMPLATES if template.id == template_id), None)
