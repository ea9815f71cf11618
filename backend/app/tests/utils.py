from typing import Any

from fastapi.testclient import TestClient

from app.agent.artifacts import AgentResult, GeneratedFile, OrchestratorContext, ProjectPlan
from app.agent.orchestrator import Orchestrator
from app.core.config import settings

STRONG_PASSWORD = "Sup3r$ecret"

MINIMAL_CONFIG: dict[str, Any] = {
    "name": "test-project",
    "template": "SAAS",
    "features": [{"id": "auth", "name": "Authentication", "enabled": True}],
}

FULL_CONFIG: dict[str, Any] = {
    "name": "shop-front",
    "description": "A small storefront with payments",
    "template": "ECOMMERCE",
    "features": [
        {"id": "catalog", "name": "Catalog", "enabled": True},
        {"id": "reviews", "name": "Reviews", "enabled": False},
    ],
    "database": {"type": "postgresql", "database": "shop", "host": "db", "port": 5432},
    "auth": {"providers": ["email", "google"], "enableMFA": True},
    "integrations": [{"type": "stripe", "credentials": {"secretKey": "sk_test_123"}}],
    "deployment": {"provider": "docker", "environment": "production"},
}


def register_user(client: TestClient, email: str = "owner@example.com") -> dict:
    response = client.post(
        f"{settings.API_V1_STR}/auth/register",
        json={"email": email, "password": STRONG_PASSWORD, "full_name": "Owner"},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class FakePlanner:
    def __init__(self, calls: list[str] | None = None):
        self.calls = calls if calls is not None else []

    async def run(self, input_data: OrchestratorContext) -> ProjectPlan:
        self.calls.append("plan")
        return ProjectPlan(summary=f"Plan for {input_data.config.name}", directories=["backend", "frontend"])


class FakeAgent:
    """Stands in for a domain agent: records each call and returns one file per phase."""

    def __init__(self, phase: str, calls: list[str] | None = None, error: Exception | None = None):
        self.phase = phase
        self.calls = calls if calls is not None else []
        self.error = error
        self.contexts: list[OrchestratorContext] = []

    async def run(self, input_data: OrchestratorContext) -> AgentResult:
        self.calls.append(self.phase)
        self.contexts.append(input_data)
        if self.error is not None:
            raise self.error
        root = "" if self.phase == "devops" else ("frontend/" if self.phase == "frontend" else "backend/")
        return AgentResult(
            files=[
                GeneratedFile(
                    path=f"{root}{self.phase}/index.ts",
                    content=f"// {self.phase}\n",
                    language="typescript",
                )
            ]
        )


def fake_agents(calls: list[str], failing: dict[str, Exception] | None = None) -> dict[str, FakeAgent]:
    failing = failing or {}
    return {
        phase: FakeAgent(phase, calls, failing.get(phase))
        for phase in ("database", "backend", "auth", "frontend", "integrations", "devops")
    }


def fake_orchestrator_factory(failing: dict[str, Exception] | None = None):
    """Build a drop-in for the Orchestrator class that uses fake agents."""

    def factory(project_id: str, user_id: str, config) -> Orchestrator:
        return Orchestrator(
            project_id,
            user_id,
            config,
            agents=fake_agents([], failing),
            planner=FakePlanner(),
        )

    return factory
