import os
from collections.abc import Generator

# Settings are read at import time, so the test environment must exist first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app.api.rate_limit import memory_store  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.db import engine, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.tests.utils import register_user  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rate_limits() -> Generator[None, None, None]:
    memory_store.reset()
    yield
    memory_store.reset()


@pytest.fixture(autouse=True)
def output_dirs(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "GENERATED_PROJECTS_DIR", str(tmp_path / "generated"))
    monkeypatch.setattr(settings, "ARCHIVES_DIR", str(tmp_path / "archives"))
    return tmp_path


@pytest.fixture
def db() -> Generator[Session, None, None]:
    init_db()
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    tokens = register_user(client)["tokens"]
    return {"Authorization": f"Bearer {tokens['access_token']}"}
