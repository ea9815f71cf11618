import logging
import warnings
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "change-this-secret-key"

PROVIDER_BASE_URLS: dict[str, str | None] = {
    "openai": None,
    "openrouter": "https://openrouter.ai/api/v1",
    "anthropic": "https://api.anthropic.com/v1/",
}


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Appforge"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Only the database connection is strictly required.
    DATABASE_URL: str

    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    # 7 days
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    REDIS_URL: str | None = None
    RATE_LIMIT_WINDOW_SECONDS: int = 900
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_SWEEP_INTERVAL_SECONDS: int = 3600

    LLM_PROVIDER: Literal["openai", "openrouter", "anthropic"] = "openai"
    LLM_BASE_URL: str | None = None
    LLM_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    OPENROUTER_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None
    MODEL_DEFAULT: str = "gpt-4o-mini"
    MODEL_PLANNER: str | None = None
    LLM_TEMPERATURE: float = 0.7

    GENERATED_PROJECTS_DIR: str = "generated"
    ARCHIVES_DIR: str = "temp"

    @property
    def resolved_llm_api_key(self) -> str | None:
        provider_keys = {
            "openai": self.OPENAI_API_KEY,
            "openrouter": self.OPENROUTER_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
        }
        return self.LLM_API_KEY or provider_keys.get(self.LLM_PROVIDER)

    @property
    def resolved_llm_base_url(self) -> str | None:
        return self.LLM_BASE_URL or PROVIDER_BASE_URLS.get(self.LLM_PROVIDER)

    @property
    def has_ai_key(self) -> bool:
        return bool(self.resolved_llm_api_key)

    @property
    def has_custom_secret(self) -> bool:
        return self.SECRET_KEY != DEFAULT_SECRET_KEY

    @model_validator(mode="after")
    def _warn_on_degraded_features(self) -> Self:
        # Missing optional keys degrade features instead of failing startup.
        if not self.has_custom_secret:
            warnings.warn(
                "Using default SECRET_KEY. Set SECRET_KEY for production.",
                stacklevel=1,
            )
        if not self.has_ai_key:
            warnings.warn(
                "No AI API key configured. Code generation will fail until one is set.",
                stacklevel=1,
            )
        return self


settings = Settings()  # type: ignore
