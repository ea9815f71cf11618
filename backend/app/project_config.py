"""Validated description of the application a user wants generated."""

import re
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

PROJECT_NAME_PATTERN = r"^[a-zA-Z0-9-]+$"


class TemplateKind(str, Enum):
    SAAS = "SAAS"
    ECOMMERCE = "ECOMMERCE"
    BLOG = "BLOG"
    API = "API"
    CUSTOM = "CUSTOM"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProjectFeature(_ConfigModel):
    id: str
    name: str
    enabled: bool
    config: dict[str, Any] | None = None


class DatabaseConfig(_ConfigModel):
    type: Literal["postgresql", "mysql", "mongodb", "sqlite"]
    host: str | None = None
    port: int | None = None
    database: str
    schema_name: str | None = Field(default=None, alias="schema")


class AuthConfig(_ConfigModel):
    providers: list[Literal["email", "google", "github", "facebook"]]
    jwt_secret: str | None = None
    session_duration: str | None = None
    enable_mfa: bool | None = Field(default=None, alias="enableMFA")


class IntegrationConfig(_ConfigModel):
    type: Literal["stripe", "sendgrid", "aws", "github", "slack", "custom"]
    credentials: dict[str, str]
    config: dict[str, Any] | None = None


class DeploymentConfig(_ConfigModel):
    provider: Literal["vercel", "netlify", "aws", "docker", "custom"]
    region: str | None = None
    environment: Literal["development", "staging", "production"]
    custom_domain: str | None = None


class ProjectConfig(_ConfigModel):
    name: str = Field(min_length=1, max_length=100, pattern=PROJECT_NAME_PATTERN)
    description: str | None = Field(default=None, min_length=10, max_length=500)
    template: TemplateKind
    features: list[ProjectFeature]
    database: DatabaseConfig | None = None
    auth: AuthConfig | None = None
    integrations: list[IntegrationConfig] | None = None
    deployment: DeploymentConfig | None = None

    @property
    def enabled_features(self) -> list[ProjectFeature]:
        return [feature for feature in self.features if feature.enabled]


class FieldError(BaseModel):
    field: str
    message: str
    code: str


class ValidationResult(BaseModel):
    valid: bool
    errors: list[FieldError] = Field(default_factory=list)


def _field_errors(exc: ValidationError) -> list[FieldError]:
    return [
        FieldError(
            field=".".join(str(part) for part in err["loc"]) or "body",
            message=err["msg"],
            code=err["type"],
        )
        for err in exc.errors()
    ]


def validate_project_config(data: Any) -> ValidationResult:
    """
    Check raw input against the ProjectConfig schema.
    Never raises; failures come back as (field, message, code) triples.
    """
    try:
        ProjectConfig.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(valid=False, errors=_field_errors(exc))
    return ValidationResult(valid=True)


def parse_project_config(data: Any) -> ProjectConfig:
    return ProjectConfig.model_validate(data)


PASSWORD_RULES = [
    (r".{8,}", "too_short", "Password must be at least 8 characters"),
    (r"[A-Z]", "missing_uppercase", "Password must contain at least one uppercase letter"),
    (r"[a-z]", "missing_lowercase", "Password must contain at least one lowercase letter"),
    (r"[0-9]", "missing_digit", "Password must contain at least one number"),
    (r"[^A-Za-z0-9]", "missing_special", "Password must contain at least one special character"),
]


def validate_password(password: str) -> ValidationResult:
    errors = [
        FieldError(field="password", message=message, code=code)
        for pattern, code, message in PASSWORD_RULES
        if not re.search(pattern, password or "")
    ]
    return ValidationResult(valid=not errors, errors=errors)


_email_adapter = TypeAdapter(EmailStr)


def validate_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True
