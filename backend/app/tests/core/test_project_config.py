import pytest

from app.project_config import (
    TemplateKind,
    parse_project_config,
    validate_email,
    validate_password,
    validate_project_config,
)
from app.tests.utils import FULL_CONFIG, MINIMAL_CONFIG


def _codes(result) -> dict[str, str]:
    return {error.field: error.code for error in result.errors}


@pytest.mark.parametrize("config", [MINIMAL_CONFIG, FULL_CONFIG])
def test_valid_configs_pass(config):
    result = validate_project_config(config)

    assert result.valid is True
    assert result.errors == []


def test_parse_reads_camel_case_aliases():
    config = parse_project_config(FULL_CONFIG)

    assert config.template is TemplateKind.ECOMMERCE
    assert config.auth.enable_mfa is True
    assert [f.id for f in config.enabled_features] == ["catalog"]


@pytest.mark.parametrize("name", ["my project", "tab\tname", " padded", ""])
def test_name_with_whitespace_or_empty_is_rejected(name):
    result = validate_project_config({**MINIMAL_CONFIG, "name": name})

    assert result.valid is False
    assert "name" in _codes(result)


def test_unknown_template_is_rejected():
    result = validate_project_config({**MINIMAL_CONFIG, "template": "PORTFOLIO"})

    assert result.valid is False
    assert _codes(result)["template"] == "enum"


def test_nested_errors_use_dotted_locations():
    result = validate_project_config(
        {
            **MINIMAL_CONFIG,
            "description": "short",
            "features": [{"id": "x", "name": "X", "enabled": "sometimes"}],
            "database": {"type": "oracle", "database": "db"},
            "integrations": [{"type": "stripe"}],
        }
    )

    codes = _codes(result)
    assert result.valid is False
    assert codes["description"] == "string_too_short"
    assert codes["features.0.enabled"] == "bool_parsing"
    assert codes["database.type"] == "literal_error"
    assert codes["integrations.0.credentials"] == "missing"


@pytest.mark.parametrize("data", [None, "not a config", 42, []])
def test_validation_never_raises(data):
    result = validate_project_config(data)

    assert result.valid is False
    assert result.errors


def test_name_length_limit():
    assert validate_project_config({**MINIMAL_CONFIG, "name": "a" * 100}).valid
    assert not validate_project_config({**MINIMAL_CONFIG, "name": "a" * 101}).valid


def test_password_rules():
    assert validate_password("Sup3r$ecret").valid

    result = validate_password("password")
    assert not result.valid
    assert {e.code for e in result.errors} == {"missing_uppercase", "missing_digit", "missing_special"}


def test_email_validation():
    assert validate_email("dev@example.com")
    assert not validate_email("not-an-email")
