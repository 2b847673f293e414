"""Settings defaults and startup config redaction."""

import pytest
from pydantic import ValidationError

from payrec.common.config import DEV_API_KEY, CommonSettings
from payrec.common.startup import startup_config


def test_development_falls_back_to_dev_key():
    config = CommonSettings(_env_file=None, environment="development", api_key=None)

    assert config.api_key == DEV_API_KEY


def test_non_development_requires_api_key():
    with pytest.raises(ValidationError):
        CommonSettings(_env_file=None, environment="production", api_key=None)


def test_explicit_api_key_wins():
    config = CommonSettings(_env_file=None, environment="production", api_key="prod-secret")

    assert config.api_key == "prod-secret"


def test_startup_config_redacts_secrets():
    config = CommonSettings(
        _env_file=None,
        api_key="prod-secret",
        database_url="postgresql+psycopg://payments:hunter2@db:5432/payments",
    )

    values = startup_config(config, ["api_key", "database_url", "service_name", "missing"])

    assert values["api_key"] == "<redacted>"
    assert values["database_url"] == "postgresql+psycopg://<redacted>@db:5432/payments"
    assert values["service_name"] == config.service_name
    assert values["missing"] == "<unset>"
