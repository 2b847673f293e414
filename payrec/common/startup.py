"""Startup-time helpers for safe config logging."""

from payrec.common.config import DEV_API_KEY, CommonSettings
from payrec.common.logging import logger

SECRET_MARKERS = ("key", "secret", "password", "token")


def _safe_value(name: str, value) -> str:
    """Return a printable value, redacting secret-like settings and DSN passwords."""

    if value is None:
        return "<unset>"
    if any(marker in name.lower() for marker in SECRET_MARKERS):
        return "<redacted>"
    if name == "database_url" and "@" in str(value):
        scheme, _, rest = str(value).partition("://")
        return f"{scheme}://<redacted>@{rest.rsplit('@', 1)[1]}"
    return str(value)


def startup_config(config: CommonSettings, keys: list[str]) -> dict[str, str]:
    return {key: _safe_value(key, getattr(config, key, None)) for key in keys}


def log_startup_config(config: CommonSettings, keys: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    values = startup_config(config, keys)
    logger.info("startup_config=%s", {"service": config.service_name, **values})
    if config.environment == "development" and config.api_key == DEV_API_KEY:
        logger.warning("using development API key; set PAYMENTS_API_KEY before deploying")
