"""Configuration status report.

Summarises the loaded settings so a deployment can be checked before any
request is sent. The subscription key is never reported in full.
"""

from typing import Any

from jambojet.core.config import Settings, get_settings
from jambojet.core.logging import get_logger

logger = get_logger(__name__)

REQUIRED_API_FIELDS = ("base_url", "subscription_key")


def config_status(settings: Settings | None = None) -> dict[str, Any]:
    """Build a report of the current configuration.

    Args:
        settings: Settings to report on; defaults to the cached ones.

    Returns:
        dict[str, Any]: Application, API and logging settings plus ``missing``
            (unset required API fields) and ``complete``.
    """
    settings = settings or get_settings()
    api_config = settings.api_config
    missing = [name for name in REQUIRED_API_FIELDS if not getattr(api_config, name)]

    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "api": {
            "base_url": api_config.base_url,
            "subscription_key": api_config.masked_subscription_key,
            "timeout": api_config.timeout,
            "retry_attempts": api_config.retry_attempts,
            "environment": api_config.environment,
        },
        "logging": {
            "log_level": settings.log_config.log_level,
            "log_formatter_type": settings.log_config.log_formatter_type,
            "log_payloads": settings.log_config.log_payloads,
        },
        "missing": missing,
        "complete": not missing,
    }


def check_configuration(settings: Settings | None = None) -> int:
    """Log the configuration report and return a process exit code.

    Returns:
        int: 0 when every required API field is set, 1 otherwise.
    """
    status = config_status(settings)
    api_status = status["api"]

    for name, value in api_status.items():
        if value is None or value == "":
            logger.error("{} is not set", name, setting=name)
        else:
            logger.info("{}: {}", name, value, setting=name)

    if not status["complete"]:
        logger.error(
            "Configuration is incomplete; set {} in the environment or .env file",
            ", ".join(f"API_CONFIG__{name.upper()}" for name in status["missing"]),
            missing=status["missing"],
        )
        return 1

    logger.info("Configuration looks good", environment=api_status["environment"])
    return 0
