"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator
from typing import Any

import pytest
from pytest_mock import MockerFixture, MockType

from jambojet.core.config import LogConfig, Settings, get_settings
from jambojet.core.error_context import _get_sensitive_fields


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a real Settings object built from test environment values.

    Returns:
        Settings: Settings with a subscription key and console logging.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_CONFIG__SUBSCRIPTION_KEY", "abcd1234efgh5678wxyz")
    monkeypatch.setenv("API_CONFIG__BASE_URL", "https://nsk.example.test/api")
    return Settings()


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings and sensitive fields around each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Remove app-specific environment variables so tests start from defaults.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    original_env = os.environ.copy()

    env_prefixes = [
        "APP_",
        "API_CONFIG__",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "K_SERVICE",
        "AWS_EXECUTION_ENV",
    ]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_get_settings(mocker: MockerFixture) -> MockType:
    """Mock get_settings in error_context with custom sensitive fields.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock get_settings function.
    """
    mock_settings = mocker.Mock(spec=Settings)
    mock_log_config = mocker.Mock(spec=LogConfig)
    mock_log_config.sensitive_fields = ["custom_secret", "loyalty_number"]
    mock_settings.log_config = mock_log_config

    mock_get_settings_fn = mocker.patch("jambojet.core.error_context.get_settings")
    mock_get_settings_fn.return_value = mock_settings

    _get_sensitive_fields.cache_clear()

    return mock_get_settings_fn


@pytest.fixture
def valid_contact_info() -> dict[str, Any]:
    """Organization contact info that satisfies every rule."""
    return {
        "email": "ops@example.com",
        "phone": "+254 700 000 000",
        "address": {"street": "1 Airport Rd", "city": "Nairobi", "countryCode": "KE"},
        "contactPerson": {"firstName": "Amina", "lastName": "Otieno"},
    }


@pytest.fixture
def card_details() -> dict[str, Any]:
    """Credit card payment details that pass validation."""
    return {
        "cardNumber": "4111 1111 1111 1111",
        "expiryMonth": 12,
        "expiryYear": 2099,
        "cvv": "123",
        "cardHolderName": "Jane Traveller",
    }
