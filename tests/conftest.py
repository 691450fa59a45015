"""
Shared fixtures for flowmail tests
"""

import uuid

import pytest

from flowmail.core.config_manager import PluginSettings, get_config_manager
from flowmail.core.models import Action, ExecuteTaskRequest, Execution, Param, RunnerConfig, Step


@pytest.fixture(autouse=True)
def test_settings():
    """Deterministic settings with no retry delay"""
    settings = PluginSettings(
        api_url="http://runner.test",
        api_key="runner-key",
        retry_attempts=1,
        retry_backoff=0,
    )
    get_config_manager().set_settings(settings)
    yield settings
    get_config_manager().clear()


@pytest.fixture(autouse=True)
def clean_smtp_env(monkeypatch):
    """Keep SMTP defaults from the developer's environment out of tests"""
    for name in ("SMTP_HOST", "SMTP_PORT", "SMTP_USERNAME", "SMTP_PASSWORD", "FROM_EMAIL"):
        monkeypatch.delenv(name, raising=False)


def make_params(**overrides: str) -> list[Param]:
    values = {
        "From": "alerts@example.com",
        "Password": "secret",
        "To": "ops@example.com, oncall@example.com",
        "SmtpHost": "smtp.example.com",
        "SmtpPort": "587",
        "Message": "Disk usage above 90%",
    }
    values.update(overrides)
    return [Param(key=key, value=value) for key, value in values.items() if value is not None]


@pytest.fixture
def execution():
    return Execution(id=uuid.UUID("2f6c1b9e-4d0a-4f43-9a55-0c8b3f1d2e7a"))


@pytest.fixture
def execute_request(execution):
    return ExecuteTaskRequest(
        config=RunnerConfig(api_url="http://runner.test", api_key="runner-key"),
        execution=execution,
        step=Step(id="step-1", action=Action(id="action-1", params=make_params())),
    )


@pytest.fixture
def params_factory():
    """Build action params with sensible defaults; pass None to drop a key"""
    return make_params
