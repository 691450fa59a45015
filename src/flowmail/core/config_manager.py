from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from flowmail.core.execution.errors import ConfigurationError
from flowmail.logger import get_logger

logger = get_logger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number",
            what=f"Invalid value for {name}",
            why=f"'{raw}' is not a number",
            how_to_fix=f"Set {name} to a numeric value or unset it",
            context={"env_var": name, "value": raw},
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer",
            what=f"Invalid value for {name}",
            why=f"'{raw}' is not an integer",
            how_to_fix=f"Set {name} to an integer or unset it",
            context={"env_var": name, "value": raw},
        )


@dataclass
class PluginSettings:
    """
    Process-wide plugin settings read from the environment.

    The RPC variant receives the execution-tracking API location with every
    request; the linked variant has no such channel and uses api_url/api_key
    from here.
    """

    api_url: str = "http://localhost:8080"
    api_key: Optional[str] = None
    runner_id: Optional[str] = None
    request_timeout: float = 30.0
    retry_attempts: int = 3
    retry_backoff: float = 1.0
    smtp_timeout: float = 30.0
    rpc_host: str = "127.0.0.1"
    rpc_port: int = 0

    @classmethod
    def from_env(cls) -> "PluginSettings":
        return cls(
            api_url=os.getenv("FLOWMAIL_API_URL", cls.api_url),
            api_key=os.getenv("FLOWMAIL_API_KEY") or None,
            runner_id=os.getenv("FLOWMAIL_RUNNER_ID") or None,
            request_timeout=_env_float("FLOWMAIL_REQUEST_TIMEOUT", cls.request_timeout),
            retry_attempts=_env_int("FLOWMAIL_RETRY_ATTEMPTS", cls.retry_attempts),
            retry_backoff=_env_float("FLOWMAIL_RETRY_BACKOFF", cls.retry_backoff),
            smtp_timeout=_env_float("FLOWMAIL_SMTP_TIMEOUT", cls.smtp_timeout),
            rpc_host=os.getenv("FLOWMAIL_RPC_HOST", cls.rpc_host),
            rpc_port=_env_int("FLOWMAIL_RPC_PORT", cls.rpc_port),
        )


@dataclass
class ConfigManager:
    """
    Single entrypoint for loading .env files and reading plugin settings.

    Usage:
        from flowmail.core.config_manager import get_config_manager

        cm = get_config_manager()
        cm.load_env_files([Path.cwd() / ".env"], override=False)
        settings = cm.settings
    """

    _settings: Optional[PluginSettings] = field(default=None)

    def load_env_files(self, paths: Iterable[Path], override: bool = False) -> None:
        """Load the first existing .env file from the provided paths."""
        from dotenv import load_dotenv

        for env_path in paths:
            if env_path.exists():
                load_dotenv(env_path, override=override)
                logger.debug("Loaded .env file from %s", env_path)
                # settings read before the load are stale
                self._settings = None
                return

    @property
    def settings(self) -> PluginSettings:
        if self._settings is None:
            self._settings = PluginSettings.from_env()
        return self._settings

    def set_settings(self, settings: Optional[PluginSettings]) -> None:
        self._settings = settings

    def clear(self) -> None:
        self._settings = None


_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    return _config_manager


__all__ = ["ConfigManager", "PluginSettings", "get_config_manager"]
