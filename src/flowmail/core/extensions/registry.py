"""
Registry of in-process plugins.

The linked runner variant looks plugins up by name instead of launching a
child process. Plugins land here through @plugin_register.
"""

from typing import Any, Dict, List, Optional

from flowmail.logger import get_logger

logger = get_logger(__name__)


class PluginRegistry:
    """Name -> plugin instance mapping."""

    def __init__(self) -> None:
        self._plugins: Dict[str, Any] = {}

    def register(self, name: str, plugin: Any, override: bool = False) -> bool:
        """
        Register a plugin instance.

        Returns:
            True if stored, False if the name was taken and override is False
        """
        key = name.lower()
        if key in self._plugins and not override:
            logger.debug(
                f"Plugin '{key}' is already registered. "
                f"Use override=True to force override the existing registration."
            )
            return False
        self._plugins[key] = plugin
        logger.debug(f"Registered plugin '{key}' ({type(plugin).__name__})")
        return True

    def get(self, name: str) -> Optional[Any]:
        return self._plugins.get(name.lower())

    def is_registered(self, name: str) -> bool:
        return name.lower() in self._plugins

    def list_names(self) -> List[str]:
        return sorted(self._plugins)

    def clear(self) -> None:
        self._plugins.clear()


_registry = PluginRegistry()


def get_registry() -> PluginRegistry:
    return _registry


__all__ = ["PluginRegistry", "get_registry"]
