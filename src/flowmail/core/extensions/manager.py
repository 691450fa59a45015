"""
Loading of built-in plugins.

Importing a plugin module runs its @plugin_register decorator. The
FLOWMAIL_PLUGINS environment variable restricts which plugins are loaded.
"""

import importlib
import os
from typing import Dict, List, Optional

from flowmail.core.execution.errors import PluginError
from flowmail.core.extensions.registry import get_registry
from flowmail.logger import get_logger

logger = get_logger(__name__)

BUILTIN_PLUGINS: Dict[str, str] = {
    "email": "flowmail.extensions.email.email_plugin",
}


def get_allowed_plugin_names() -> Optional[set[str]]:
    """
    Plugin names allowed by FLOWMAIL_PLUGINS.

    Returns:
        Set of lowercased names, or None if no restriction applies

    Example:
        FLOWMAIL_PLUGINS=email -> only the email plugin is loaded
        FLOWMAIL_PLUGINS not set -> all built-in plugins are loaded
    """
    raw = os.getenv("FLOWMAIL_PLUGINS")
    if raw is None:
        return None
    names = {name.strip().lower() for name in raw.split(",") if name.strip()}
    return names or None


def load_plugin(name: str) -> None:
    """
    Import the module of a built-in plugin.

    Raises:
        PluginError: Unknown plugin or import failure
    """
    module_path = BUILTIN_PLUGINS.get(name.lower())
    if module_path is None:
        raise PluginError(f"Unknown plugin: {name}")

    try:
        importlib.import_module(module_path)
    except ImportError as e:
        logger.error(f"Failed to load plugin '{name}': {e}")
        raise PluginError(f"Failed to load plugin '{name}': {e}") from e

    logger.debug(f"Loaded plugin '{name}' from {module_path}")


def load_plugins() -> List[str]:
    """
    Load all allowed built-in plugins.

    Returns:
        Names registered after loading
    """
    allowed = get_allowed_plugin_names()
    for name in BUILTIN_PLUGINS:
        if allowed is not None and name not in allowed:
            logger.debug(f"Plugin '{name}' skipped by FLOWMAIL_PLUGINS")
            continue
        load_plugin(name)
    return get_registry().list_names()


__all__ = ["BUILTIN_PLUGINS", "get_allowed_plugin_names", "load_plugin", "load_plugins"]
