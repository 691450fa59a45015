"""
In-process plugin registration and loading.
"""

from flowmail.core.extensions.decorators import plugin_register
from flowmail.core.extensions.manager import load_plugin, load_plugins
from flowmail.core.extensions.registry import PluginRegistry, get_registry

__all__ = ["PluginRegistry", "get_registry", "load_plugin", "load_plugins", "plugin_register"]
