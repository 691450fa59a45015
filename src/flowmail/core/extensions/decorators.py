"""
Plugin registration decorator.

Usage:
    @plugin_register()
    class EmailPlugin:
        def init(self) -> PluginMeta:
            return PluginMeta(name="Email", ...)

The class is instantiated once; the instance is stored under the lowercased
name returned by init(), or under the explicit name given to the decorator.
"""

from typing import Callable, Optional, TypeVar

from flowmail.core.extensions.registry import get_registry

T = TypeVar("T", bound=type)


def _plugin_name(instance: object) -> str:
    init = getattr(instance, "init", None)
    if callable(init):
        meta = init()
        name = getattr(meta, "name", None)
        if name:
            return name
    return type(instance).__name__


def plugin_register(name: Optional[str] = None, override: bool = False) -> Callable[[T], T]:
    """
    Register a plugin class with the in-process registry.

    Args:
        name: Registry name. Defaults to init().name, then the class name.
        override: Replace an existing registration with the same name.

    Returns:
        The decorated class, unchanged
    """

    def decorator(cls: T) -> T:
        if not isinstance(cls, type):
            raise TypeError("@plugin_register can only be applied to classes.")
        instance = cls()
        get_registry().register(name or _plugin_name(instance), instance, override=override)
        return cls

    return decorator


__all__ = ["plugin_register"]
