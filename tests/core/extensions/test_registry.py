"""
Test in-process plugin registration and loading
"""

import pytest

from flowmail.core.execution.errors import PluginError
from flowmail.core.extensions import get_registry, load_plugin, load_plugins, plugin_register
from flowmail.core.extensions.manager import get_allowed_plugin_names
from flowmail.core.extensions.registry import PluginRegistry
from flowmail.core.models import PluginMeta


class TestPluginRegistry:
    """Test PluginRegistry"""

    def test_register_and_get(self):
        registry = PluginRegistry()
        plugin = object()

        assert registry.register("Email", plugin) is True
        assert registry.get("email") is plugin
        assert registry.is_registered("EMAIL")
        assert registry.list_names() == ["email"]

    def test_duplicate_skipped_without_override(self):
        registry = PluginRegistry()
        first, second = object(), object()
        registry.register("email", first)

        assert registry.register("email", second) is False
        assert registry.get("email") is first

        assert registry.register("email", second, override=True) is True
        assert registry.get("email") is second

    def test_clear(self):
        registry = PluginRegistry()
        registry.register("email", object())
        registry.clear()

        assert registry.get("email") is None
        assert registry.list_names() == []


class TestPluginRegister:
    """Test @plugin_register"""

    def test_name_from_init(self):
        @plugin_register(override=True)
        class SmsPlugin:
            def init(self) -> PluginMeta:
                return PluginMeta(name="Sms", type="action", version="0.1.0", creator="tests")

        try:
            assert isinstance(get_registry().get("sms"), SmsPlugin)
        finally:
            get_registry()._plugins.pop("sms", None)

    def test_explicit_name(self):
        @plugin_register(name="pager", override=True)
        class PagerPlugin:
            pass

        try:
            assert isinstance(get_registry().get("pager"), PagerPlugin)
        finally:
            get_registry()._plugins.pop("pager", None)

    def test_only_classes(self):
        with pytest.raises(TypeError):
            plugin_register()(lambda: None)


class TestLoadPlugins:
    """Test built-in plugin loading"""

    def test_load_plugins_registers_email(self, monkeypatch):
        monkeypatch.delenv("FLOWMAIL_PLUGINS", raising=False)

        names = load_plugins()

        assert "email" in names

    def test_unknown_plugin(self):
        with pytest.raises(PluginError, match="Unknown plugin"):
            load_plugin("fax")

    def test_allowed_names(self, monkeypatch):
        monkeypatch.setenv("FLOWMAIL_PLUGINS", " Email , ,sms")
        assert get_allowed_plugin_names() == {"email", "sms"}

        monkeypatch.setenv("FLOWMAIL_PLUGINS", " , ")
        assert get_allowed_plugin_names() is None

        monkeypatch.delenv("FLOWMAIL_PLUGINS")
        assert get_allowed_plugin_names() is None
