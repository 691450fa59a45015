"""
flowmail - SMTP mail action plugin for workflow-automation runners

Modules:
- core.models: Data exchanged with the runner
- core.execution: Errors, execution-tracking client, step reporting
- core.extensions: In-process plugin registry (plugin_register)
- extensions.email: Mail parameters, SMTP delivery, MailPlugin, EmailPlugin
- api: JSON-RPC server launched by the runner
- cli: Command line tools
"""

__version__ = "1.1.1"

# Lazy imports keep `flowmail --help` fast
__all__ = [
    "MailPlugin",
    "EmailPlugin",
    "MailParams",
    "plugin_register",
    "get_registry",
    "__version__",
]


def __getattr__(name):
    """Lazy import of public plugin classes"""

    if name in ("MailPlugin", "EmailPlugin", "MailParams"):
        from flowmail.extensions.email import (
            EmailPlugin,  # noqa: F401
            MailParams,  # noqa: F401
            MailPlugin,  # noqa: F401
        )

        return locals()[name]

    if name in ("plugin_register", "get_registry"):
        from flowmail.core.extensions import (
            get_registry,  # noqa: F401
            plugin_register,  # noqa: F401
        )

        return locals()[name]

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
