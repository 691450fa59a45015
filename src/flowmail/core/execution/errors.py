"""
Custom exceptions for plugin execution.

Exception Hierarchy:
    FlowmailError (base)
        ├── BusinessError (expected failures, logged without stack trace)
        │   ├── ValidationError (bad or missing action parameters)
        │   ├── ConfigurationError (config/environment issues)
        │   ├── NetworkError (connection failures)
        │   │   └── StepUpdateError (execution-tracking API unreachable or rejecting)
        │   ├── AuthenticationError (SMTP login rejected)
        │   ├── DeliveryError (SMTP server refused the message)
        │   └── UnsupportedOperationError (operation the plugin does not offer)
        └── SystemError (unexpected errors, logged with stack trace)
            └── PluginError (plugin runtime failures)

Structured Error Format:
    All error classes accept optional keyword-only fields:
    - what: What went wrong (brief description)
    - why: Why it happened (root cause)
    - how_to_fix: How to resolve it (actionable steps)
    - context: Additional context (dict with relevant details)
"""


class FlowmailError(RuntimeError):
    """
    Base exception for all flowmail errors.

    Supports structured error information:
    - what: What went wrong
    - why: Why it happened
    - how_to_fix: How to resolve it
    - context: Additional context dict
    """

    def __init__(
        self,
        message: str,
        *,
        what: str | None = None,
        why: str | None = None,
        how_to_fix: str | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.what = what
        self.why = why
        self.how_to_fix = how_to_fix
        self.context = context or {}

        if what:
            formatted_msg = f"❌ {what}"
            if why:
                formatted_msg += f"\n\n💡 Reason: {why}"
            if how_to_fix:
                formatted_msg += f"\n\n✅ Solution: {how_to_fix}"
            if context:
                context_str = "\n".join(f"  - {k}: {v}" for k, v in context.items())
                formatted_msg += f"\n\n📝 Context:\n{context_str}"
            super().__init__(formatted_msg)
        else:
            super().__init__(message)


class BusinessError(FlowmailError):
    """
    Base exception for expected failures.

    Raised for bad input, missing configuration, unreachable servers and
    rejected credentials. Logged without exc_info.
    """

    pass


class ValidationError(BusinessError):
    """
    Action parameter validation error.

    Example:
        >>> if not params.smtp_host:
        >>>     raise ValidationError("SmtpHost is required")
    """

    pass


class ConfigurationError(BusinessError):
    """Missing or invalid plugin configuration."""

    pass


class NetworkError(BusinessError):
    """
    Network or connection-related error.

    Example:
        >>> raise NetworkError(
        >>>     "Failed to connect",
        >>>     what="SMTP connection failed",
        >>>     why=f"Cannot connect to {address}",
        >>>     how_to_fix="Check SmtpHost and SmtpPort",
        >>>     context={"address": address},
        >>> )
    """

    pass


class StepUpdateError(NetworkError):
    """The execution-tracking API could not record a step update."""

    pass


class AuthenticationError(BusinessError):
    """SMTP server rejected the sender credentials."""

    pass


class DeliveryError(BusinessError):
    """SMTP server refused the message or a recipient."""

    pass


class UnsupportedOperationError(BusinessError):
    """Operation is part of the host interface but not offered by this plugin."""

    pass


class SystemError(FlowmailError):
    """
    Base exception for unexpected system-level errors.

    These are logged with full stack traces.
    """

    pass


class PluginError(SystemError):
    """Unexpected internal plugin failure."""

    pass


__all__ = [
    "FlowmailError",
    "BusinessError",
    "ValidationError",
    "ConfigurationError",
    "NetworkError",
    "StepUpdateError",
    "AuthenticationError",
    "DeliveryError",
    "UnsupportedOperationError",
    "SystemError",
    "PluginError",
]
