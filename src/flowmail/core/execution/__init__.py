"""
Plugin execution support: errors, execution-tracking client, step reporting.
"""

from flowmail.core.execution.errors import (
    AuthenticationError,
    BusinessError,
    ConfigurationError,
    DeliveryError,
    FlowmailError,
    NetworkError,
    PluginError,
    StepUpdateError,
    UnsupportedOperationError,
    ValidationError,
)
from flowmail.core.execution.executions_client import ExecutionsClient
from flowmail.core.execution.step_reporter import FlagStepReporter, StatusStepReporter

__all__ = [
    "AuthenticationError",
    "BusinessError",
    "ConfigurationError",
    "DeliveryError",
    "FlowmailError",
    "NetworkError",
    "PluginError",
    "StepUpdateError",
    "UnsupportedOperationError",
    "ValidationError",
    "ExecutionsClient",
    "FlagStepReporter",
    "StatusStepReporter",
]
