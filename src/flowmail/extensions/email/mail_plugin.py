"""
Mail plugin for runners that talk to plugins over RPC.

The runner sends an ExecuteTaskRequest carrying the step, its action
parameters and the location of the execution-tracking API. Progress is
reported as status-shaped step updates.

Example request params (JSON-RPC "Plugin.ExecuteTask"):
{
    "config": {"api_url": "http://runner-backend:8080", "api_key": "..."},
    "execution": {"id": "2f6c1b9e-..."},
    "step": {
        "id": "step-1",
        "action": {
            "params": [
                {"key": "From", "value": "alerts@example.com"},
                {"key": "To", "value": "ops@example.com,oncall@example.com"},
                {"key": "SmtpHost", "value": "smtp.example.com"},
                {"key": "SmtpPort", "value": "587"},
                {"key": "Password", "value": "secret"},
                {"key": "Message", "value": "Disk usage above 90%"}
            ]
        }
    }
}
"""

from typing import Optional

from flowmail.core.config_manager import PluginSettings, get_config_manager
from flowmail.core.execution.errors import BusinessError, UnsupportedOperationError
from flowmail.core.execution.executions_client import ExecutionsClient
from flowmail.core.execution.step_reporter import StatusStepReporter
from flowmail.core.models import (
    AlertHandlerRequest,
    ExecuteTaskRequest,
    PluginActionInfo,
    PluginInfo,
    PluginResponse,
)
from flowmail.extensions.email.params import MailParams, mail_param_specs
from flowmail.extensions.email.smtp_sender import send_mail
from flowmail.logger import get_logger

logger = get_logger(__name__)

PLUGIN_NAME = "Mail"
PLUGIN_VERSION = "1.1.1"
PLUGIN_AUTHOR = "JustNZ"


class MailPlugin:
    """Sends one email per executed step and reports the outcome to the runner."""

    def __init__(self, settings: Optional[PluginSettings] = None):
        self._settings = settings

    @property
    def settings(self) -> PluginSettings:
        return self._settings or get_config_manager().settings

    def info(self) -> PluginInfo:
        return PluginInfo(
            name=PLUGIN_NAME,
            type="action",
            version=PLUGIN_VERSION,
            author=PLUGIN_AUTHOR,
            actions=PluginActionInfo(
                name="Mail",
                description="Send an email",
                plugin="mail",
                icon="solar:mailbox-linear",
                category="Utility",
                params=mail_param_specs(port_default="587"),
            ),
            endpoints={},
        )

    def _client(self, request: ExecuteTaskRequest) -> ExecutionsClient:
        settings = self.settings
        return ExecutionsClient.from_runner_config(
            request.config,
            timeout=settings.request_timeout,
            retry_attempts=settings.retry_attempts,
            retry_backoff=settings.retry_backoff,
        )

    async def execute_task(self, request: ExecuteTaskRequest) -> PluginResponse:
        """
        Send the email configured on the request's step.

        Args:
            request: Step, execution and execution-tracking API location

        Returns:
            PluginResponse(success=True) once the email is sent and the success
            update is recorded; PluginResponse(success=False) if sending failed
            and the failure was recorded on the step.

        Raises:
            StepUpdateError: A step update could not be recorded
        """
        params = MailParams.from_action_params(request.step.action.params).with_env_defaults()

        async with self._client(request) as client:
            reporter = StatusStepReporter(client, str(request.execution.id), request.step.id)

            await reporter.running(params.address)

            try:
                receipt = await send_mail(params, timeout=self.settings.smtp_timeout)
            except Exception as e:
                logger.error(
                    f"Failed to send email for step {request.step.id}: {e}",
                    exc_info=not isinstance(e, BusinessError),
                )
                await reporter.failed(e)
                return PluginResponse(success=False)

            await reporter.succeeded(receipt.recipients)

        return PluginResponse(success=True)

    async def handle_alert(self, request: AlertHandlerRequest) -> PluginResponse:
        raise UnsupportedOperationError("not implemented")


__all__ = ["MailPlugin", "PLUGIN_NAME", "PLUGIN_VERSION"]
