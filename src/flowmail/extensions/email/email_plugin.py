"""
Email plugin for runners that load plugins in-process.

The runner imports this module, looks the plugin up in the registry and
calls execute() with the execution, flow, payload and step. Progress is
reported as flag-shaped step updates to the execution-tracking API
configured through FLOWMAIL_API_URL / FLOWMAIL_API_KEY.
"""

import json
from typing import Any, List, Optional

from flowmail.core.config_manager import PluginSettings, get_config_manager
from flowmail.core.execution.errors import BusinessError, StepUpdateError
from flowmail.core.execution.executions_client import ExecutionsClient
from flowmail.core.execution.step_reporter import FlagStepReporter
from flowmail.core.extensions.decorators import plugin_register
from flowmail.core.extensions.registry import get_registry
from flowmail.core.models import (
    Action,
    ActionDetails,
    ExecuteOutcome,
    Execution,
    PluginDetails,
    PluginMeta,
    Step,
)
from flowmail.extensions.email.params import MailParams, mail_param_specs
from flowmail.extensions.email.smtp_sender import send_mail
from flowmail.logger import get_logger

logger = get_logger(__name__)


@plugin_register()
class EmailPlugin:
    """Linked-variant mail action."""

    def __init__(self, settings: Optional[PluginSettings] = None):
        self._settings = settings

    @property
    def settings(self) -> PluginSettings:
        return self._settings or get_config_manager().settings

    def init(self) -> PluginMeta:
        return PluginMeta(name="Email", type="action", version="1.0.1", creator="JustNZ")

    def details(self) -> PluginDetails:
        params = [spec.model_dump() for spec in mail_param_specs(port_default=587)]
        return PluginDetails(
            action=ActionDetails(
                id="mail",
                name="Mail",
                description="Sends an email",
                icon="solar:mailbox-linear",
                type="mail",
                category="Utility",
                function=self.execute,
                params=json.dumps(params),
            )
        )

    def _client(self) -> ExecutionsClient:
        settings = self.settings
        return ExecutionsClient(
            api_url=settings.api_url,
            api_key=settings.api_key,
            timeout=settings.request_timeout,
            retry_attempts=settings.retry_attempts,
            retry_backoff=settings.retry_backoff,
        )

    async def execute(
        self,
        execution: Execution,
        flow: Any,
        payload: Any,
        steps: List[Step],
        step: Step,
        action: Action,
    ) -> ExecuteOutcome:
        """
        Send the email configured on the action.

        Never raises for delivery or reporting problems; they end the step
        with failed=True.
        """
        params = MailParams.from_action_params(action.params).with_env_defaults()

        async with self._client() as client:
            reporter = FlagStepReporter(client, str(execution.id), step.id, action_id=action.id)

            try:
                await reporter.running(params.address)
            except StepUpdateError as e:
                logger.error(f"Failed to mark step {step.id} as running: {e.message}")
                return ExecuteOutcome(failed=True)

            try:
                receipt = await send_mail(params, timeout=self.settings.smtp_timeout)
            except Exception as e:
                logger.error(
                    f"Failed to send email for step {step.id}: {e}",
                    exc_info=not isinstance(e, BusinessError),
                )
                try:
                    await reporter.failed(e)
                except StepUpdateError as update_error:
                    logger.error(update_error.message)
                return ExecuteOutcome(failed=True)

            try:
                await reporter.succeeded(receipt.recipients)
            except StepUpdateError as e:
                logger.error(e.message)
                return ExecuteOutcome(failed=True)

        return ExecuteOutcome(finished=True)

    def handle(self, request: Any) -> None:
        """The mail action exposes no HTTP endpoint."""
        return None


plugin = get_registry().get("email") or EmailPlugin()

__all__ = ["EmailPlugin", "plugin"]
