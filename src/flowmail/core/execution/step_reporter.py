"""
Step progress reporting.

A reporter is bound to one step of one execution and turns the three
outcomes of a mail action into step updates for the execution-tracking API.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from flowmail.core.execution.errors import FlowmailError
from flowmail.core.execution.executions_client import ExecutionsClient
from flowmail.core.models import ActionStepUpdate, ExecutionStepUpdate, StepStatus, StepUpdate
from flowmail.logger import get_logger

logger = get_logger(__name__)


def running_message(address: str) -> str:
    return f"Authenticate on SMTP Server: {address}"


def failed_message(error: BaseException) -> str:
    detail = error.message if isinstance(error, FlowmailError) else str(error)
    return f"Failed to send email: {detail}"


def succeeded_message(recipients: List[str]) -> str:
    return f"Email sent to {', '.join(recipients)}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StepReporter(ABC):
    """Reports running, failure and success of a single step."""

    def __init__(self, client: ExecutionsClient, execution_id: str, step_id: str):
        self.client = client
        self.execution_id = str(execution_id)
        self.step_id = step_id

    async def _send(self, update: StepUpdate) -> None:
        await self.client.update_step(self.execution_id, update)

    async def running(self, address: str) -> None:
        await self._send(self.running_update(address))

    async def failed(self, error: BaseException) -> None:
        await self._send(self.failed_update(error))

    async def succeeded(self, recipients: List[str]) -> None:
        await self._send(self.succeeded_update(recipients))

    @abstractmethod
    def running_update(self, address: str) -> StepUpdate: ...

    @abstractmethod
    def failed_update(self, error: BaseException) -> StepUpdate: ...

    @abstractmethod
    def succeeded_update(self, recipients: List[str]) -> StepUpdate: ...


class StatusStepReporter(StepReporter):
    """Emits status-shaped updates (running / error / success)."""

    def running_update(self, address: str) -> ExecutionStepUpdate:
        return ExecutionStepUpdate(
            id=self.step_id,
            messages=[running_message(address)],
            status=StepStatus.running,
            started_at=_now(),
        )

    def failed_update(self, error: BaseException) -> ExecutionStepUpdate:
        return ExecutionStepUpdate(
            id=self.step_id,
            messages=[failed_message(error)],
            status=StepStatus.error,
            finished_at=_now(),
        )

    def succeeded_update(self, recipients: List[str]) -> ExecutionStepUpdate:
        return ExecutionStepUpdate(
            id=self.step_id,
            messages=[succeeded_message(recipients)],
            status=StepStatus.success,
            finished_at=_now(),
        )


class FlagStepReporter(StepReporter):
    """Emits flag-shaped updates (pending / running / finished / error)."""

    def __init__(
        self,
        client: ExecutionsClient,
        execution_id: str,
        step_id: str,
        action_id: Optional[str] = None,
    ):
        super().__init__(client, execution_id, step_id)
        self.action_id = action_id

    def running_update(self, address: str) -> ActionStepUpdate:
        return ActionStepUpdate(
            id=self.step_id,
            action_id=self.action_id,
            action_messages=[running_message(address)],
            pending=False,
            running=True,
            started_at=_now(),
        )

    def failed_update(self, error: BaseException) -> ActionStepUpdate:
        return ActionStepUpdate(
            id=self.step_id,
            action_id=self.action_id,
            action_messages=[failed_message(error)],
            pending=False,
            running=False,
            finished=True,
            error=True,
            finished_at=_now(),
        )

    def succeeded_update(self, recipients: List[str]) -> ActionStepUpdate:
        # success update carries no action id
        return ActionStepUpdate(
            id=self.step_id,
            action_messages=[succeeded_message(recipients)],
            running=False,
            finished=True,
            finished_at=_now(),
        )


__all__ = [
    "StepReporter",
    "StatusStepReporter",
    "FlagStepReporter",
    "running_message",
    "failed_message",
    "succeeded_message",
]
