"""
HTTP client for the runner's execution-tracking API.

Step updates are the only call the plugin makes: every state change of the
step (running, success, error) is PUT to the API so the runner's UI can show
progress.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from flowmail.core.execution.errors import StepUpdateError
from flowmail.core.models import RunnerConfig, StepUpdate
from flowmail.logger import get_logger

logger = get_logger(__name__)


class ExecutionsClient:
    """
    Client for recording execution step updates.

    Supports exponential backoff retry on connection failures and timeouts.
    HTTP error responses are not retried.

    Usage:
        async with ExecutionsClient(api_url="http://localhost:8080", api_key="key") as client:
            await client.update_step(execution_id, update)
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
    ):
        """
        Initialize ExecutionsClient.

        Args:
            api_url: Base URL of the execution-tracking API
            api_key: Runner API key sent in the Authorization header
            timeout: Request timeout in seconds
            retry_attempts: Number of attempts before giving up
            retry_backoff: Initial backoff for exponential retry (seconds)
        """
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self.retry_backoff = retry_backoff
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_runner_config(cls, config: RunnerConfig, **kwargs: Any) -> "ExecutionsClient":
        return cls(api_url=config.api_url, api_key=config.api_key, **kwargs)

    async def __aenter__(self) -> "ExecutionsClient":
        self._client = httpx.AsyncClient()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def step_url(self, execution_id: str, step_id: str) -> str:
        return f"{self.api_url}/api/v1/executions/{execution_id}/steps/{step_id}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.api_key:
            headers["Authorization"] = self.api_key

        if not self._client:
            self._client = httpx.AsyncClient()

        last_error: Optional[Exception] = None
        backoff = self.retry_backoff

        for attempt in range(self.retry_attempts):
            try:
                logger.debug(
                    f"Execution API request (attempt {attempt + 1}/{self.retry_attempts}): "
                    f"{method} {url}"
                )
                response = await self._client.request(
                    method, url, headers=headers, timeout=self.timeout, **kwargs
                )
            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(
                    f"Execution API timeout after {self.timeout}s: {e} (attempt {attempt + 1})"
                )
            except httpx.TransportError as e:
                last_error = e
                logger.warning(f"Failed to reach {url}: {e} (attempt {attempt + 1})")
            else:
                if response.status_code >= 400:
                    raise StepUpdateError(
                        f"Execution API error {response.status_code}: {response.text}",
                        context={"url": url, "status_code": response.status_code},
                    )
                return response

            if attempt < self.retry_attempts - 1:
                await asyncio.sleep(backoff)
                backoff *= 2

        raise StepUpdateError(
            f"Failed to reach execution API at {url}: {last_error}",
            context={"url": url, "attempts": self.retry_attempts},
        )

    async def update_step(self, execution_id: str, update: StepUpdate) -> None:
        """
        Record a step update.

        Args:
            execution_id: Execution the step belongs to
            update: Step update; only fields that are set are sent

        Raises:
            StepUpdateError: If the update could not be recorded
        """
        payload: Dict[str, Any] = update.model_dump(mode="json", exclude_none=True)
        url = self.step_url(str(execution_id), update.id)
        await self._request("PUT", url, json=payload)
        logger.debug(f"Updated step {update.id} of execution {execution_id}")


__all__ = ["ExecutionsClient"]
