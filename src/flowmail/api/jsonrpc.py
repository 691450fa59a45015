"""
JSON-RPC 2.0 endpoint exposing the mail plugin to the runner.

Methods:
    Plugin.Info          -> PluginInfo
    Plugin.ExecuteTask   -> PluginResponse (params: ExecuteTaskRequest)
    Plugin.HandleAlert   -> PluginResponse (params: AlertHandlerRequest)
"""

import json
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from flowmail.core.execution.errors import BusinessError
from flowmail.core.models import AlertHandlerRequest, ExecuteTaskRequest
from flowmail.extensions.email.mail_plugin import MailPlugin
from flowmail.logger import get_logger

logger = get_logger(__name__)

RPC_PATH = "/rpc"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
PLUGIN_ERROR = -32000

Handler = Callable[[MailPlugin, Dict[str, Any]], Awaitable[BaseModel]]


async def _info(plugin: MailPlugin, params: Dict[str, Any]) -> BaseModel:
    return plugin.info()


async def _execute_task(plugin: MailPlugin, params: Dict[str, Any]) -> BaseModel:
    return await plugin.execute_task(ExecuteTaskRequest.model_validate(params))


async def _handle_alert(plugin: MailPlugin, params: Dict[str, Any]) -> BaseModel:
    return await plugin.handle_alert(AlertHandlerRequest.model_validate(params))


METHODS: Dict[str, Handler] = {
    "Plugin.Info": _info,
    "Plugin.ExecuteTask": _execute_task,
    "Plugin.HandleAlert": _handle_alert,
}


def _error(request_id: Any, code: int, message: str, data: Optional[Any] = None) -> JSONResponse:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return JSONResponse({"jsonrpc": "2.0", "error": error, "id": request_id})


def _result(request_id: Any, result: BaseModel) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "result": result.model_dump(mode="json"), "id": request_id}
    )


class PluginRPCHandler:
    """Dispatches JSON-RPC calls to a MailPlugin."""

    def __init__(self, plugin: Optional[MailPlugin] = None):
        self.plugin = plugin or MailPlugin()

    async def handle(self, request: Request) -> JSONResponse:
        try:
            body: Union[Dict[str, Any], Any] = json.loads(await request.body())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return _error(None, PARSE_ERROR, f"Parse error: {e}")

        if not isinstance(body, dict) or body.get("jsonrpc") != "2.0" or "method" not in body:
            request_id = body.get("id") if isinstance(body, dict) else None
            return _error(request_id, INVALID_REQUEST, "Invalid Request")

        request_id = body.get("id")
        method = body["method"]
        params = body.get("params") or {}

        handler = METHODS.get(method)
        if handler is None:
            return _error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        if not isinstance(params, dict):
            return _error(request_id, INVALID_PARAMS, "params must be an object")

        logger.debug(f"RPC call {method} (id={request_id})")

        try:
            result = await handler(self.plugin, params)
        except PydanticValidationError as e:
            details = json.loads(e.json(include_url=False))
            return _error(request_id, INVALID_PARAMS, "Invalid params", data=details)
        except BusinessError as e:
            logger.error(f"{method} failed: {e.message}")
            return _error(request_id, PLUGIN_ERROR, e.message, data=e.context or None)
        except Exception as e:
            logger.error(f"{method} failed unexpectedly: {e}", exc_info=True)
            return _error(request_id, INTERNAL_ERROR, f"Internal error: {e}")

        return _result(request_id, result)


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(plugin: Optional[MailPlugin] = None) -> Starlette:
    """Create the Starlette application serving the plugin."""
    handler = PluginRPCHandler(plugin)
    return Starlette(
        routes=[
            Route(RPC_PATH, handler.handle, methods=["POST"]),
            Route("/health", health, methods=["GET"]),
        ]
    )


__all__ = ["PluginRPCHandler", "create_app", "METHODS", "RPC_PATH"]
