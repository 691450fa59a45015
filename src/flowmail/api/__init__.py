"""
RPC surface of the mail plugin.

- handshake: runner launch check and connection announcement
- jsonrpc: Starlette JSON-RPC application
- server: uvicorn runner
"""

from flowmail.api.jsonrpc import create_app

__all__ = ["create_app"]
