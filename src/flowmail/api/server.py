"""
Run the plugin's RPC server as a runner-launched child process.
"""

import socket
from typing import Optional

import uvicorn

from flowmail.api.handshake import announce, ensure_launched_by_host
from flowmail.api.jsonrpc import create_app
from flowmail.core.config_manager import get_config_manager
from flowmail.extensions.email.mail_plugin import MailPlugin
from flowmail.logger import get_logger

logger = get_logger(__name__)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind a listening socket; port 0 lets the OS pick a free port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind((host, port))
    return sock


def serve(
    host: Optional[str] = None,
    port: Optional[int] = None,
    require_handshake: bool = True,
) -> None:
    """
    Serve the mail plugin until the runner terminates the process.

    Args:
        host: Interface to bind (defaults to FLOWMAIL_RPC_HOST)
        port: Port to bind, 0 for any free port (defaults to FLOWMAIL_RPC_PORT)
        require_handshake: Refuse to start unless launched by the runner
    """
    if require_handshake:
        ensure_launched_by_host()

    settings = get_config_manager().settings
    bind_host = host or settings.rpc_host
    bind_port = settings.rpc_port if port is None else port

    sock = bind_socket(bind_host, bind_port)
    actual_host, actual_port = sock.getsockname()[:2]

    app = create_app(MailPlugin(settings))
    config = uvicorn.Config(app, log_level="warning", access_log=False)
    server = uvicorn.Server(config)

    logger.info(f"Mail plugin listening on {actual_host}:{actual_port}")
    announce(actual_host, actual_port)

    server.run(sockets=[sock])


__all__ = ["serve", "bind_socket"]
