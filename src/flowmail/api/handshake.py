"""
Plugin handshake with the launching runner.

The runner starts the plugin as a child process with a magic cookie in the
environment and reads a single line from the plugin's stdout to learn where
to connect:

    <core protocol>|<app protocol>|tcp|<host>:<port>|jsonrpc
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

CORE_PROTOCOL_VERSION = 1
APP_PROTOCOL_VERSION = 1
MAGIC_COOKIE_KEY = "PLUGIN_MAGIC_COOKIE"
MAGIC_COOKIE_VALUE = "hello"
RPC_PROTOCOL = "jsonrpc"

MISSING_COOKIE_MESSAGE = (
    "This binary is a plugin. These are not meant to be executed directly.\n"
    "Please execute the program that consumes these plugins, which will\n"
    "load any plugins automatically\n"
)


@dataclass(frozen=True)
class HandshakeConfig:
    protocol_version: int = APP_PROTOCOL_VERSION
    magic_cookie_key: str = MAGIC_COOKIE_KEY
    magic_cookie_value: str = MAGIC_COOKIE_VALUE


DEFAULT_HANDSHAKE = HandshakeConfig()


def cookie_present(config: HandshakeConfig = DEFAULT_HANDSHAKE) -> bool:
    return os.getenv(config.magic_cookie_key) == config.magic_cookie_value


def ensure_launched_by_host(
    config: HandshakeConfig = DEFAULT_HANDSHAKE, stream: Optional[TextIO] = None
) -> None:
    """Exit with status 1 unless the runner's magic cookie is set."""
    if cookie_present(config):
        return
    (stream or sys.stderr).write(MISSING_COOKIE_MESSAGE)
    raise SystemExit(1)


def handshake_line(host: str, port: int, config: HandshakeConfig = DEFAULT_HANDSHAKE) -> str:
    return f"{CORE_PROTOCOL_VERSION}|{config.protocol_version}|tcp|{host}:{port}|{RPC_PROTOCOL}"


def announce(host: str, port: int, stream: Optional[TextIO] = None) -> None:
    out = stream or sys.stdout
    out.write(handshake_line(host, port) + "\n")
    out.flush()


__all__ = [
    "HandshakeConfig",
    "DEFAULT_HANDSHAKE",
    "announce",
    "cookie_present",
    "ensure_launched_by_host",
    "handshake_line",
]
