"""
Run the plugin RPC server.

The runner launches `flowmail serve` with PLUGIN_MAGIC_COOKIE set and reads
the connection line from stdout.
"""

from typing import Optional

import typer

app = typer.Typer(name="serve", help="Run the plugin RPC server")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (FLOWMAIL_RPC_HOST)"),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Port to bind, 0 for a free port (FLOWMAIL_RPC_PORT)"
    ),
    skip_handshake: bool = typer.Option(
        False, "--skip-handshake", help="Start without the runner's magic cookie (debugging)"
    ),
):
    """
    Serve Plugin.Info, Plugin.ExecuteTask and Plugin.HandleAlert over JSON-RPC.
    """
    from flowmail.api.server import serve as run_server

    run_server(host=host, port=port, require_handshake=not skip_handshake)
