"""
Send a single email directly, without a runner and without step reporting.

Useful for checking SMTP credentials before wiring the action into a flow.
"""

import asyncio
from typing import List, Optional

import typer

from flowmail.core.execution.errors import FlowmailError
from flowmail.core.models import Param

app = typer.Typer(name="send", help="Send one email without the runner")


@app.command()
def send(
    message: str = typer.Argument(..., help="Message body, or a raw RFC 5322 message if no subject"),
    from_email: Optional[str] = typer.Option(None, "--from", help="Sender address (FROM_EMAIL)"),
    to: Optional[str] = typer.Option(None, "--to", help="Comma-separated recipients"),
    smtp_host: Optional[str] = typer.Option(None, "--host", help="SMTP server host (SMTP_HOST)"),
    smtp_port: Optional[int] = typer.Option(None, "--port", help="SMTP server port (SMTP_PORT)"),
    password: Optional[str] = typer.Option(None, "--password", help="SMTP password (SMTP_PASSWORD)"),
    username: Optional[str] = typer.Option(
        None, "--username", help="SMTP login, defaults to the sender (SMTP_USERNAME)"
    ),
    subject: Optional[str] = typer.Option(None, "--subject", "-s", help="Email subject"),
    no_tls: bool = typer.Option(False, "--no-tls", help="Never upgrade with STARTTLS"),
):
    """
    Send MESSAGE using the same parameters a flow action would use.
    """
    from flowmail.core.config_manager import get_config_manager
    from flowmail.extensions.email.params import MailParams
    from flowmail.extensions.email.smtp_sender import send_mail

    params: List[Param] = [Param(key="Message", value=message)]
    for key, value in (
        ("From", from_email),
        ("To", to),
        ("SmtpHost", smtp_host),
        ("SmtpPort", str(smtp_port) if smtp_port is not None else None),
        ("Password", password),
        ("SmtpUsername", username),
        ("Subject", subject),
    ):
        if value is not None:
            params.append(Param(key=key, value=value))
    if no_tls:
        params.append(Param(key="SmtpUseTls", value="false"))

    mail = MailParams.from_action_params(params).with_env_defaults()
    try:
        timeout = get_config_manager().settings.smtp_timeout
        receipt = asyncio.run(send_mail(mail, timeout=timeout))
    except FlowmailError as e:
        typer.echo(f"❌ Failed to send email: {e.message}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✅ Email sent to {', '.join(receipt.recipients)} via {receipt.address}")
