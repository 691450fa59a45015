"""
SMTP delivery via aiosmtplib.

The message is either sent verbatim (when no subject is given, the Message
parameter is treated as a complete RFC 5322 message and may carry its own
headers) or wrapped in an EmailMessage with From/To/Subject headers.
"""

from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Dict, List, Union

import aiosmtplib
from aiosmtplib import (
    SMTPAuthenticationError,
    SMTPConnectError,
    SMTPException,
    SMTPServerDisconnected,
    SMTPTimeoutError,
)

from flowmail.core.execution.errors import AuthenticationError, DeliveryError, NetworkError
from flowmail.extensions.email.params import MailParams
from flowmail.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DeliveryReceipt:
    recipients: List[str]
    address: str


def build_message(params: MailParams) -> Union[EmailMessage, bytes]:
    if not params.subject:
        return params.message.encode("utf-8")

    msg = EmailMessage()
    msg["From"] = params.from_email
    msg["To"] = ", ".join(params.to)
    msg["Subject"] = params.subject
    msg.set_content(params.message)
    return msg


LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


def build_send_kwargs(params: MailParams, timeout: float) -> Dict[str, Any]:
    """Connection, TLS and login arguments for aiosmtplib.send; the message goes positionally."""
    send_kwargs: Dict[str, Any] = {
        "sender": params.from_email,
        "recipients": list(params.to),
        "hostname": params.smtp_host,
        "port": params.port,
        "timeout": timeout,
    }

    if params.implicit_tls:
        send_kwargs["use_tls"] = True
        send_kwargs["start_tls"] = False
    elif not params.smtp_use_tls:
        send_kwargs["start_tls"] = False
    elif params.password and params.smtp_host not in LOCAL_HOSTS:
        # credentials only travel over TLS to remote servers
        send_kwargs["start_tls"] = True

    # no password means an unauthenticated relay
    if params.password:
        send_kwargs["username"] = params.login
        send_kwargs["password"] = params.password

    return send_kwargs


async def send_mail(params: MailParams, timeout: float = 30.0) -> DeliveryReceipt:
    """
    Authenticate on the SMTP server and send one message.

    Args:
        params: Validated mail parameters
        timeout: SMTP operation timeout in seconds

    Returns:
        DeliveryReceipt with the recipients the server accepted the message for

    Raises:
        AuthenticationError: Server rejected the credentials
        NetworkError: Server unreachable, timed out or dropped the connection
        DeliveryError: Server refused the message or a recipient
    """
    params.validate()
    address = params.address
    context = {"address": address, "from": params.from_email}

    logger.info(f"Sending email via SMTP ({address}) to {params.to}")

    try:
        await aiosmtplib.send(build_message(params), **build_send_kwargs(params, timeout))
    except SMTPAuthenticationError as e:
        raise AuthenticationError(
            f"SMTP authentication failed for {params.login}: {e.message}", context=context
        ) from e
    except (SMTPConnectError, SMTPTimeoutError, SMTPServerDisconnected) as e:
        raise NetworkError(f"Cannot reach SMTP server {address}: {e}", context=context) from e
    except SMTPException as e:
        raise DeliveryError(f"SMTP server {address} refused the message: {e}", context=context) from e

    logger.info(f"Email sent to {', '.join(params.to)}")
    return DeliveryReceipt(recipients=list(params.to), address=address)


__all__ = ["DeliveryReceipt", "build_message", "build_send_kwargs", "send_mail"]
