"""
Test SMTP delivery

Most tests mock aiosmtplib.send and assert on the arguments it receives and
on how its exceptions are translated; one runs a full exchange against a
local server.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from aiosmtplib import (
    SMTPAuthenticationError,
    SMTPConnectError,
    SMTPDataError,
    SMTPServerDisconnected,
    SMTPTimeoutError,
)

from flowmail.core.execution.errors import (
    AuthenticationError,
    DeliveryError,
    NetworkError,
    ValidationError,
)
from flowmail.extensions.email.params import MailParams
from flowmail.extensions.email.smtp_sender import build_message, build_send_kwargs, send_mail


def _params(**overrides: object) -> MailParams:
    base: dict[str, object] = {
        "from_email": "alerts@example.com",
        "password": "secret",
        "to": ["ops@example.com", "oncall@example.com"],
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "message": "Disk usage above 90%",
    }
    base.update(overrides)
    return MailParams(**base)  # type: ignore[arg-type]


class TestBuildMessage:
    """Test message construction"""

    def test_raw_message_without_subject(self):
        raw = "Subject: Alert\r\n\r\nDisk usage above 90%"

        message = build_message(_params(message=raw))

        assert message == raw.encode("utf-8")

    def test_raw_message_utf8(self):
        assert build_message(_params(message="Température élevée")) == "Température élevée".encode(
            "utf-8"
        )

    def test_email_message_with_subject(self):
        message = build_message(_params(subject="Disk alert"))

        assert message["From"] == "alerts@example.com"
        assert message["To"] == "ops@example.com, oncall@example.com"
        assert message["Subject"] == "Disk alert"
        assert message.get_content_type() == "text/plain"
        assert "Disk usage above 90%" in message.get_content()


class TestBuildSendKwargs:
    """Test connection and auth arguments"""

    def test_starttls_opportunistic_without_password(self):
        kwargs = build_send_kwargs(_params(password=""), timeout=10)

        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["port"] == 587
        assert kwargs["sender"] == "alerts@example.com"
        assert kwargs["recipients"] == ["ops@example.com", "oncall@example.com"]
        assert kwargs["timeout"] == 10
        assert "message" not in kwargs
        assert "start_tls" not in kwargs
        assert "use_tls" not in kwargs

    def test_starttls_required_with_password(self):
        kwargs = build_send_kwargs(_params(), timeout=10)

        assert kwargs["start_tls"] is True
        assert "use_tls" not in kwargs

    @pytest.mark.parametrize("host", ["localhost", "127.0.0.1", "::1"])
    def test_starttls_optional_on_localhost(self, host):
        kwargs = build_send_kwargs(_params(smtp_host=host), timeout=10)

        assert "start_tls" not in kwargs
        assert kwargs["password"] == "secret"

    def test_implicit_tls_on_465(self):
        kwargs = build_send_kwargs(_params(smtp_port=465), timeout=10)

        assert kwargs["use_tls"] is True
        assert kwargs["start_tls"] is False

    def test_tls_disabled(self):
        kwargs = build_send_kwargs(_params(smtp_use_tls=False), timeout=10)

        assert kwargs["start_tls"] is False

    def test_login_uses_sender(self):
        kwargs = build_send_kwargs(_params(), timeout=10)

        assert kwargs["username"] == "alerts@example.com"
        assert kwargs["password"] == "secret"

    def test_login_uses_explicit_username(self):
        kwargs = build_send_kwargs(_params(smtp_username="relay-user"), timeout=10)

        assert kwargs["username"] == "relay-user"

    def test_no_login_without_password(self):
        kwargs = build_send_kwargs(_params(password=""), timeout=10)

        assert "username" not in kwargs
        assert "password" not in kwargs


class TestSendMail:
    """Test send_mail"""

    @pytest.mark.asyncio
    async def test_success(self):
        with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            receipt = await send_mail(_params(), timeout=5)

        mock_send.assert_awaited_once()
        assert mock_send.call_args.args == (b"Disk usage above 90%",)
        assert "message" not in mock_send.call_args.kwargs
        assert mock_send.call_args.kwargs["hostname"] == "smtp.example.com"
        assert receipt.recipients == ["ops@example.com", "oncall@example.com"]
        assert receipt.address == "smtp.example.com:587"

    @pytest.mark.asyncio
    async def test_validation_before_connect(self):
        with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            with pytest.raises(ValidationError, match="SmtpHost is required"):
                await send_mail(_params(smtp_host=""))

        mock_send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authentication_error(self):
        with patch(
            "aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=SMTPAuthenticationError(535, "5.7.8 Authentication credentials invalid"),
        ):
            with pytest.raises(AuthenticationError, match="credentials invalid") as exc_info:
                await send_mail(_params())

        assert exc_info.value.context["address"] == "smtp.example.com:587"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            SMTPConnectError("Error connecting to smtp.example.com on port 587"),
            SMTPTimeoutError("Timed out connecting"),
            SMTPServerDisconnected("Connection lost"),
        ],
    )
    async def test_network_errors(self, error):
        with patch("aiosmtplib.send", new_callable=AsyncMock, side_effect=error):
            with pytest.raises(NetworkError, match="Cannot reach SMTP server smtp.example.com:587"):
                await send_mail(_params())

    @pytest.mark.asyncio
    async def test_refused_message(self):
        with patch(
            "aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=SMTPDataError(554, "Message rejected"),
        ):
            with pytest.raises(DeliveryError, match="refused the message"):
                await send_mail(_params())


class _RecordingSMTPServer:
    """Minimal SMTP server on 127.0.0.1 recording the commands it receives"""

    def __init__(self):
        self.commands: list[str] = []
        self.data = b""
        self.server = None

    @property
    def port(self) -> int:
        return self.server.sockets[0].getsockname()[1]

    async def __aenter__(self):
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self

    async def __aexit__(self, *exc_info):
        self.server.close()
        await self.server.wait_closed()

    async def _handle(self, reader, writer):
        writer.write(b"220 localhost ESMTP\r\n")
        await writer.drain()
        while line := await reader.readline():
            command = line.decode().strip()
            self.commands.append(command)
            verb = command.split(" ", 1)[0].upper()
            if verb == "EHLO":
                writer.write(b"250-localhost\r\n250 8BITMIME\r\n")
            elif verb == "DATA":
                writer.write(b"354 End data with <CR><LF>.<CR><LF>\r\n")
                await writer.drain()
                while (chunk := await reader.readline()) != b".\r\n":
                    self.data += chunk
                writer.write(b"250 OK queued\r\n")
            elif verb == "QUIT":
                writer.write(b"221 Bye\r\n")
                await writer.drain()
                break
            else:
                writer.write(b"250 OK\r\n")
            await writer.drain()
        writer.close()


class TestSendMailOverSocket:
    """Test a full SMTP exchange against a local server"""

    @pytest.mark.asyncio
    async def test_relay_delivery(self):
        raw = "Subject: Disk alert\r\n\r\nDisk usage above 90%\r\n"
        async with _RecordingSMTPServer() as server:
            receipt = await send_mail(
                _params(
                    password="",
                    smtp_host="127.0.0.1",
                    smtp_port=server.port,
                    message=raw,
                ),
                timeout=5,
            )

        assert receipt.recipients == ["ops@example.com", "oncall@example.com"]
        mail_from = [command for command in server.commands if command.startswith("MAIL FROM:")]
        assert mail_from[0].startswith("MAIL FROM:<alerts@example.com>")
        assert sum(command.startswith("RCPT TO:") for command in server.commands) == 2
        assert not any(command.upper().startswith("AUTH") for command in server.commands)
        assert b"Disk usage above 90%" in server.data
