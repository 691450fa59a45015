"""
Mail action parameters.

The runner hands the plugin a flat list of key/value pairs configured in the
action editor. MailParams collects the keys this plugin understands and
MAIL_PARAMS declares them back to the runner.
"""

import os
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Union

from flowmail.core.execution.errors import ValidationError
from flowmail.core.models import Param, ParamSpec

IMPLICIT_TLS_PORT = 465
DEFAULT_SMTP_PORT = 587

_PORT_PATTERN = re.compile(r"[+-]?[0-9]+")


def mail_param_specs(port_default: Union[str, int] = DEFAULT_SMTP_PORT) -> List[ParamSpec]:
    """Parameter declarations advertised to the runner."""
    return [
        ParamSpec(
            key="From",
            type="text",
            default="from@mail.com",
            required=True,
            description="Sender email address",
        ),
        ParamSpec(
            key="Password",
            type="password",
            default="***",
            required=False,
            description="Sender email password",
        ),
        ParamSpec(
            key="To",
            type="text",
            default="to@mail.com",
            required=False,
            description="Recipient email address. Multiple emails can be separated by comma",
        ),
        ParamSpec(
            key="SmtpHost",
            type="text",
            default="smtp.mail.com",
            required=True,
            description="SMTP server host",
        ),
        ParamSpec(
            key="SmtpPort",
            type="number",
            default=port_default,
            required=True,
            description="SMTP server port",
        ),
        ParamSpec(
            key="Message",
            type="textarea",
            default="Email message",
            required=True,
            description="Email message",
        ),
        ParamSpec(
            key="Subject",
            type="text",
            default="",
            required=False,
            description="Email subject. When empty, Message is sent as a raw RFC 5322 message",
        ),
    ]


MAIL_PARAMS = mail_param_specs()


def split_recipients(value: str) -> List[str]:
    return [address.strip() for address in value.split(",") if address.strip()]


def parse_port(value: str) -> int:
    """Parse a port; anything but an optionally signed run of ASCII digits becomes 0."""
    if not _PORT_PATTERN.fullmatch(value):
        return 0
    return int(value)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("false", "0", "no", "off")


@dataclass
class MailParams:
    from_email: str = ""
    password: str = ""
    to: List[str] = field(default_factory=list)
    smtp_host: str = ""
    # None until SmtpPort is given; an invalid value is kept as 0
    smtp_port: Optional[int] = None
    message: str = ""
    subject: str = ""
    smtp_username: str = ""
    smtp_use_tls: bool = True

    @classmethod
    def from_action_params(cls, params: Iterable[Param]) -> "MailParams":
        """
        Collect known keys from the action's parameters.

        Keys are case-sensitive, unknown keys are ignored and a repeated key
        takes its last value.
        """
        parsed = cls()
        for param in params:
            if param.key == "From":
                parsed.from_email = param.value
            elif param.key == "Password":
                parsed.password = param.value
            elif param.key == "To":
                parsed.to = split_recipients(param.value)
            elif param.key == "SmtpHost":
                parsed.smtp_host = param.value
            elif param.key == "SmtpPort":
                parsed.smtp_port = parse_port(param.value)
            elif param.key == "Message":
                parsed.message = param.value
            elif param.key == "Subject":
                parsed.subject = param.value
            elif param.key == "SmtpUsername":
                parsed.smtp_username = param.value
            elif param.key == "SmtpUseTls":
                parsed.smtp_use_tls = _parse_bool(param.value)
        return parsed

    def with_env_defaults(self) -> "MailParams":
        """
        Fill empty fields from SMTP_HOST, SMTP_PORT, SMTP_USERNAME,
        SMTP_PASSWORD and FROM_EMAIL. Action values take priority, and a
        given SmtpPort is kept even when it is invalid.
        """
        merged = replace(self, to=list(self.to))
        if not merged.smtp_host:
            merged.smtp_host = os.getenv("SMTP_HOST", "")
        if merged.smtp_port is None and os.getenv("SMTP_PORT"):
            merged.smtp_port = parse_port(os.getenv("SMTP_PORT", "").strip())
        if not merged.smtp_username:
            merged.smtp_username = os.getenv("SMTP_USERNAME", "")
        if not merged.password:
            merged.password = os.getenv("SMTP_PASSWORD", "")
        if not merged.from_email:
            merged.from_email = os.getenv("FROM_EMAIL", "")
        return merged

    @property
    def address(self) -> str:
        return f"{self.smtp_host}:{self.port}"

    @property
    def port(self) -> int:
        return self.smtp_port or 0

    @property
    def login(self) -> str:
        return self.smtp_username or self.from_email

    @property
    def implicit_tls(self) -> bool:
        return self.smtp_port == IMPLICIT_TLS_PORT

    def validate(self) -> None:
        if not self.from_email:
            raise ValidationError("From is required")
        if not self.to:
            raise ValidationError("To must contain at least one recipient")
        if not self.smtp_host:
            raise ValidationError("SmtpHost is required")
        if not 1 <= self.port <= 65535:
            raise ValidationError(
                f"SmtpPort must be between 1 and 65535, got {self.port}",
                context={"smtp_port": self.port},
            )
        if not self.message:
            raise ValidationError("Message is required")


__all__ = [
    "MailParams",
    "MAIL_PARAMS",
    "mail_param_specs",
    "split_recipients",
    "parse_port",
    "DEFAULT_SMTP_PORT",
]
