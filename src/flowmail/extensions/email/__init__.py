"""
Email feature

Sends email through an SMTP server on behalf of the workflow runner, in both
the RPC (MailPlugin) and the in-process (EmailPlugin) host variants.
"""

from flowmail.extensions.email.email_plugin import EmailPlugin
from flowmail.extensions.email.mail_plugin import MailPlugin
from flowmail.extensions.email.params import MAIL_PARAMS, MailParams

__all__ = ["EmailPlugin", "MailPlugin", "MailParams", "MAIL_PARAMS"]
