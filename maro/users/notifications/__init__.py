"""
Outbound email and text messages.

Each sender is a stateless ``send(message)`` capability: everything about a
message travels in the immutable :class:`.domain.EmailMessage` or
:class:`.domain.SmsMessage` handed to it, so one sender can be shared across
requests.
"""

from typing import Optional

from flask import Flask

from ..context import get_application_config, get_application_global, as_bool
from .base import EmailSender, SmsSender, LogSender
from .mail import SmtpEmailSender
from .sms import GatewaySmsSender


def get_email_sender(app: Optional[Flask] = None) -> EmailSender:
    """Build an email sender from the application config."""
    config = get_application_config(app)
    if config.get('EMAIL_BACKEND', 'log') == 'log':
        return LogSender('email')
    return SmtpEmailSender(
        host=config.get('SMTP_HOST', 'localhost'),
        port=int(config.get('SMTP_PORT', 25)),
        sender=config.get('SMTP_SENDER', 'no-reply@localhost'),
        username=config.get('SMTP_USERNAME'),
        password=config.get('SMTP_PASSWORD'),
        use_tls=as_bool(config.get('SMTP_USE_TLS', False))
    )


def get_sms_sender(app: Optional[Flask] = None) -> SmsSender:
    """Build a text message sender from the application config."""
    config = get_application_config(app)
    if config.get('SMS_BACKEND', 'log') == 'log':
        return LogSender('sms')
    return GatewaySmsSender(
        url=config['SMS_GATEWAY_URL'],
        token=config.get('SMS_GATEWAY_TOKEN'),
        sender_id=config.get('SMS_SENDER_ID', 'MARO'),
        timeout=int(config.get('SMS_TIMEOUT', 10))
    )


def current_email_sender() -> EmailSender:
    """Get/create the email sender for this context."""
    g = get_application_global()
    if g is None:
        return get_email_sender()
    if 'email_sender' not in g:
        g.email_sender = get_email_sender()
    return g.email_sender      # type: ignore


def current_sms_sender() -> SmsSender:
    """Get/create the text message sender for this context."""
    g = get_application_global()
    if g is None:
        return get_sms_sender()
    if 'sms_sender' not in g:
        g.sms_sender = get_sms_sender()
    return g.sms_sender      # type: ignore
