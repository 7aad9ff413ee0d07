"""Send email over SMTP."""

import logging
import smtplib
from email.message import EmailMessage as MIMEMessage
from typing import Optional

from ..domain import EmailMessage
from ..exceptions import NotificationFailed
from .base import EmailSender

logger = logging.getLogger(__name__)


class SmtpEmailSender(EmailSender):
    """
    Delivers email through an SMTP service.

    A connection is opened for each message, so instances hold only
    configuration and are safe to share.
    """

    def __init__(self, host: str = "", port: int = 0,
                 sender: str = "no-reply@localhost",
                 username: Optional[str] = None,
                 password: Optional[str] = None,
                 use_tls: bool = False) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(
            host=self._host,
            port=self._port
        )

    def _build(self, message: EmailMessage) -> MIMEMessage:
        mime = MIMEMessage()
        mime['Subject'] = message.subject
        mime['From'] = self._sender
        mime['To'] = message.to
        mime.set_content(message.body, subtype='html')
        return mime

    def send(self, message: EmailMessage) -> None:
        """Send ``message``, raising :class:`.NotificationFailed` on error."""
        mime = self._build(message)
        try:
            with self._new_connection() as conn:
                if self._use_tls:
                    conn.starttls()
                if self._username:
                    conn.login(self._username, self._password or '')
                conn.send_message(mime)
        except (smtplib.SMTPException, OSError) as e:
            logger.error('Could not send email to %s: %s', message.to, e)
            raise NotificationFailed(f'Could not send email: {e}') from e
        logger.debug('Sent email to %s', message.to)
