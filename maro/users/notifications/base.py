"""Sender interfaces."""

import logging
from typing import Union

from ..domain import EmailMessage, SmsMessage

logger = logging.getLogger(__name__)


class EmailSender(object):
    """Sends :class:`.EmailMessage`s."""

    def send(self, message: EmailMessage) -> None:
        """Hand ``message`` to the transport."""
        raise NotImplementedError('Implemented by subclasses')


class SmsSender(object):
    """Sends :class:`.SmsMessage`s."""

    def send(self, message: SmsMessage) -> None:
        """Hand ``message`` to the transport."""
        raise NotImplementedError('Implemented by subclasses')


class LogSender(EmailSender, SmsSender):
    """Writes messages to the log instead of delivering them."""

    def __init__(self, channel: str) -> None:
        self.channel = channel

    def send(self, message: Union[EmailMessage, SmsMessage]) -> None:
        """Log ``message``."""
        logger.info('Not delivering %s to %s: %s', self.channel, message.to,
                    message.body)
