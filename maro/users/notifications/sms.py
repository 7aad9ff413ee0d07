"""Send text messages through an HTTP gateway."""

import logging
from typing import Optional

import requests

from ..domain import SmsMessage
from ..exceptions import NotificationFailed
from .base import SmsSender

logger = logging.getLogger(__name__)


class GatewaySmsSender(SmsSender):
    """Posts each message as JSON to an SMS gateway."""

    def __init__(self, url: str, token: Optional[str] = None,
                 sender_id: str = 'MARO', timeout: int = 10) -> None:
        self._url = url
        self._token = token
        self._sender_id = sender_id
        self._timeout = timeout

    def send(self, message: SmsMessage) -> None:
        """Send ``message``, raising :class:`.NotificationFailed` on error."""
        headers = {}
        if self._token:
            headers['Authorization'] = f'Bearer {self._token}'
        payload = {
            'to': message.to,
            'from': self._sender_id,
            'message': message.body
        }
        try:
            response = requests.post(self._url, json=payload,
                                     headers=headers, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error('Could not send text message to %s: %s',
                         message.to, e)
            raise NotificationFailed(f'Could not send SMS: {e}') from e
        logger.debug('Sent text message to %s', message.to)
