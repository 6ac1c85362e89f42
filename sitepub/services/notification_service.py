"""
Push notification service for workflow status
"""
import logging
from abc import ABC, abstractmethod

import requests

from ..exceptions import NotificationError

logger = logging.getLogger(__name__)

PUSHOVER_API_URL = "https://api.pushover.net/1/messages.json"

# Pushover sound names
SOUND_BIKE = "bike"
SOUND_FALLING = "falling"
SOUND_MAGIC = "magic"


class Notifier(ABC):
    """Abstract "send a message" capability."""

    @abstractmethod
    def send(self, message: str, sound: str) -> None:
        """
        Deliver *message*.

        Args:
            message: Text to send
            sound: Alert sound name

        Raises:
            NotificationError: If delivery fails
        """


class PushoverNotifier(Notifier):
    """
    Sends messages through the Pushover API.
    """

    def __init__(self, user_key: str, app_token: str, timeout: float = 10.0):
        """
        Initialize the notifier.

        Args:
            user_key: Pushover user key
            app_token: Pushover application token
            timeout: HTTP timeout in seconds
        """
        self.user_key = user_key
        self.app_token = app_token
        self.timeout = timeout

    def send(self, message: str, sound: str) -> None:
        logger.info("Sending Pushover message: %s", message)
        logger.info("Pushover sound: %s", sound)

        payload = {
            "token": self.app_token,
            "user": self.user_key,
            "message": message,
            "sound": sound,
        }

        try:
            response = requests.post(PUSHOVER_API_URL, data=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"Pushover request failed: {e}") from e

        logger.debug("Pushover response status: %d", response.status_code)
        logger.debug("Response body: %s", response.text)

        try:
            body = response.json()
        except ValueError:
            body = {}

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            raise NotificationError("\r\n".join(str(e) for e in errors))

        if not (200 <= response.status_code < 300):
            raise NotificationError(
                f"Pushover returned HTTP {response.status_code}: {response.text}"
            )
