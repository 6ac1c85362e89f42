"""Tests for the Pushover notifier."""

from unittest.mock import Mock, patch

import pytest
import requests

from sitepub.exceptions import NotificationError
from sitepub.services.notification_service import (
    PUSHOVER_API_URL,
    SOUND_MAGIC,
    PushoverNotifier,
)


def _response(status=200, body=None):
    response = Mock()
    response.status_code = status
    response.text = str(body)
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


class TestPushoverNotifier:
    """Test PushoverNotifier.send."""

    @pytest.fixture
    def notifier(self):
        return PushoverNotifier("user-key", "app-token", timeout=5)

    @patch("sitepub.services.notification_service.requests.post")
    def test_send_success(self, mock_post, notifier):
        """Test the form payload sent to Pushover."""
        mock_post.return_value = _response(200, {"status": 1, "request": "abc"})

        notifier.send("Workflow succeeded!", SOUND_MAGIC)

        mock_post.assert_called_once_with(
            PUSHOVER_API_URL,
            data={
                "token": "app-token",
                "user": "user-key",
                "message": "Workflow succeeded!",
                "sound": "magic",
            },
            timeout=5,
        )

    @patch("sitepub.services.notification_service.requests.post")
    def test_api_errors_joined(self, mock_post, notifier):
        """Test that every reported error is included."""
        mock_post.return_value = _response(
            400, {"status": 0, "errors": ["user key is invalid", "token is invalid"]}
        )

        with pytest.raises(NotificationError) as exc_info:
            notifier.send("x", "bike")

        assert str(exc_info.value) == "user key is invalid\r\ntoken is invalid"

    @patch("sitepub.services.notification_service.requests.post")
    def test_http_error_without_body(self, mock_post, notifier):
        """Test a non-2xx response without a JSON body."""
        mock_post.return_value = _response(503)

        with pytest.raises(NotificationError, match="503"):
            notifier.send("x", "bike")

    @patch("sitepub.services.notification_service.requests.post")
    def test_transport_failure(self, mock_post, notifier):
        """Test that request exceptions are wrapped."""
        mock_post.side_effect = requests.ConnectionError("offline")

        with pytest.raises(NotificationError, match="offline"):
            notifier.send("x", "bike")
