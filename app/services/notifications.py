# app/services/notifications.py

"""
Push notification collaborator.

The form service announces newly published forms through a Notifier.
WebhookNotifier posts to the notification relay, which fans the message
out to device tokens; NullNotifier is used when notifications are off.
"""

from typing import Any, Dict, List, Optional, Protocol
import logging

import httpx

from app.core.config import settings
from app.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(
        self,
        recipients: List[str],
        title: str,
        body: str,
        form_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        ...


class NullNotifier:
    """Accepts every message and delivers nothing."""

    def send(self, recipients, title, body, form_id=None) -> Dict[str, Any]:
        logger.info(f"Notifications disabled, skipped {len(recipients)} recipient(s)")
        return {"success": True, "sent": 0, "message": "Notifications disabled"}


class WebhookNotifier:
    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def send(self, recipients, title, body, form_id=None) -> Dict[str, Any]:
        if not recipients:
            logger.info("No users to notify")
            return {"success": True, "sent": 0, "message": "No users have enabled notifications"}

        payload = {
            "tokens": recipients,
            "title": title,
            "body": body,
            "formId": form_id,
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"Notification relay returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise NotificationError(f"Failed to send notifications: {e}") from e

        try:
            result = response.json()
        except ValueError:
            result = {"success": True, "sent": len(recipients)}

        logger.info(f"Notification sent to {len(recipients)} token(s) for form {form_id}")
        return result


def get_notifier() -> Notifier:
    if not settings.NOTIFY_ENABLED or not settings.NOTIFY_URL:
        return NullNotifier()
    return WebhookNotifier(settings.NOTIFY_URL, timeout=settings.NOTIFY_TIMEOUT_SECONDS)


def publish_message(form_title: str) -> str:
    return (
        f'A new survey "{form_title}" has been published. '
        "Please submit your response!"
    )
