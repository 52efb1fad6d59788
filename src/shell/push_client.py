"""Push Gateway Client - Imperative Shell.

This module delivers notification commands to the mobile push gateway
over an HTTP webhook. All I/O is contained here; message formatting is in
the core module.
"""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any

import requests

from src.core.formatter import DISPLAY_TZ, format_cancel_message, format_notification
from src.core.notifications import NotificationCommand


logger = logging.getLogger(__name__)


# Default timeout for webhook requests (seconds)
DEFAULT_TIMEOUT = 10


@dataclass
class PushResponse:
    """Response from the push gateway.

    Attributes:
        success: Whether the gateway accepted the request
        status_code: HTTP status code (0 if no response)
        error: Error message if failed
    """
    success: bool
    status_code: int
    error: str | None = None


class PushClient:
    """Client for delivering notifications through the push gateway.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        webhook_url: str = "",
        timeout: int = DEFAULT_TIMEOUT,
        display_timezone: tzinfo = DISPLAY_TZ,
    ) -> None:
        """Initialize push client.

        Args:
            webhook_url: Push gateway endpoint
            timeout: Request timeout in seconds
            display_timezone: Zone event times are shown in
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.display_timezone = display_timezone

    def send_payload(
        self,
        payload: dict[str, Any],
        user_id: str | None = None,
    ) -> PushResponse:
        """POST a payload to the push gateway.

        This method performs HTTP I/O.

        Args:
            payload: Message payload (from formatter)
            user_id: Recipient, added to the request body when given

        Returns:
            PushResponse indicating success or failure
        """
        if not self.webhook_url:
            logger.warning("Push webhook URL not configured, dropping notification")
            return PushResponse(
                success=False,
                status_code=0,
                error="Push webhook URL not configured",
            )

        body = dict(payload)
        if user_id is not None:
            body["user_id"] = user_id

        try:
            response = requests.post(
                self.webhook_url,
                json=body,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )

            if 200 <= response.status_code < 300:
                logger.info("Push gateway accepted request")
                return PushResponse(
                    success=True,
                    status_code=response.status_code,
                )
            else:
                error_text = response.text
                logger.warning(
                    "Push gateway returned non-2xx: %d - %s",
                    response.status_code,
                    error_text,
                )
                return PushResponse(
                    success=False,
                    status_code=response.status_code,
                    error=error_text,
                )

        except requests.Timeout:
            logger.error("Push gateway request timed out")
            return PushResponse(
                success=False,
                status_code=0,
                error="Request timed out",
            )
        except requests.RequestException as e:
            logger.error("Push gateway request failed: %s", str(e))
            return PushResponse(
                success=False,
                status_code=0,
                error=str(e),
            )

    def deliver(
        self,
        command: NotificationCommand,
        user_id: str | None = None,
    ) -> PushResponse:
        """Deliver a nearby or proximity notification.

        Args:
            command: Command emitted by the state machine
            user_id: Recipient

        Returns:
            PushResponse indicating success or failure
        """
        logger.info(
            "Delivering %s notification for event %s",
            command.kind,
            command.event_id,
        )
        payload = format_notification(command, self.display_timezone)
        return self.send_payload(payload, user_id=user_id)

    def cancel(self, event_id: str, user_id: str | None = None) -> PushResponse:
        """Withdraw any shown notifications for an event.

        Args:
            event_id: Event whose notifications should be removed
            user_id: Recipient

        Returns:
            PushResponse indicating success or failure
        """
        logger.info("Cancelling notifications for event %s", event_id)
        return self.send_payload(format_cancel_message(event_id), user_id=user_id)
