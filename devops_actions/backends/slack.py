"""Slack Web API backend implementation using requests."""

import requests
import structlog

from devops_actions.backend import Chat
from devops_actions.errors import ActionError

logger = structlog.get_logger()

SLACK_API_URL = "https://slack.com/api"


class SlackChat(Chat):
    """Sends direct messages through a Slack bot."""

    def __init__(self, token: str, timeout: float = 30.0, session: requests.Session | None = None) -> None:
        if not token:
            raise ValueError("Slack token required")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def send_message(self, chat_id: str, text: str) -> None:
        """Post a message; a user id as the channel opens a direct message."""
        logger.debug("Posting Slack message", chat_id=chat_id)
        response = self.session.post(
            f"{SLACK_API_URL}/chat.postMessage",
            json={"channel": chat_id, "text": text},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not data.get("ok"):
            raise ActionError(f"Slack refused the message to {chat_id}: {data.get('error', 'unknown error')}")
