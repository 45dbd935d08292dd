"""Fire-and-forget usage events."""

import logging
import uuid

import requests

logger = logging.getLogger(__name__)


class NullAnalytics:
    """Analytics sink that drops every event."""

    def send_event(self, category: str, action: str, label: str) -> None:
        pass


class Analytics:
    """Posts usage events to an HTTP collector. Failures are ignored."""

    def __init__(self, endpoint: str, client_id: str | None = None, timeout: float = 5.0):
        self.endpoint = endpoint
        self.client_id = client_id or str(uuid.uuid4())
        self.timeout = timeout
        self.session = requests.Session()

    def send_event(self, category: str, action: str, label: str) -> None:
        payload = {
            "client_id": self.client_id,
            "category": category,
            "action": action,
            "label": label,
        }
        try:
            self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug("Dropped analytics event %s/%s: %s", category, action, e)
