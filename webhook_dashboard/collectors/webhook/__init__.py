"""Collector for the webhook backend's events endpoint."""

from webhook_dashboard.collectors.webhook.client import EventsClient
from webhook_dashboard.collectors.webhook.errors import FetchError, FormatError, NetworkError
from webhook_dashboard.collectors.webhook.normalizer import normalize_events
from webhook_dashboard.collectors.webhook.poller import Poller

__all__ = [
    "EventsClient",
    "FetchError",
    "FormatError",
    "NetworkError",
    "normalize_events",
    "Poller",
]
