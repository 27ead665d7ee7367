"""Event bus for routing state changes to subscribers."""
import logging
import threading
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class EventBus:
    """Topic-based pub/sub bus for state snapshots.

    The poller publishes its snapshots here, the dashboard republishes the
    filtered view, and renderers subscribe to whichever topic they draw.
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callback]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topics: list[str], callback: Callback) -> Callable[[], None]:
        """Register callback for specific topics.

        Args:
            topics: List of topics to subscribe to. Use ["*"] for all topics.
            callback: Function to call with each published payload.

        Returns:
            A function that removes this subscription when called.
        """
        with self._lock:
            for topic in topics:
                self._subscribers[topic].append(callback)
                logger.debug(f"Subscribed {_name(callback)} to {topic}")

        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callback) -> None:
        """Remove callback from all subscriptions.

        Args:
            callback: The callback function to remove.
        """
        with self._lock:
            for topic in list(self._subscribers.keys()):
                if callback in self._subscribers[topic]:
                    self._subscribers[topic].remove(callback)
                    logger.debug(f"Unsubscribed {_name(callback)} from {topic}")

    def publish(self, topic: str, payload: Any) -> None:
        """Send payload to all subscribers of a topic.

        Args:
            topic: The topic being published.
            payload: The snapshot handed to each subscriber.
        """
        with self._lock:
            # Get specific topic subscribers + wildcard subscribers
            callbacks = list(
                self._subscribers.get(topic, []) +
                self._subscribers.get("*", [])
            )

        for callback in callbacks:
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Error in subscriber {_name(callback)}: {e}")


def _name(callback: Callback) -> str:
    return getattr(callback, "__name__", repr(callback))
