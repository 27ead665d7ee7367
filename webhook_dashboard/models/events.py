"""Event model for the webhook dashboard."""
from dataclasses import dataclass, asdict
from typing import Any

NUMERIC_FIELDS = ("open", "high", "low", "close", "price", "volume")
TEXT_FIELDS = ("ticker", "message", "u_interval")
TIMESTAMP_FIELDS = ("timenow", "time")


@dataclass(frozen=True)
class Event:
    """A normalized trading-event record, one row of the grid."""
    id: str                # Row identity, "temp-<index>" when the server omits it
    ticker: str
    message: str
    timenow: Any           # ISO-8601 string, or whatever truthy value the server sent
    open: Any              # Numeric fields pass through anything that is not None
    high: Any
    low: Any
    close: Any
    price: Any
    volume: Any
    u_interval: str
    time: Any

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)
