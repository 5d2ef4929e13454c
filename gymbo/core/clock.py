from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every persisted datetime uses."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
