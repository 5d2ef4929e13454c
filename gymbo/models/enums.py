from enum import Enum


class SessionState(str, Enum):
    """Lifecycle state of a workout session, persisted as its string value."""
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
