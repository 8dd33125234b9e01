"""Closed value sets used by email actions and account settings.

Both enums match their document values case-sensitively: ``"high"`` is a
priority, ``"HIGH"`` is not.
"""

from enum import Enum


class Priority(str, Enum):
    """Urgency of an outgoing email."""

    HIGHEST = "highest"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"
    LOWEST = "lowest"

    @property
    def x_priority(self) -> str:
        """Value for the ``X-Priority`` header (1 = highest, 5 = lowest)."""
        return str(list(Priority).index(self) + 1)

    @property
    def importance(self) -> str:
        """Value for the ``Importance`` header understood by Outlook."""
        if self in (Priority.HIGHEST, Priority.HIGH):
            return "high"
        if self in (Priority.LOW, Priority.LOWEST):
            return "low"
        return "normal"

    def __str__(self) -> str:
        return self.value


class Profile(str, Enum):
    """MIME layout flavor used when turning an email into a wire message."""

    STANDARD = "standard"
    OUTLOOK = "outlook"
    GMAIL = "gmail"

    def __str__(self) -> str:
        return self.value
