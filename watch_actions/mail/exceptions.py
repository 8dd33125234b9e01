"""Exceptions raised while parsing, rendering and delivering email actions."""

from typing import List, Optional


class ParseError(ValueError):
    """Base class for syntax errors in action documents."""

    pass


class AddressParseError(ParseError):
    """Raised when a string is not a valid email address or address list."""

    pass


class EmailActionError(Exception):
    """Base exception for email action errors."""

    pass


class ActionParseError(EmailActionError):
    """Raised when an email action document is invalid.

    Attributes:
        watch_id: Watch that owns the action
        action_id: Id of the action inside the watch
        field: First document field responsible for the failure
        errors: Every problem found in the document
    """

    def __init__(
        self,
        watch_id: str,
        action_id: str,
        errors: List[str],
        field: Optional[str] = None,
    ):
        self.watch_id = watch_id
        self.action_id = action_id
        self.errors = errors
        self.field = field
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [
            f"Failed to parse email action [{self.action_id}] of watch [{self.watch_id}]"
        ]
        for i, error in enumerate(self.errors, 1):
            parts.append(f"  {i}. {error}")
        return "\n".join(parts)


class DeliveryError(EmailActionError):
    """Raised by an email service when a message cannot be delivered."""

    pass


class AttachmentEncodingError(EmailActionError):
    """Raised when the payload cannot be encoded for attachment."""

    pass
