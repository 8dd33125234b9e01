"""Email action definition and execution results."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from watch_actions.domain.models import Profile

from .attachments import DataAttachment
from .models import Authentication, Email
from .template import EmailTemplate

ACTION_TYPE = "email"


class EmailAction(BaseModel):
    """Immutable definition of an email to send when a watch fires.

    Attributes:
        email: Templates for the email fields
        account: Named delivery account
        auth: Credentials overriding the account's own
        profile: MIME layout flavor
        data_attachment: Attach the payload in this format, or not at all
    """

    account: str
    email: EmailTemplate = Field(default_factory=EmailTemplate)
    auth: Optional[Authentication] = None
    profile: Profile = Profile.STANDARD
    data_attachment: Optional[DataAttachment] = None

    model_config = {"frozen": True}

    @field_validator("account")
    @classmethod
    def validate_account(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("account cannot be empty or whitespace-only")
        return stripped

    def redacted(self) -> "EmailAction":
        """Copy of this action without the credential's password."""
        if self.auth is None:
            return self
        return self.model_copy(update={"auth": self.auth.redacted()})


class EmailActionResult(ABC):
    """Outcome of one email action execution."""

    status: str = ""
    type: str = ACTION_TYPE

    def is_success(self) -> bool:
        return self.status == "success"

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass


@dataclass(frozen=True)
class Success(EmailActionResult):
    """The email was handed to the delivery account.

    Attributes:
        account: Account the email service actually used
        email: The rendered email that was sent
    """

    account: str
    email: Email

    status = "success"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status,
            "account": self.account,
            "email": self.email.to_dict(),
        }


@dataclass(frozen=True)
class Failure(EmailActionResult):
    """The email could not be rendered, encoded or delivered."""

    reason: str

    status = "failure"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "status": self.status, "reason": self.reason}
