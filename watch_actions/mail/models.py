"""Addresses, credentials and the rendered email.

- Address / AddressList: parsed email addresses
- Authentication: username plus an opaque password
- Attachment: named, encoded content attached to an email
- Email: a fully rendered message, ready for an email service
"""

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parseaddr, quote
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, SecretStr

from watch_actions.domain.models import Priority, Profile

from .exceptions import AddressParseError

__all__ = [
    "Address",
    "AddressList",
    "Attachment",
    "Authentication",
    "Email",
    "Priority",
    "Profile",
]

# Characters that force a display name to be quoted (RFC 5322 specials)
_NAME_SPECIALS = set('()<>@,;:\\".[]')


@dataclass(frozen=True)
class Address:
    """A single mailbox, optionally with a display name.

    ``str(address)`` is either ``user@domain`` or ``Name <user@domain>`` and
    parses back to an equal Address.
    """

    email: str
    name: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "Address":
        """Parse one address.

        Validation checks syntax only: no DNS lookups and no requirement for a
        dot in the domain, so ``alerts@mailhost`` is accepted.

        Raises:
            AddressParseError: If ``text`` is not a valid address
        """
        stripped = text.strip()
        if not stripped:
            raise AddressParseError("Empty email address")

        name, addr = parseaddr(stripped)
        if not addr:
            raise AddressParseError(f"Invalid email address '{stripped}'")

        try:
            validated = validate_email(
                addr, check_deliverability=False, globally_deliverable=False
            )
        except EmailNotValidError as e:
            raise AddressParseError(f"Invalid email address '{stripped}': {e}") from e

        return cls(email=validated.normalized, name=name.strip() or None)

    def __str__(self) -> str:
        if not self.name:
            return self.email
        if any(ch in _NAME_SPECIALS for ch in self.name):
            return f'"{quote(self.name)}" <{self.email}>'
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class AddressList:
    """Ordered addresses, as found in a To/Cc/Bcc/Reply-To header."""

    addresses: Tuple[Address, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "AddressList":
        """Parse a comma-separated list of addresses.

        Splits strictly on ``,`` (no quoting or escaping), trims every entry
        and keeps input order. ``n`` entries give ``n`` addresses.

        Raises:
            AddressParseError: If any entry, including an empty one, is invalid
        """
        return cls(tuple(Address.parse(entry) for entry in text.split(",")))

    @classmethod
    def of(cls, *addresses: Address) -> "AddressList":
        return cls(tuple(addresses))

    def __iter__(self) -> Iterator[Address]:
        return iter(self.addresses)

    def __len__(self) -> int:
        return len(self.addresses)

    def __getitem__(self, index: int) -> Address:
        return self.addresses[index]

    def __add__(self, other: "AddressList") -> "AddressList":
        return AddressList(self.addresses + other.addresses)

    def __str__(self) -> str:
        return ", ".join(str(address) for address in self.addresses)


class Authentication(BaseModel):
    """Credentials an email service logs in with.

    The password is a ``SecretStr``: it prints masked and is only revealed
    through ``password.get_secret_value()``. A redacted copy keeps the user
    and drops the password, which is distinct from having no credentials.
    """

    user: str
    password: Optional[SecretStr] = None

    model_config = {"frozen": True}

    @classmethod
    def of(cls, user: str, password: Optional[str]) -> "Authentication":
        return cls(user=user, password=SecretStr(password) if password is not None else None)

    def redacted(self) -> "Authentication":
        return Authentication(user=self.user, password=None)


@dataclass(frozen=True)
class Attachment:
    """Content attached to an email under a fixed name."""

    filename: str
    content_type: str
    content: bytes

    @property
    def maintype(self) -> str:
        return self.content_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.content_type.split("/", 1)[1]


@dataclass(frozen=True)
class Email:
    """A rendered email.

    Fields that were not set on the action stay None; they are never
    rendered to empty strings.
    """

    id: Optional[str] = None
    from_: Optional[AddressList] = None
    to: Optional[AddressList] = None
    cc: Optional[AddressList] = None
    bcc: Optional[AddressList] = None
    reply_to: Optional[AddressList] = None
    priority: Optional[Priority] = None
    subject: Optional[str] = None
    text_body: Optional[str] = None
    html_body: Optional[str] = None
    sent_date: Optional[datetime] = None
    attachments: Mapping[str, Attachment] = field(default_factory=dict)

    @property
    def recipients(self) -> Tuple[Address, ...]:
        """Every envelope recipient (to, cc and bcc)."""
        result: Tuple[Address, ...] = ()
        for addresses in (self.to, self.cc, self.bcc):
            if addresses is not None:
                result += addresses.addresses
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Audit view of the email; attachment content is summarized."""
        document: Dict[str, Any] = {"id": self.id}
        for key, addresses in (
            ("from", self.from_),
            ("to", self.to),
            ("cc", self.cc),
            ("bcc", self.bcc),
            ("reply_to", self.reply_to),
        ):
            if addresses is not None:
                document[key] = [str(address) for address in addresses]
        if self.priority is not None:
            document["priority"] = self.priority.value
        if self.sent_date is not None:
            document["sent_date"] = self.sent_date
        if self.subject is not None:
            document["subject"] = self.subject
        body = {}
        if self.text_body is not None:
            body["text"] = self.text_body
        if self.html_body is not None:
            body["html"] = self.html_body
        if body:
            document["body"] = body
        if self.attachments:
            document["attachments"] = {
                name: {
                    "filename": attachment.filename,
                    "content_type": attachment.content_type,
                    "size": len(attachment.content),
                }
                for name, attachment in self.attachments.items()
            }
        return document
