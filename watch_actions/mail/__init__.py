"""Email actions: definition, parsing, execution and delivery.

- EmailActionFactory: parse documents into executable actions
- ExecutableEmailAction: render and send an action for one execution
- serialize / to_json / to_yaml: write actions back as documents
- EmailService / AccountsEmailService: delivery backends
"""

from .action import ACTION_TYPE, EmailAction, EmailActionResult, Failure, Success
from .attachments import DATA_ATTACHMENT_KEY, DataAttachment
from .codec import EmailActionFactory, serialize, to_json, to_yaml
from .exceptions import (
    ActionParseError,
    AddressParseError,
    AttachmentEncodingError,
    DeliveryError,
    EmailActionError,
    ParseError,
)
from .executable import ExecutableEmailAction
from .models import Address, AddressList, Attachment, Authentication, Email, Priority, Profile
from .sanitizer import HtmlSanitizer
from .serialization import SerializationParams
from .service import AccountsEmailService, EmailSent, EmailService
from .smtp_client import SMTPClient
from .template import EmailTemplate

__all__ = [
    # Actions
    "ACTION_TYPE",
    "EmailAction",
    "EmailTemplate",
    "ExecutableEmailAction",
    "EmailActionFactory",
    "EmailActionResult",
    "Success",
    "Failure",
    # Serialization
    "SerializationParams",
    "serialize",
    "to_json",
    "to_yaml",
    # Values
    "Address",
    "AddressList",
    "Attachment",
    "Authentication",
    "Email",
    "Priority",
    "Profile",
    "DataAttachment",
    "DATA_ATTACHMENT_KEY",
    # Delivery
    "EmailService",
    "EmailSent",
    "AccountsEmailService",
    "SMTPClient",
    "HtmlSanitizer",
    # Exceptions
    "ParseError",
    "AddressParseError",
    "EmailActionError",
    "ActionParseError",
    "DeliveryError",
    "AttachmentEncodingError",
]
