"""Parsing email action documents and serializing actions back.

``EmailActionFactory.parse_executable`` turns a document into an
``ExecutableEmailAction``; ``serialize`` turns an action back into a
document that parses to an equal action. With ``hide_secrets`` the
password is left out, while the user is kept.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from watch_actions.domain.models import Profile
from watch_actions.logging import get_logger
from watch_actions.templates.engine import TemplateEngine
from watch_actions.utils.documents import DocumentError, dump_json, dump_yaml, load_document

from .action import EmailAction
from .attachments import DataAttachment
from .document import EmailActionDocument
from .exceptions import ActionParseError
from .executable import ExecutableEmailAction
from .models import Authentication
from .sanitizer import HtmlSanitizer
from .serialization import DEFAULT_PARAMS, SerializationParams, serialize_action
from .service import EmailService

logger = get_logger(__name__, component="email_action")

Document = Union[Mapping[str, Any], str, bytes]


class EmailActionFactory:
    """Builds executable email actions from documents.

    The email service, template engine and sanitizer are supplied here, not
    by the document, and are shared by every action the factory creates.
    """

    def __init__(
        self,
        email_service: EmailService,
        template_engine: TemplateEngine,
        sanitizer: Optional[HtmlSanitizer] = None,
        default_account: Optional[str] = None,
    ):
        """Initialize the factory.

        Args:
            email_service: Delivery backend for created actions
            template_engine: Renderer for created actions
            sanitizer: HTML sanitizer (a default allow-list if None)
            default_account: Account used when a document names none
        """
        self.email_service = email_service
        self.template_engine = template_engine
        self.sanitizer = sanitizer or HtmlSanitizer()
        self.default_account = default_account

    def parse_action(
        self,
        watch_id: str,
        action_id: str,
        document: Document,
        redacted: bool = False,
    ) -> EmailAction:
        """Parse and validate an email action document.

        Args:
            watch_id: Watch owning the action (for error reporting)
            action_id: Action id inside the watch (for error reporting)
            document: Mapping, or JSON/YAML text
            redacted: The document was written with hide_secrets, so a user
                without a password is a credential whose secret was removed

        Raises:
            ActionParseError: If the document is invalid
        """
        if isinstance(document, (str, bytes)):
            try:
                document = load_document(document)
            except DocumentError as e:
                raise ActionParseError(watch_id, action_id, [str(e)]) from e

        if not isinstance(document, Mapping):
            raise ActionParseError(
                watch_id,
                action_id,
                [f"expected an object, got {type(document).__name__}"],
            )

        errors: List[str] = []
        fields: List[Optional[str]] = []
        parsed: Optional[EmailActionDocument] = None
        try:
            parsed = EmailActionDocument.model_validate(dict(document))
        except ValidationError as e:
            for error in e.errors():
                field_path = ".".join(str(loc) for loc in error["loc"]) or "(document)"
                fields.append(str(error["loc"][0]) if error["loc"] else None)
                if error["type"] == "extra_forbidden":
                    errors.append(f"{field_path}: unexpected field")
                else:
                    errors.append(f"{field_path}: {error['msg']}")

        # These checks run on the raw document so they are reported together
        # with any schema errors above.
        if document.get("user") is not None and document.get("password") is None and not redacted:
            fields.append("password")
            errors.append("password: required when user is set")
        if document.get("password") is not None and document.get("user") is None:
            fields.append("user")
            errors.append("user: required when password is set")
        if document.get("account") is None and self.default_account is None:
            fields.append("account")
            errors.append("account: missing and no default account is configured")

        if errors:
            failure = ActionParseError(
                watch_id, action_id, errors, field=next((f for f in fields if f), None)
            )
            logger.error(
                str(failure),
                extra={
                    "event": "email_action.parse.failure",
                    "watch_id": watch_id,
                    "action_id": action_id,
                    "field": failure.field,
                },
            )
            raise failure

        auth = None
        if parsed.user is not None:
            auth = Authentication.of(parsed.user, parsed.password)

        return EmailAction(
            email=parsed.to_email_template(),
            account=parsed.account if parsed.account is not None else self.default_account,
            auth=auth,
            profile=parsed.profile or Profile.STANDARD,
            data_attachment=DataAttachment.resolve(parsed.attach_data),
        )

    def parse_executable(
        self,
        watch_id: str,
        action_id: str,
        document: Document,
        redacted: bool = False,
    ) -> ExecutableEmailAction:
        """Parse a document into an action ready to execute.

        Raises:
            ActionParseError: If the document is invalid
        """
        action = self.parse_action(watch_id, action_id, document, redacted=redacted)
        return self.create_executable(action, action_id=action_id)

    def create_executable(
        self, action: EmailAction, action_id: Optional[str] = None
    ) -> ExecutableEmailAction:
        return ExecutableEmailAction(
            action,
            email_service=self.email_service,
            template_engine=self.template_engine,
            sanitizer=self.sanitizer,
            action_id=action_id,
        )


def serialize(
    action: Union[EmailAction, ExecutableEmailAction],
    params: SerializationParams = DEFAULT_PARAMS,
) -> Dict[str, Any]:
    """Write an action (or an executable action's definition) as a document.

    Args:
        action: Action or executable action to write
        params: ``hide_secrets=True`` omits the password

    Returns:
        Document (plain dict) in a stable field order
    """
    if isinstance(action, ExecutableEmailAction):
        action = action.action
    return serialize_action(action, params)


def to_json(
    action: Union[EmailAction, ExecutableEmailAction],
    params: SerializationParams = DEFAULT_PARAMS,
) -> str:
    return dump_json(serialize(action, params))


def to_yaml(
    action: Union[EmailAction, ExecutableEmailAction],
    params: SerializationParams = DEFAULT_PARAMS,
) -> str:
    return dump_yaml(serialize(action, params))
