"""Executing an email action for one watch execution."""

from dataclasses import replace
from typing import Any, Dict, Optional

from watch_actions.execution import Payload, WatchExecutionContext, build_template_model
from watch_actions.logging import get_logger
from watch_actions.logging.context import log_context
from watch_actions.templates.engine import TemplateEngine
from watch_actions.templates.models import RenderError

from .action import ACTION_TYPE, EmailAction, EmailActionResult, Failure, Success
from .attachments import DATA_ATTACHMENT_KEY
from .exceptions import AddressParseError, AttachmentEncodingError, DeliveryError
from .sanitizer import HtmlSanitizer
from .serialization import DEFAULT_PARAMS, SerializationParams, serialize_action
from .service import EmailService

logger = get_logger(__name__, component="email_action")


class ExecutableEmailAction:
    """An EmailAction bound to the collaborators that execute it.

    The action is immutable and may be executed concurrently; each call to
    :meth:`execute` works on its own rendered Email.
    """

    type = ACTION_TYPE

    def __init__(
        self,
        action: EmailAction,
        email_service: EmailService,
        template_engine: TemplateEngine,
        sanitizer: Optional[HtmlSanitizer] = None,
        action_id: Optional[str] = None,
    ):
        self.action = action
        self.email_service = email_service
        self.template_engine = template_engine
        self.sanitizer = sanitizer
        self.action_id = action_id

    def execute(
        self,
        execution_id: str,
        ctx: WatchExecutionContext,
        payload: Optional[Payload] = None,
    ) -> EmailActionResult:
        """Render the email, attach the payload if asked to, and send it.

        Nothing raised by rendering, encoding or delivery escapes this
        method: every problem comes back as a :class:`Failure`.

        Args:
            execution_id: Id of the triggering execution; becomes the email id
            ctx: Execution context the templates render against
            payload: Payload to expose and attach (defaults to ``ctx.payload``)
        """
        payload = payload if payload is not None else ctx.payload

        with log_context(
            watch_id=ctx.watch_id, action_id=self.action_id, execution_id=execution_id
        ):
            logger.info(
                "Executing email action",
                extra={"event": "email_action.execute.started", "account": self.action.account},
            )
            try:
                result = self._execute(execution_id, ctx, payload)
            except Exception as e:
                logger.error(
                    f"Unexpected error executing email action: {e}",
                    exc_info=True,
                    extra={"event": "email_action.execute.failure"},
                )
                return Failure(reason=f"unexpected error: {e}")

            if result.is_success():
                logger.info(
                    f"Email sent via account '{result.account}' "
                    f"to {len(result.email.recipients)} recipient(s)",
                    extra={"event": "email_action.execute.success", "account": result.account},
                )
            else:
                logger.error(
                    f"Email action failed: {result.reason}",
                    extra={"event": "email_action.execute.failure"},
                )
            return result

    def _execute(
        self, execution_id: str, ctx: WatchExecutionContext, payload: Payload
    ) -> EmailActionResult:
        model = build_template_model(ctx, payload)

        try:
            email = self.action.email.render(self.template_engine, model, self.sanitizer)
        except RenderError as e:
            return Failure(reason=f"failed to render email: {e}")
        except AddressParseError as e:
            return Failure(reason=f"rendered address is invalid: {e}")

        attachments = {}
        if self.action.data_attachment is not None:
            try:
                attachments[DATA_ATTACHMENT_KEY] = self.action.data_attachment.create(payload.data)
            except AttachmentEncodingError as e:
                return Failure(reason=str(e))

        email = replace(email, id=execution_id, attachments=attachments)

        try:
            sent = self.email_service.send_as(
                email, self.action.account, self.action.auth, self.action.profile
            )
        except DeliveryError as e:
            return Failure(reason=f"failed to send email: {e}")

        return Success(account=sent.account, email=sent.email)

    def to_dict(self, params: SerializationParams = DEFAULT_PARAMS) -> Dict[str, Any]:
        return serialize_action(self.action, params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExecutableEmailAction):
            return NotImplemented
        return self.action == other.action

    def __repr__(self) -> str:
        return f"ExecutableEmailAction(action_id={self.action_id!r}, account={self.action.account!r})"
