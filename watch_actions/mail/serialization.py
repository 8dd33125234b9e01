"""Writing email actions as documents.

The document uses the same field names parsing accepts, so serializing and
parsing again gives an equal action. Templates are written as plain strings
whenever parsing that string gives the same template back, and as template
objects (``{"inline": ...}``, ``{"file": ...}``) otherwise.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

from watch_actions.templates.models import Template

from .action import EmailAction


@dataclass(frozen=True)
class SerializationParams:
    """Options for writing actions out.

    Attributes:
        hide_secrets: Leave the credential's password out of the document
    """

    hide_secrets: bool = False


DEFAULT_PARAMS = SerializationParams()


def _template_value(template: Template) -> Union[str, Dict[str, str]]:
    if template.is_scalar:
        return template.text
    return {template.type.value: template.text}


def _address_value(templates: Sequence[Template]) -> Union[str, Dict[str, str], List[Any]]:
    if len(templates) == 1:
        return _template_value(templates[0])
    return [_template_value(template) for template in templates]


def serialize_action(
    action: EmailAction, params: SerializationParams = DEFAULT_PARAMS
) -> Dict[str, Any]:
    """Write ``action`` as a document in a stable field order.

    With ``params.hide_secrets`` the password is omitted entirely while the
    user stays, so the output still shows that credentials are configured.
    """
    document: Dict[str, Any] = {"account": action.account}
    document["profile"] = action.profile.value
    if action.data_attachment is not None:
        document["attach_data"] = action.data_attachment.value
    if action.auth is not None:
        document["user"] = action.auth.user
        if action.auth.password is not None and not params.hide_secrets:
            document["password"] = action.auth.password.get_secret_value()

    email = action.email
    for key, templates in (("from", email.from_), ("reply_to", email.reply_to)):
        if templates:
            document[key] = _address_value(templates)
    if email.priority is not None:
        document["priority"] = _template_value(email.priority)
    for key, templates in (("to", email.to), ("cc", email.cc), ("bcc", email.bcc)):
        if templates:
            document[key] = _address_value(templates)
    if email.subject is not None:
        document["subject"] = _template_value(email.subject)

    body: Dict[str, Any] = {}
    if email.text_body is not None:
        body["text"] = _template_value(email.text_body)
    if email.html_body is not None:
        body["html"] = _template_value(email.html_body)
    if not email.sanitize_html_body:
        body["sanitize_html"] = False
    if body:
        document["body"] = body

    return document
