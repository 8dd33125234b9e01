"""Schema of the email action document.

Validation is strict: unknown fields fail at every level, enumerated values
match case-sensitively, and booleans must be real booleans.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator, model_validator

from watch_actions.domain.models import Priority, Profile
from watch_actions.templates.models import Template, TemplateType

from .attachments import DataAttachment
from .models import AddressList
from .template import EmailTemplate


class TemplateDocument(BaseModel):
    """Object form of a template: exactly one of ``inline``, ``file``, ``literal``."""

    model_config = ConfigDict(extra="forbid")

    inline: Optional[StrictStr] = None
    file: Optional[StrictStr] = None
    literal: Optional[StrictStr] = None

    @model_validator(mode="after")
    def exactly_one_source(self):
        given = [name for name in ("inline", "file", "literal") if getattr(self, name) is not None]
        if len(given) != 1:
            raise ValueError("template object needs exactly one of: inline, file, literal")
        return self

    def to_template(self) -> Template:
        if self.inline is not None:
            return Template.inline(self.inline)
        if self.file is not None:
            return Template.file(self.file)
        return Template.literal(self.literal)


TemplateValue = Union[StrictStr, TemplateDocument]

AddressValue = Union[TemplateValue, List[TemplateValue]]


def to_template(value: TemplateValue) -> Template:
    if isinstance(value, TemplateDocument):
        return value.to_template()
    return Template.parse(value)


class BodyDocument(BaseModel):
    """``body`` given as an object."""

    model_config = ConfigDict(extra="forbid")

    text: Optional[TemplateValue] = None
    html: Optional[TemplateValue] = None
    sanitize_html: StrictBool = True


class EmailActionDocument(BaseModel):
    """Top-level email action document."""

    model_config = ConfigDict(extra="forbid")

    account: Optional[StrictStr] = None
    profile: Optional[Profile] = None
    user: Optional[StrictStr] = None
    password: Optional[StrictStr] = None
    from_: Optional[AddressValue] = Field(None, alias="from")
    priority: Optional[TemplateValue] = None
    attach_data: Optional[Union[StrictBool, DataAttachment]] = None
    to: Optional[AddressValue] = None
    cc: Optional[AddressValue] = None
    bcc: Optional[AddressValue] = None
    reply_to: Optional[AddressValue] = None
    subject: Optional[TemplateValue] = None
    body: Optional[Union[StrictStr, BodyDocument]] = None

    @field_validator("account")
    @classmethod
    def non_empty_account(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("account cannot be empty or whitespace-only")
        return v

    @field_validator("from_", "to", "cc", "bcc", "reply_to")
    @classmethod
    def check_literal_addresses(cls, v: Any) -> Any:
        """Literal addresses are checked now; templated ones after rendering."""
        for template in cls._address_templates(v):
            if template.type == TemplateType.LITERAL:
                AddressList.parse(template.text)
        return v

    @field_validator("priority")
    @classmethod
    def check_literal_priority(cls, v: Any) -> Any:
        if v is None:
            return v
        template = to_template(v)
        if template.type == TemplateType.LITERAL and template.text not in {
            p.value for p in Priority
        }:
            raise ValueError(
                f"unknown priority '{template.text}', expected one of: "
                f"{', '.join(p.value for p in Priority)}"
            )
        return v

    @staticmethod
    def _address_templates(value: Any) -> List[Template]:
        if value is None:
            return []
        if isinstance(value, list):
            return [to_template(item) for item in value]
        return [to_template(value)]

    def to_email_template(self) -> EmailTemplate:
        text_body = html_body = None
        sanitize_html = True
        if isinstance(self.body, BodyDocument):
            text_body = to_template(self.body.text) if self.body.text is not None else None
            html_body = to_template(self.body.html) if self.body.html is not None else None
            sanitize_html = self.body.sanitize_html
        elif self.body is not None:
            text_body = to_template(self.body)

        return EmailTemplate(
            from_=self._address_templates(self.from_) or None,
            to=self._address_templates(self.to) or None,
            cc=self._address_templates(self.cc) or None,
            bcc=self._address_templates(self.bcc) or None,
            reply_to=self._address_templates(self.reply_to) or None,
            priority=to_template(self.priority) if self.priority is not None else None,
            subject=to_template(self.subject) if self.subject is not None else None,
            text_body=text_body,
            html_body=html_body,
            sanitize_html_body=sanitize_html,
        )
