"""The templated fields of an email and how they render."""

from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, field_validator

from watch_actions.domain.models import Priority
from watch_actions.templates.engine import TemplateEngine
from watch_actions.templates.models import RenderError, Template, TemplateType

from .models import AddressList, Email
from .sanitizer import HtmlSanitizer

AddressTemplates = Optional[Tuple[Template, ...]]

TemplateInput = Union[str, Template]


def _as_template(value: Any) -> Any:
    if isinstance(value, str):
        return Template.parse(value)
    return value


class EmailTemplate(BaseModel):
    """Templates for every field of an email.

    Address fields hold one template per entry. A literal entry listing
    several comma-separated addresses is split into one literal per address;
    an inline entry is rendered first and split afterwards. Plain strings
    passed to any field become literal or inline templates depending on
    whether they contain template syntax.

    All fields are optional: an empty EmailTemplate renders an empty email.
    """

    from_: AddressTemplates = None
    to: AddressTemplates = None
    cc: AddressTemplates = None
    bcc: AddressTemplates = None
    reply_to: AddressTemplates = None
    priority: Optional[Template] = None
    subject: Optional[Template] = None
    text_body: Optional[Template] = None
    html_body: Optional[Template] = None
    sanitize_html_body: bool = True

    model_config = {"frozen": True}

    @field_validator("from_", "to", "cc", "bcc", "reply_to", mode="before")
    @classmethod
    def split_addresses(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (str, Template)):
            value = [value]

        templates = []
        for item in value:
            template = _as_template(item)
            if isinstance(template, Template) and template.type == TemplateType.LITERAL:
                templates.extend(
                    Template.literal(str(address)) for address in AddressList.parse(template.text)
                )
            else:
                templates.append(template)

        return tuple(templates) or None

    @field_validator("subject", "text_body", "html_body", mode="before")
    @classmethod
    def coerce_template(cls, value: Any) -> Any:
        return _as_template(value)

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, value: Any) -> Any:
        if isinstance(value, Priority):
            return Template.literal(value.value)
        template = _as_template(value)
        if isinstance(template, Template) and template.type == TemplateType.LITERAL:
            # Raises ValueError for unknown priorities
            Priority(template.text)
        return template

    def is_empty(self) -> bool:
        return all(
            getattr(self, name) is None
            for name in ("from_", "to", "cc", "bcc", "reply_to", "subject", "text_body", "html_body")
        )

    def render(
        self,
        engine: TemplateEngine,
        model: Mapping[str, Any],
        sanitizer: Optional[HtmlSanitizer] = None,
    ) -> Email:
        """Render every present field against ``model``.

        Absent fields stay None on the returned Email.

        Raises:
            RenderError: If a template fails to render or the rendered priority
                is not a Priority value
            AddressParseError: If a rendered address field is not a valid
                address list
        """
        html_body = self._render(engine, self.html_body, model)
        if html_body is not None and self.sanitize_html_body and sanitizer is not None:
            html_body = sanitizer.sanitize(html_body)

        return Email(
            from_=self._render_addresses(engine, self.from_, model),
            to=self._render_addresses(engine, self.to, model),
            cc=self._render_addresses(engine, self.cc, model),
            bcc=self._render_addresses(engine, self.bcc, model),
            reply_to=self._render_addresses(engine, self.reply_to, model),
            priority=self._render_priority(engine, model),
            subject=self._render(engine, self.subject, model),
            text_body=self._render(engine, self.text_body, model),
            html_body=html_body,
        )

    @staticmethod
    def _render(
        engine: TemplateEngine, template: Optional[Template], model: Mapping[str, Any]
    ) -> Optional[str]:
        if template is None:
            return None
        return engine.render(template, model)

    @staticmethod
    def _render_addresses(
        engine: TemplateEngine,
        templates: Optional[Iterable[Template]],
        model: Mapping[str, Any],
    ) -> Optional[AddressList]:
        if templates is None:
            return None

        addresses = AddressList()
        for template in templates:
            addresses += AddressList.parse(engine.render(template, model))
        return addresses

    def _render_priority(
        self, engine: TemplateEngine, model: Mapping[str, Any]
    ) -> Optional[Priority]:
        rendered = self._render(engine, self.priority, model)
        if rendered is None:
            return None
        try:
            return Priority(rendered.strip())
        except ValueError:
            raise RenderError(
                f"Rendered priority '{rendered}' is not one of: "
                f"{', '.join(p.value for p in Priority)}"
            ) from None
