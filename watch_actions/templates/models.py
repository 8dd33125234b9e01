"""Template values and rendering errors."""

import re
from enum import Enum

from pydantic import BaseModel, Field

# Jinja2 expression and statement openers, or a closed comment
_TEMPLATE_SYNTAX = re.compile(r"\{\{|\{%|\{#.*?#\}", re.DOTALL)


class RenderError(Exception):
    """Raised when a template cannot be rendered against a model."""

    pass


class TemplateType(str, Enum):
    """How the text of a template is interpreted.

    LITERAL: the text is the result, no templating involved.
    INLINE: the text is template source.
    FILE: the text names a template file in the engine's template directory.
    """

    LITERAL = "literal"
    INLINE = "inline"
    FILE = "file"


def is_templated(text: str) -> bool:
    """Check whether ``text`` contains template syntax."""
    return bool(_TEMPLATE_SYNTAX.search(text))


class Template(BaseModel):
    """A string resolved against a model at execution time.

    Two templates are equal when both their type and their text are equal.
    """

    text: str
    type: TemplateType = Field(TemplateType.INLINE)

    model_config = {"frozen": True}

    @classmethod
    def literal(cls, text: str) -> "Template":
        return cls(text=text, type=TemplateType.LITERAL)

    @classmethod
    def inline(cls, text: str) -> "Template":
        return cls(text=text, type=TemplateType.INLINE)

    @classmethod
    def file(cls, name: str) -> "Template":
        return cls(text=name, type=TemplateType.FILE)

    @classmethod
    def parse(cls, text: str) -> "Template":
        """Inline template if ``text`` contains template syntax, literal otherwise."""
        if is_templated(text):
            return cls.inline(text)
        return cls.literal(text)

    @property
    def is_scalar(self) -> bool:
        """True when :meth:`parse` of the text gives this template back."""
        return Template.parse(self.text) == self

    def __str__(self) -> str:
        return self.text
