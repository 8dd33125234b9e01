"""Templates and the engine that renders them.

- Template: literal, inline or file template value
- TemplateEngine: rendering interface consumed by actions
- JinjaTemplateEngine: sandboxed Jinja2 implementation
"""

from .engine import JinjaTemplateEngine, TemplateEngine
from .models import RenderError, Template, TemplateType, is_templated

__all__ = [
    "Template",
    "TemplateType",
    "TemplateEngine",
    "JinjaTemplateEngine",
    "RenderError",
    "is_templated",
]
