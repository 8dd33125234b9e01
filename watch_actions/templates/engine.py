"""Template rendering backed by a sandboxed Jinja2 environment."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from jinja2 import FileSystemLoader, StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from .models import RenderError, Template, TemplateType

logger = logging.getLogger(__name__)


class TemplateEngine(ABC):
    """Renders one template against one model."""

    @abstractmethod
    def render(self, template: Template, model: Mapping[str, Any]) -> str:
        """Render ``template`` with ``model`` as its variables.

        Raises:
            RenderError: On invalid template syntax or missing model keys
        """


class JinjaTemplateEngine(TemplateEngine):
    """Jinja2 implementation of :class:`TemplateEngine`.

    Inline templates are compiled from their text, file templates are loaded
    from ``template_dir``. The environment is sandboxed because template text
    comes from user-supplied action documents, and undefined variables raise
    instead of rendering as empty strings.
    """

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        self.template_dir = Path(template_dir) if template_dir else None
        self.env = SandboxedEnvironment(
            loader=FileSystemLoader(str(self.template_dir)) if self.template_dir else None,
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, template: Template, model: Mapping[str, Any]) -> str:
        if template.type == TemplateType.LITERAL:
            return template.text

        if template.type == TemplateType.FILE and self.env.loader is None:
            raise RenderError(
                f"Cannot render file template '{template.text}': no template directory configured"
            )

        try:
            if template.type == TemplateType.FILE:
                compiled = self.env.get_template(template.text)
            else:
                compiled = self.env.from_string(template.text)
            return compiled.render(dict(model))
        except TemplateError as e:
            logger.debug(f"Rendering {template.type.value} template failed: {e}")
            raise RenderError(f"Failed to render {template.type.value} template: {e}") from e
        except Exception as e:
            raise RenderError(
                f"Unexpected error rendering {template.type.value} template: {e}"
            ) from e
