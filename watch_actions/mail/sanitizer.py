"""HTML sanitization for rendered email bodies.

Built on the standard library's HTMLParser: markup is re-emitted tag by
tag, keeping only allow-listed tags and attributes. Everything else is
escaped or dropped.
"""

import html
from html.parser import HTMLParser
from typing import Iterable, List, Optional, Tuple

from watch_actions.config.models import (
    DEFAULT_ALLOWED_ATTRIBUTES,
    DEFAULT_ALLOWED_TAGS,
    HtmlSanitizationConfig,
)

# Tags whose content is dropped along with the tag
_DROP_CONTENT_TAGS = frozenset({"script", "style", "iframe", "object", "embed", "head", "title"})

_VOID_TAGS = frozenset({"br", "hr", "img"})

_URL_ATTRIBUTES = frozenset({"href", "src"})

_SAFE_SCHEMES = ("http:", "https:", "mailto:", "cid:")


class _SanitizingParser(HTMLParser):
    def __init__(self, allowed_tags: frozenset, allowed_attributes: frozenset):
        super().__init__(convert_charrefs=True)
        self.allowed_tags = allowed_tags
        self.allowed_attributes = allowed_attributes
        self.parts: List[str] = []
        self.open_tags: List[str] = []
        self.drop_depth = 0

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self.drop_depth += 1
            return
        if self.drop_depth or tag not in self.allowed_tags:
            return

        self.parts.append(f"<{tag}{self._format_attrs(attrs)}>")
        if tag not in _VOID_TAGS:
            self.open_tags.append(tag)

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if self.drop_depth or tag in _DROP_CONTENT_TAGS or tag not in self.allowed_tags:
            return
        self.parts.append(f"<{tag}{self._format_attrs(attrs)} />")

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self.drop_depth = max(0, self.drop_depth - 1)
            return
        if self.drop_depth or tag not in self.open_tags:
            return

        # Close anything left open inside this element
        while self.open_tags:
            open_tag = self.open_tags.pop()
            self.parts.append(f"</{open_tag}>")
            if open_tag == tag:
                break

    def handle_data(self, data: str) -> None:
        if not self.drop_depth:
            self.parts.append(html.escape(data, quote=False))

    def _format_attrs(self, attrs: List[Tuple[str, Optional[str]]]) -> str:
        rendered = []
        for name, value in attrs:
            if name not in self.allowed_attributes or name.startswith("on"):
                continue
            if value is None:
                rendered.append(f" {name}")
                continue
            if name in _URL_ATTRIBUTES and not _is_safe_url(value):
                continue
            rendered.append(f' {name}="{html.escape(value, quote=True)}"')
        return "".join(rendered)

    def result(self) -> str:
        self.close()
        closing = [f"</{tag}>" for tag in reversed(self.open_tags)]
        return "".join(self.parts + closing)


def _is_safe_url(value: str) -> bool:
    compact = "".join(value.split()).lower()
    if ":" not in compact.split("/", 1)[0]:
        # Relative URL or fragment
        return True
    return compact.startswith(_SAFE_SCHEMES)


class HtmlSanitizer:
    """Strips markup that is not allow-listed from HTML bodies."""

    def __init__(
        self,
        allowed_tags: Optional[Iterable[str]] = None,
        allowed_attributes: Optional[Iterable[str]] = None,
        enabled: bool = True,
    ):
        self.allowed_tags = frozenset(
            t.lower() for t in (allowed_tags if allowed_tags is not None else DEFAULT_ALLOWED_TAGS)
        )
        self.allowed_attributes = frozenset(
            a.lower()
            for a in (
                allowed_attributes if allowed_attributes is not None else DEFAULT_ALLOWED_ATTRIBUTES
            )
        )
        self.enabled = enabled

    @classmethod
    def from_config(cls, config: HtmlSanitizationConfig) -> "HtmlSanitizer":
        return cls(
            allowed_tags=config.allowed_tags,
            allowed_attributes=config.allowed_attributes,
            enabled=config.enabled,
        )

    def sanitize(self, body: str) -> str:
        if not self.enabled:
            return body
        parser = _SanitizingParser(self.allowed_tags, self.allowed_attributes)
        parser.feed(body)
        return parser.result()
