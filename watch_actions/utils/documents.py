"""Reading and writing structured (JSON/YAML) documents.

Action definitions, payloads and settings all travel as plain mappings.
These helpers turn text into mappings and back, converting values JSON and
YAML cannot represent natively (datetimes, enums, tuples) on the way out.
"""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Union

import yaml

from .timestamps import format_timestamp


class DocumentError(ValueError):
    """Raised when a document cannot be decoded or encoded."""

    pass


def load_document(content: Union[str, bytes]) -> Dict[str, Any]:
    """Decode a JSON or YAML object into a dict.

    JSON is tried first since PyYAML rejects some valid JSON (tab
    indentation); anything else is read as YAML. For duplicate keys the
    last occurrence wins in both.

    Raises:
        DocumentError: If the text is not valid UTF-8, YAML or JSON, or not
            an object
    """
    try:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentError(f"Document is not valid UTF-8: {e}") from e

    try:
        document = json.loads(content)
    except ValueError:
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DocumentError(f"Failed to parse document: {e}") from e

    if not isinstance(document, dict):
        raise DocumentError(
            f"Expected a document object, got {type(document).__name__}"
        )
    return document


def to_plain(value: Any) -> Any:
    """Recursively convert a value into JSON/YAML-safe builtins."""
    if isinstance(value, Mapping):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_plain(item) for item in value]
    if isinstance(value, datetime):
        return format_timestamp(value, include_microseconds=value.microsecond != 0)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return to_plain(value.value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise DocumentError(f"Cannot encode value of type {type(value).__name__}")


def dump_json(document: Any, pretty: bool = False) -> str:
    """Encode a document as JSON.

    Raises:
        DocumentError: If the document holds values that cannot be encoded
    """
    try:
        return json.dumps(
            to_plain(document),
            ensure_ascii=False,
            allow_nan=False,
            indent=2 if pretty else None,
        )
    except (TypeError, ValueError) as e:
        raise DocumentError(f"Failed to encode JSON: {e}") from e


def dump_yaml(document: Any) -> str:
    """Encode a document as block-style YAML, keeping key order.

    Raises:
        DocumentError: If the document holds values that cannot be encoded
    """
    try:
        return yaml.safe_dump(
            to_plain(document),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    except yaml.YAMLError as e:
        raise DocumentError(f"Failed to encode YAML: {e}") from e
