"""Attaching the execution payload to an email."""

from enum import Enum
from typing import Any, Mapping, Optional, Union

from watch_actions.utils.documents import DocumentError, dump_json, dump_yaml

from .exceptions import AttachmentEncodingError
from .models import Attachment

DATA_ATTACHMENT_KEY = "data"


class DataAttachment(str, Enum):
    """Format in which the payload is attached.

    An action without a data attachment carries ``None`` instead of a member.
    """

    JSON = "json"
    YAML = "yaml"

    @property
    def content_type(self) -> str:
        if self is DataAttachment.JSON:
            return "application/json"
        return "application/yaml"

    @property
    def filename(self) -> str:
        if self is DataAttachment.JSON:
            return "data.json"
        return "data.yml"

    @classmethod
    def resolve(cls, value: Union[bool, str, "DataAttachment", None]) -> Optional["DataAttachment"]:
        """Map an ``attach_data`` document value to a policy.

        ``True`` selects the default format, ``False``/``None`` disables the
        attachment, a string selects that format explicitly.
        """
        if value is None or value is False:
            return None
        if value is True:
            return DEFAULT_DATA_ATTACHMENT
        return cls(value)

    def create(self, data: Mapping[str, Any]) -> Attachment:
        """Encode ``data`` in this format.

        Raises:
            AttachmentEncodingError: If the payload holds values this format
                cannot represent
        """
        try:
            if self is DataAttachment.JSON:
                encoded = dump_json(data, pretty=True)
            else:
                encoded = dump_yaml(data)
        except DocumentError as e:
            raise AttachmentEncodingError(
                f"Failed to encode payload as {self.value}: {e}"
            ) from e

        return Attachment(
            filename=self.filename,
            content_type=self.content_type,
            content=encoded.encode("utf-8"),
        )

    def __str__(self) -> str:
        return self.value


DEFAULT_DATA_ATTACHMENT = DataAttachment.JSON
