"""Execution context handed to actions when a watch fires."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from watch_actions.utils.timestamps import ensure_utc, format_timestamp, utc_now


@dataclass(frozen=True)
class Wid:
    """Unique id of one watch execution.

    The value combines the watch id, a nonce and the execution time, e.g.
    ``watch1_3f2a9c1e-2025-11-04T12:00:00Z``.
    """

    watch_id: str
    nonce: str
    execution_time: datetime

    @classmethod
    def generate(cls, watch_id: str, execution_time: Optional[datetime] = None) -> "Wid":
        return cls(
            watch_id=watch_id,
            nonce=uuid4().hex[:8],
            execution_time=ensure_utc(execution_time) if execution_time else utc_now(),
        )

    @property
    def value(self) -> str:
        return f"{self.watch_id}_{self.nonce}-{format_timestamp(self.execution_time)}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Payload:
    """Data produced by the watch's input, passed on to its actions."""

    data: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Payload":
        return cls({})


@dataclass(frozen=True)
class WatchExecutionContext:
    """Read-only view of one execution, as produced by the trigger engine."""

    watch_id: str
    id: Wid
    execution_time: datetime
    triggered_time: datetime
    scheduled_time: datetime
    payload: Payload = field(default_factory=Payload.empty)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def execution_id(self) -> str:
        return self.id.value

    @classmethod
    def create(
        cls,
        watch_id: str,
        payload: Optional[Payload] = None,
        metadata: Optional[Dict[str, Any]] = None,
        execution_time: Optional[datetime] = None,
        triggered_time: Optional[datetime] = None,
        scheduled_time: Optional[datetime] = None,
    ) -> "WatchExecutionContext":
        """Build a context for a manual or scheduled run.

        Trigger times default to the execution time, which defaults to now.
        """
        now = ensure_utc(execution_time) if execution_time else utc_now()
        triggered = ensure_utc(triggered_time) if triggered_time else now
        return cls(
            watch_id=watch_id,
            id=Wid.generate(watch_id, now),
            execution_time=now,
            triggered_time=triggered,
            scheduled_time=ensure_utc(scheduled_time) if scheduled_time else triggered,
            payload=payload or Payload.empty(),
            metadata=dict(metadata or {}),
        )
