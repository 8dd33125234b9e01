"""Builds the variables templates are rendered against."""

from typing import Any, Dict, Optional

from .context import Payload, WatchExecutionContext


def build_template_model(
    ctx: WatchExecutionContext, payload: Optional[Payload] = None
) -> Dict[str, Any]:
    """Build the rendering model for one execution.

    Every templated field of an action renders against this same model::

        {"ctx": {"watch_id", "payload", "metadata", "execution_time",
                 "trigger": {"triggered_time", "scheduled_time"}}}

    Args:
        ctx: Execution context
        payload: Payload to expose (defaults to the context's payload)
    """
    payload = payload if payload is not None else ctx.payload
    return {
        "ctx": {
            "watch_id": ctx.watch_id,
            "payload": payload.data,
            "metadata": ctx.metadata,
            "execution_time": ctx.execution_time,
            "trigger": {
                "triggered_time": ctx.triggered_time,
                "scheduled_time": ctx.scheduled_time,
            },
        }
    }
