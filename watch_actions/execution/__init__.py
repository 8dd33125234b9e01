"""Execution context and template model construction."""

from .context import Payload, WatchExecutionContext, Wid
from .model import build_template_model

__all__ = ["WatchExecutionContext", "Wid", "Payload", "build_template_model"]
