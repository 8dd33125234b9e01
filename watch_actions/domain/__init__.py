"""Enumerations shared by the action definitions and the settings."""

from .models import Priority, Profile

__all__ = ["Priority", "Profile"]
