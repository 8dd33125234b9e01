"""Non-fatal checks on raw settings documents."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Look for settings that are valid but probably not what was meant.

    Args:
        config_dict: Raw settings dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    email = config_dict.get("email") or {}
    if not isinstance(email, dict):
        return warning_messages

    accounts = email.get("accounts") or {}
    if isinstance(accounts, dict):
        for name, account in accounts.items():
            smtp = account.get("smtp") if isinstance(account, dict) else None
            if not isinstance(smtp, dict):
                continue
            if not smtp.get("user"):
                warning_messages.append(
                    f"Account '{name}' has no SMTP credentials; mail is sent unauthenticated"
                )
            if smtp.get("use_tls") is False and smtp.get("port") != 465:
                warning_messages.append(
                    f"Account '{name}' sends over an unencrypted connection"
                )

    sanitization = email.get("html_sanitization") or {}
    if isinstance(sanitization, dict) and sanitization.get("enabled") is False:
        warning_messages.append(
            "HTML sanitization is disabled; html bodies are sent as rendered"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
