"""Environment variable loading and validation."""

import os
from typing import Mapping, Optional

from pydantic import SecretStr

from .exceptions import ConfigurationError
from .models import AccountConfig, SmtpConfig

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_pass: Optional[str] = None,
        smtp_sender_name: Optional[str] = None,
        account_name: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.smtp_sender_name = smtp_sender_name
        self.account_name = account_name or "default"
        self.log_level = log_level

    def to_account(self) -> Optional[AccountConfig]:
        """Build the account described by SMTP_* variables, if any."""
        if not self.smtp_host:
            return None

        return AccountConfig(
            smtp=SmtpConfig(
                host=self.smtp_host,
                port=self.smtp_port,
                user=self.smtp_user,
                password=SecretStr(self.smtp_pass) if self.smtp_pass else None,
            ),
            sender_name=self.smtp_sender_name,
        )


def load_environment_config(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional; when SMTP_HOST is set they describe one
    account named by EMAIL_ACCOUNT (default "default"):
    - SMTP_HOST, SMTP_PORT (default 587)
    - SMTP_USER, SMTP_PASS (both or neither)
    - SMTP_SENDER_NAME
    - LOG_LEVEL

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Raises:
        ConfigurationError: If a variable is present but invalid
    """
    env = os.environ if environ is None else environ
    errors = []

    smtp_host = env.get("SMTP_HOST")
    smtp_port_str = env.get("SMTP_PORT")
    smtp_user = env.get("SMTP_USER")
    smtp_pass = env.get("SMTP_PASS")
    log_level = env.get("LOG_LEVEL")

    smtp_port = 587
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer.")

    if smtp_port_str and not smtp_host:
        errors.append("SMTP_PORT is set but SMTP_HOST is not.")

    if smtp_user and not smtp_pass:
        errors.append(
            "SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication."
        )
    elif smtp_pass and not smtp_user:
        errors.append(
            "SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication."
        )

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SMTP account",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        smtp_sender_name=env.get("SMTP_SENDER_NAME"),
        account_name=env.get("EMAIL_ACCOUNT"),
        log_level=log_level.upper() if log_level else None,
    )
