"""Settings loader for watch actions."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppSettings
from .validators import check_for_warnings, emit_warnings

DEFAULT_LOCATIONS = [
    Path("watch_actions.yaml"),
    Path("config") / "watch_actions.yaml",
]


def load_settings(
    config_path: Optional[Path] = None,
    env_config: Optional[EnvironmentConfig] = None,
) -> AppSettings:
    """
    Load settings from YAML and merge the account described by the environment.

    Fallback logic for the settings file:
    1. Use config_path if given (must exist)
    2. Try watch_actions.yaml in the current directory
    3. Try ./config/watch_actions.yaml
    4. Otherwise start from defaults (environment-only setup)

    Args:
        config_path: Optional path to a settings file
        env_config: Environment configuration (loaded from os.environ if None)

    Returns:
        Validated AppSettings

    Raises:
        ConfigurationError: If the file or the environment is invalid
    """
    config_dict = _read_settings_file(_find_settings_file(config_path))

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    if env_config is None:
        env_config = load_environment_config()

    _merge_environment_account(config_dict, env_config)

    try:
        settings = AppSettings.model_validate(config_dict)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            if error["type"] == "missing":
                errors.append(f"Missing required field: {field_path}")
            elif "enum" in error["type"]:
                errors.append(f"Invalid value for '{field_path}': {error['msg']}")
            else:
                errors.append(f"{field_path}: {error['msg']}")

        raise ConfigurationError(
            "Settings validation failed",
            errors=errors,
            suggestions=[
                "Review watch_actions.example.yaml for the expected format",
                "Check that every account has an smtp.host",
            ],
        ) from e

    if env_config.log_level:
        settings.logging.level = env_config.log_level

    return settings


def _find_settings_file(config_path: Optional[Path]) -> Optional[Path]:
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified settings file not found: {config_path}",
                suggestions=[f"Ensure {config_path} exists", "Check the path and try again"],
            )
        return config_path

    for candidate in DEFAULT_LOCATIONS:
        if candidate.exists():
            return candidate
    return None


def _read_settings_file(path: Optional[Path]) -> dict:
    if path is None:
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML settings: {e}",
            suggestions=[
                "Check YAML syntax in your settings file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read settings file: {e}",
            suggestions=[f"Ensure {path} is readable"],
        ) from e

    if config_dict is None:
        return {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Settings file {path} must contain a mapping at the top level"
        )
    return config_dict


def _merge_environment_account(config_dict: dict, env_config: EnvironmentConfig) -> None:
    """Add the SMTP_* account unless the file already defines one by that name."""
    account = env_config.to_account()
    if account is None:
        return

    email = config_dict.setdefault("email", {})
    if not isinstance(email, dict):
        # Leave it to validation to report the bad type
        return
    accounts = email.setdefault("accounts", {})
    if isinstance(accounts, dict) and env_config.account_name not in accounts:
        accounts[env_config.account_name] = account.model_dump()
        email.setdefault("default_account", env_config.account_name)
