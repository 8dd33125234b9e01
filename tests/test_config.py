"""Tests for settings loading and validation."""

import warnings

import pytest
from pydantic import ValidationError

from watch_actions.config import (
    AccountConfig,
    AppSettings,
    ConfigurationError,
    EmailSettings,
    EnvironmentConfig,
    SmtpConfig,
    load_environment_config,
    load_settings,
)
from watch_actions.config.validators import check_for_warnings
from watch_actions.domain.models import Profile

VALID_YAML = """
email:
  default_account: work
  accounts:
    work:
      smtp:
        host: smtp.example.com
        port: 587
        user: bot@example.com
        password: secret
      profile: gmail
      sender_name: Watch Alerts
    relay:
      smtp:
        host: relay.internal
        port: 465
logging:
  level: DEBUG
  format: json
"""


@pytest.fixture
def no_env():
    return EnvironmentConfig()


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "watch_actions.yaml"
    path.write_text(VALID_YAML, encoding="utf-8")
    return path


def test_load_valid_settings(settings_file, no_env):
    settings = load_settings(settings_file, env_config=no_env)

    assert isinstance(settings, AppSettings)
    assert settings.email.default_account == "work"
    work = settings.email.accounts["work"]
    assert work.profile == Profile.GMAIL
    assert work.smtp.password.get_secret_value() == "secret"
    assert "secret" not in repr(work)
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"


def test_missing_explicit_file_raises(tmp_path, no_env):
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings(tmp_path / "nope.yaml", env_config=no_env)


def test_no_file_gives_defaults(tmp_path, monkeypatch, no_env):
    monkeypatch.chdir(tmp_path)
    settings = load_settings(env_config=no_env)
    assert settings.email.accounts == {}
    assert settings.email.default_account is None
    assert settings.logging.level == "INFO"


def test_default_location_is_found(tmp_path, monkeypatch, no_env):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "watch_actions.yaml").write_text(VALID_YAML, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert "work" in load_settings(env_config=no_env).email.accounts


def test_invalid_yaml_raises(tmp_path, no_env):
    path = tmp_path / "bad.yaml"
    path.write_text("email: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
        load_settings(path, env_config=no_env)


def test_validation_errors_are_collected(tmp_path, no_env):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "email:\n  accounts:\n    work:\n      smtp:\n        port: 99999\n", encoding="utf-8"
    )
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(path, env_config=no_env)
    assert len(exc_info.value.errors) == 2
    assert any("Missing required field" in e for e in exc_info.value.errors)


def test_unknown_default_account_rejected():
    with pytest.raises(ValidationError):
        EmailSettings(default_account="nope", accounts={})


def test_single_account_becomes_default():
    settings = EmailSettings(accounts={"only": AccountConfig(smtp=SmtpConfig(host="h"))})
    assert settings.default_account == "only"
    assert settings.get_account() == ("only", settings.accounts["only"])


def test_get_unknown_account_raises():
    settings = EmailSettings(accounts={"only": AccountConfig(smtp=SmtpConfig(host="h"))})
    with pytest.raises(KeyError):
        settings.get_account("other")


@pytest.mark.parametrize(
    "smtp",
    [
        {"host": "h", "user": "u"},
        {"host": "h", "password": "p"},
        {"host": "  "},
        {"host": "h", "port": 0},
    ],
)
def test_invalid_smtp_config(smtp):
    with pytest.raises(ValidationError):
        SmtpConfig(**smtp)


def test_environment_account_is_merged(settings_file):
    env = EnvironmentConfig(smtp_host="smtp.env.example", smtp_user="u", smtp_pass="p", account_name="env")
    settings = load_settings(settings_file, env_config=env)
    assert settings.email.accounts["env"].smtp.host == "smtp.env.example"
    assert settings.email.default_account == "work"


def test_environment_only_setup(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = EnvironmentConfig(smtp_host="smtp.env.example", smtp_sender_name="Env Bot")
    settings = load_settings(env_config=env)
    assert settings.email.default_account == "default"
    assert settings.email.accounts["default"].sender_name == "Env Bot"


def test_environment_does_not_replace_file_account(settings_file):
    env = EnvironmentConfig(smtp_host="other.example", account_name="work")
    settings = load_settings(settings_file, env_config=env)
    assert settings.email.accounts["work"].smtp.host == "smtp.example.com"


def test_environment_log_level_wins(settings_file):
    settings = load_settings(settings_file, env_config=EnvironmentConfig(log_level="ERROR"))
    assert settings.logging.level == "ERROR"


def test_load_environment_config():
    env = load_environment_config(
        {
            "SMTP_HOST": "smtp.example.com",
            "SMTP_PORT": "2525",
            "SMTP_USER": "u",
            "SMTP_PASS": "p",
            "SMTP_SENDER_NAME": "Bot",
            "EMAIL_ACCOUNT": "primary",
            "LOG_LEVEL": "debug",
        }
    )
    assert env.smtp_port == 2525
    assert env.account_name == "primary"
    assert env.log_level == "DEBUG"
    account = env.to_account()
    assert account.smtp.user == "u"
    assert account.smtp.password.get_secret_value() == "p"


def test_empty_environment():
    env = load_environment_config({})
    assert env.to_account() is None
    assert env.account_name == "default"


@pytest.mark.parametrize(
    "environ",
    [
        {"SMTP_HOST": "h", "SMTP_PORT": "abc"},
        {"SMTP_HOST": "h", "SMTP_PORT": "70000"},
        {"SMTP_PORT": "25"},
        {"SMTP_HOST": "h", "SMTP_USER": "u"},
        {"SMTP_HOST": "h", "SMTP_PASS": "p"},
        {"LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_environment(environ):
    with pytest.raises(ConfigurationError):
        load_environment_config(environ)


def test_configuration_error_message_format():
    error = ConfigurationError("Broken", errors=["first", "second"], suggestions=["fix it"])
    message = str(error)
    assert "  1. first" in message
    assert "  2. second" in message
    assert "  - fix it" in message


def test_warnings_for_risky_settings():
    messages = check_for_warnings(
        {
            "email": {
                "accounts": {"relay": {"smtp": {"host": "h", "port": 25, "use_tls": False}}},
                "html_sanitization": {"enabled": False},
            }
        }
    )
    assert len(messages) == 3


def test_warnings_are_emitted_on_load(tmp_path, no_env):
    path = tmp_path / "watch_actions.yaml"
    path.write_text("email:\n  html_sanitization:\n    enabled: false\n", encoding="utf-8")
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        load_settings(path, env_config=no_env)
    assert any("sanitization" in str(w.message) for w in caught)
