"""Settings schema models using Pydantic."""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from watch_actions.domain.models import Profile

DEFAULT_ALLOWED_TAGS = [
    "a", "abbr", "b", "blockquote", "br", "caption", "code", "div", "em",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "li", "ol", "p",
    "pre", "s", "small", "span", "strong", "sub", "sup", "table", "tbody",
    "td", "tfoot", "th", "thead", "tr", "u", "ul",
]

DEFAULT_ALLOWED_ATTRIBUTES = [
    "align", "alt", "border", "cellpadding", "cellspacing", "class", "colspan",
    "height", "href", "rowspan", "src", "style", "title", "valign", "width",
]


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SmtpConfig(BaseModel):
    """Connection settings for one SMTP server."""

    host: str = Field(..., min_length=1, description="SMTP server hostname")
    port: int = Field(587, ge=1, le=65535, description="SMTP server port")
    user: Optional[str] = Field(None, description="Username for SMTP AUTH")
    password: Optional[SecretStr] = Field(None, description="Password for SMTP AUTH")
    use_tls: bool = Field(True, description="Upgrade with STARTTLS (implicit TLS on 465)")
    timeout: int = Field(30, ge=1, le=300, description="Socket timeout in seconds")

    @field_validator("host")
    @classmethod
    def strip_host(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("host cannot be empty or whitespace-only")
        return stripped

    @model_validator(mode="after")
    def validate_credentials(self):
        """user and password come as a pair."""
        if self.user and self.password is None:
            raise ValueError("smtp.user is set but smtp.password is not")
        if self.password is not None and not self.user:
            raise ValueError("smtp.password is set but smtp.user is not")
        return self


class AccountConfig(BaseModel):
    """A named delivery account: SMTP server plus message defaults."""

    smtp: SmtpConfig
    profile: Profile = Field(Profile.STANDARD, description="Default MIME profile")
    sender_name: Optional[str] = Field(None, description="Display name for the From header")


class HtmlSanitizationConfig(BaseModel):
    """Allow-lists applied to rendered HTML bodies."""

    enabled: bool = Field(True, description="Sanitize html bodies that request it")
    allowed_tags: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TAGS))
    allowed_attributes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ATTRIBUTES)
    )

    @field_validator("allowed_tags", "allowed_attributes")
    @classmethod
    def normalize_names(cls, v: List[str]) -> List[str]:
        """Lowercase and drop blanks."""
        return [name.strip().lower() for name in v if name and name.strip()]


class EmailSettings(BaseModel):
    """Email accounts available to actions."""

    default_account: Optional[str] = Field(
        None, description="Account used when an action does not name one"
    )
    accounts: Dict[str, AccountConfig] = Field(default_factory=dict)
    html_sanitization: HtmlSanitizationConfig = Field(
        default_factory=HtmlSanitizationConfig
    )

    @model_validator(mode="after")
    def resolve_default_account(self):
        """A single account is the default; a named default must exist."""
        if self.default_account is None and len(self.accounts) == 1:
            self.default_account = next(iter(self.accounts))
        if self.default_account is not None and self.default_account not in self.accounts:
            raise ValueError(
                f"default_account '{self.default_account}' is not one of the configured "
                f"accounts: {', '.join(sorted(self.accounts)) or '(none)'}"
            )
        return self

    def get_account(self, name: Optional[str] = None) -> Tuple[str, AccountConfig]:
        """Look up an account by name, or the default account.

        Raises:
            KeyError: If the account is unknown or no default is configured
        """
        account_name = name or self.default_account
        if account_name is None:
            raise KeyError("no account named and no default account configured")
        try:
            return account_name, self.accounts[account_name]
        except KeyError:
            raise KeyError(f"unknown email account '{account_name}'") from None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="json or key-value")

    model_config = {"use_enum_values": True}


class AppSettings(BaseModel):
    """Root settings object."""

    email: EmailSettings = Field(default_factory=EmailSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
