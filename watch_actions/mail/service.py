"""Email services deliver rendered emails through named accounts."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from watch_actions.config.models import AccountConfig, EmailSettings
from watch_actions.domain.models import Profile
from watch_actions.logging import get_logger
from watch_actions.utils.timestamps import utc_now

from .exceptions import DeliveryError
from .mime import build_mime_message
from .models import Authentication, Email
from .smtp_client import SMTPClient, build_sender_address

logger = get_logger(__name__, component="smtp")


@dataclass(frozen=True)
class EmailSent:
    """Receipt for a delivered email.

    Attributes:
        account: Account the email went out through
        email: The email as sent (with its sent date filled in)
    """

    account: str
    email: Email


class EmailService(ABC):
    """Delivery backend used by email actions."""

    @abstractmethod
    def send(
        self,
        email: Email,
        auth: Optional[Authentication] = None,
        profile: Optional[Profile] = None,
    ) -> EmailSent:
        """Send through the default account.

        Raises:
            DeliveryError: If the email cannot be delivered
        """

    @abstractmethod
    def send_as(
        self,
        email: Email,
        account: str,
        auth: Optional[Authentication] = None,
        profile: Optional[Profile] = None,
    ) -> EmailSent:
        """Send through the named account.

        Raises:
            DeliveryError: If the account is unknown or delivery fails
        """


class AccountsEmailService(EmailService):
    """EmailService sending over SMTP through the configured accounts."""

    def __init__(
        self,
        settings: EmailSettings,
        smtp_client: Optional[SMTPClient] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the service.

        Args:
            settings: Accounts to send through
            smtp_client: SMTP client instance (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.settings = settings
        self.smtp_client = smtp_client or SMTPClient()
        self.logger = logger_instance or logger

    def send(
        self,
        email: Email,
        auth: Optional[Authentication] = None,
        profile: Optional[Profile] = None,
    ) -> EmailSent:
        return self._send(email, None, auth, profile)

    def send_as(
        self,
        email: Email,
        account: str,
        auth: Optional[Authentication] = None,
        profile: Optional[Profile] = None,
    ) -> EmailSent:
        return self._send(email, account, auth, profile)

    def _send(
        self,
        email: Email,
        account_name: Optional[str],
        auth: Optional[Authentication],
        profile: Optional[Profile],
    ) -> EmailSent:
        try:
            name, account = self.settings.get_account(account_name)
        except KeyError as e:
            raise DeliveryError(e.args[0]) from None

        recipients = [address.email for address in email.recipients]
        if not recipients:
            raise DeliveryError("email has no recipients")

        if email.sent_date is None:
            email = replace(email, sent_date=utc_now())

        message = build_mime_message(
            email, profile or account.profile, sender=build_sender_address(account)
        )

        self.logger.info(
            f"Sending email via account '{name}' to {len(recipients)} recipient(s)",
            extra={
                "event": "smtp.send",
                "account": name,
                "smtp_host": account.smtp.host,
                "email_id": email.id,
            },
        )
        self.smtp_client.send(
            message,
            account.smtp,
            credentials=self._credentials(auth, account),
            to_addrs=recipients,
        )
        return EmailSent(account=name, email=email)

    @staticmethod
    def _credentials(
        auth: Optional[Authentication], account: AccountConfig
    ) -> Optional[Tuple[str, str]]:
        if auth is not None:
            if auth.password is None:
                raise DeliveryError(
                    f"credential for user '{auth.user}' has no password (redacted action?)"
                )
            return auth.user, auth.password.get_secret_value()
        if account.smtp.user and account.smtp.password is not None:
            return account.smtp.user, account.smtp.password.get_secret_value()
        return None
