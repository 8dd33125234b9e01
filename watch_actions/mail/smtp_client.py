"""SMTP client wrapper for email delivery.

Thin wrapper around smtplib handling TLS/SSL negotiation, authentication
and connection cleanup. Connection factories are injectable for tests.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional, Sequence, Tuple

from watch_actions.config.models import AccountConfig, SmtpConfig

from .exceptions import DeliveryError
from .models import Address

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Sends one EmailMessage per connection."""

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client with optional factory injection.

        Args:
            smtp_factory: Factory creating SMTP instances (for mocking)
            smtp_ssl_factory: Factory creating SMTP_SSL instances (for mocking)
        """
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def send(
        self,
        message: EmailMessage,
        smtp_config: SmtpConfig,
        credentials: Optional[Tuple[str, str]] = None,
        to_addrs: Optional[Sequence[str]] = None,
    ) -> None:
        """Send a message.

        Args:
            message: Fully built message
            smtp_config: Server to connect to
            credentials: (user, password) to log in with; no AUTH if None
            to_addrs: Envelope recipients (defaults to the message headers,
                which leaves out Bcc)

        Raises:
            DeliveryError: If connecting, authenticating or sending fails
        """
        smtp = None
        try:
            if smtp_config.port == IMPLICIT_TLS_PORT:
                logger.debug(
                    f"Connecting to {smtp_config.host}:{smtp_config.port} with implicit TLS"
                )
                smtp = self.smtp_ssl_factory(
                    smtp_config.host,
                    smtp_config.port,
                    timeout=smtp_config.timeout,
                    context=ssl.create_default_context(),
                )
            else:
                logger.debug(f"Connecting to {smtp_config.host}:{smtp_config.port}")
                smtp = self.smtp_factory(
                    smtp_config.host, smtp_config.port, timeout=smtp_config.timeout
                )
                if smtp_config.use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    smtp.starttls(context=ssl.create_default_context())

            if credentials is not None:
                logger.debug(f"Authenticating as {credentials[0]}")
                smtp.login(*credentials)

            smtp.send_message(message, to_addrs=list(to_addrs) if to_addrs else None)
            logger.debug(f"Message sent to {message['To']}")

        except smtplib.SMTPAuthenticationError as e:
            raise DeliveryError(f"SMTP authentication failed: {e}") from e
        except smtplib.SMTPException as e:
            raise DeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise DeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except Exception as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


def build_sender_address(account: AccountConfig) -> str:
    """Build the 'From' address for an account.

    Uses the account's SMTP user if set, otherwise a noreply address at the
    SMTP host, with the account's sender name as display name when given.

    Returns:
        Formatted sender address (e.g., "Watch Alerts <bot@example.com>")
    """
    if account.smtp.user:
        sender_email = account.smtp.user
    else:
        sender_email = f"noreply@{account.smtp.host}"

    if not account.sender_name:
        return sender_email
    return str(Address(email=sender_email, name=account.sender_name))
