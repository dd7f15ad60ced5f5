"""
Contact Mail Service

Sends relayed contact form submissions through the Django email backend.
"""
import logging

from django.core.mail import EmailMessage, get_connection

logger = logging.getLogger(__name__)


class MailDispatchError(Exception):
    """Raised when the mail backend fails to send a message."""
    pass


class ContactMailer:
    """
    Send-capable mail collaborator for the contact relay.

    Usage:
        mailer = ContactMailer(config)
        mailer.send(sender, recipient, subject, body, reply_to='user@example.com')

    Any object exposing the same ``send`` method can stand in for it.
    """

    def __init__(self, config):
        self.config = config

    def get_connection(self):
        """Open a backend connection authenticated with the relay account."""
        return get_connection(
            username=self.config.email_user,
            password=self.config.email_password,
            fail_silently=False,
        )

    def send(self, sender, recipient, subject, body, reply_to=None):
        """
        Send one plain-text message.

        Args:
            sender: From header value
            recipient: Single recipient address
            subject: Subject line
            body: Plain-text body
            reply_to: Optional Reply-To address

        Raises:
            MailDispatchError: If the backend reports a failure
        """
        email = EmailMessage(
            subject=subject,
            body=body,
            from_email=sender,
            to=[recipient],
            reply_to=[reply_to] if reply_to else None,
            connection=self.get_connection(),
        )

        try:
            sent = email.send(fail_silently=False)
        except Exception as exc:
            raise MailDispatchError(str(exc)) from exc

        if not sent:
            raise MailDispatchError(f"Mail backend accepted no message for {recipient}")

        logger.debug(f"Contact mail handed to backend for {recipient}")
        return sent
