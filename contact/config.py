"""
Contact Relay Configuration

Explicit configuration structure handed to the contact form view.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from django.conf import settings


DEFAULT_ALLOWED_ORIGINS = (
    'https://hexel-tech.de',
    'https://www.hexel-tech.de',
    'https://hexel-node1.vercel.app',
)
DEFAULT_ORIGIN = 'https://hexel-tech.de'


@dataclass(frozen=True)
class MailRelayConfig:
    """
    Mail account and CORS settings for the contact relay.

    Build one from Django settings with ``MailRelayConfig.from_settings()``,
    or construct it directly in tests.
    """

    email_user: str = ''
    email_password: str = field(default='', repr=False)
    email_to: Optional[str] = None
    site_name: str = 'HEXEL tech'
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    default_origin: str = DEFAULT_ORIGIN

    @classmethod
    def from_settings(cls):
        """Read the relay configuration from Django settings."""
        return cls(
            email_user=getattr(settings, 'EMAIL_HOST_USER', '') or '',
            email_password=getattr(settings, 'EMAIL_HOST_PASSWORD', '') or '',
            email_to=getattr(settings, 'CONTACT_EMAIL_TO', None) or None,
            site_name=getattr(settings, 'CONTACT_SITE_NAME', 'HEXEL tech'),
            allowed_origins=tuple(
                getattr(settings, 'CONTACT_ALLOWED_ORIGINS', DEFAULT_ALLOWED_ORIGINS)
            ),
            default_origin=getattr(settings, 'CONTACT_DEFAULT_ORIGIN', DEFAULT_ORIGIN),
        )

    @property
    def is_configured(self) -> bool:
        """Both the mail account and its credential are present."""
        return bool(self.email_user and self.email_password)

    @property
    def recipient(self) -> str:
        """Configured recipient, falling back to the sending account."""
        return self.email_to or self.email_user

    @property
    def sender(self) -> str:
        return f'"{self.site_name} Contact Form" <{self.email_user}>'
