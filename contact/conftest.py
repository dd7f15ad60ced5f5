"""
Shared pytest fixtures for contact relay tests.
"""
import pytest
from rest_framework.test import APIClient, APIRequestFactory

from contact.config import MailRelayConfig
from contact.mailer import MailDispatchError


class RecordingMailer:
    """Stand-in mail collaborator that records sends or fails on demand."""

    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send(self, sender, recipient, subject, body, reply_to=None):
        if self.error is not None:
            raise self.error
        self.sent.append({
            'sender': sender,
            'recipient': recipient,
            'subject': subject,
            'body': body,
            'reply_to': reply_to,
        })
        return 1


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def request_factory():
    return APIRequestFactory()


@pytest.fixture
def relay_config():
    return MailRelayConfig(
        email_user='relay@hexel-tech.de',
        email_password='app-password',
        email_to='inbox@hexel-tech.de',
    )


@pytest.fixture
def recording_mailer():
    return RecordingMailer()


@pytest.fixture
def failing_mailer():
    return RecordingMailer(error=MailDispatchError('SMTP connection refused'))


@pytest.fixture
def mail_settings(settings):
    """Configure the relay mail account through Django settings."""
    settings.EMAIL_HOST_USER = 'relay@hexel-tech.de'
    settings.EMAIL_HOST_PASSWORD = 'app-password'
    settings.CONTACT_EMAIL_TO = 'inbox@hexel-tech.de'
    return settings


@pytest.fixture
def valid_submission():
    return {
        'name': 'Al',
        'email': 'a@b.co',
        'subject': 'Hi there',
        'projectType': 'Branding',
        'budget': '< 1k',
        'message': 'x' * 20,
        'consent': True,
    }
