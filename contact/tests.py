"""
Tests for the contact relay endpoint
"""
import json

import pytest
from rest_framework import status

from contact.views import (
    ContactFormSubmitView,
    MESSAGE_BAD_REQUEST,
    MESSAGE_HONEYPOT,
    MESSAGE_NOT_CONFIGURED,
    MESSAGE_SEND_FAILED,
    MESSAGE_SENT,
)

CONTACT_URL = '/api/contact'


class TestPreflight:
    """Test the CORS preflight response."""

    def test_allowed_origin_is_echoed(self, api_client):
        response = api_client.options(CONTACT_URL, HTTP_ORIGIN='https://www.hexel-tech.de')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response['Access-Control-Allow-Origin'] == 'https://www.hexel-tech.de'

    def test_unknown_origin_gets_default(self, api_client):
        """Test requesters off the allow-list never see their own origin."""
        response = api_client.options(CONTACT_URL, HTTP_ORIGIN='https://evil.example')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response['Access-Control-Allow-Origin'] == 'https://hexel-tech.de'

    def test_missing_origin_gets_default(self, api_client):
        response = api_client.options(CONTACT_URL)

        assert response['Access-Control-Allow-Origin'] == 'https://hexel-tech.de'

    def test_permission_headers(self, api_client):
        response = api_client.options(CONTACT_URL, HTTP_ORIGIN='https://hexel-tech.de')

        assert response['Access-Control-Allow-Methods'] == 'POST, OPTIONS'
        assert response['Access-Control-Allow-Headers'] == 'Content-Type'
        assert response['Access-Control-Max-Age'] == '86400'
        assert 'Origin' in response['Vary']
        assert response.content == b''

    def test_preflight_is_idempotent(self, api_client):
        first = api_client.options(CONTACT_URL, HTTP_ORIGIN='https://hexel-node1.vercel.app')
        second = api_client.options(CONTACT_URL, HTTP_ORIGIN='https://hexel-node1.vercel.app')

        assert first.status_code == second.status_code
        assert first['Access-Control-Allow-Origin'] == second['Access-Control-Allow-Origin']

    def test_allow_list_from_settings(self, api_client, settings):
        settings.CONTACT_ALLOWED_ORIGINS = ['http://localhost:3000']
        settings.CONTACT_DEFAULT_ORIGIN = 'https://fallback.example'

        allowed = api_client.options(CONTACT_URL, HTTP_ORIGIN='http://localhost:3000')
        denied = api_client.options(CONTACT_URL, HTTP_ORIGIN='https://hexel-tech.de')

        assert allowed['Access-Control-Allow-Origin'] == 'http://localhost:3000'
        assert denied['Access-Control-Allow-Origin'] == 'https://fallback.example'


class TestContactFormSubmission:
    """Test public contact form submission through the URL conf."""

    def test_submit_valid_contact_form(self, api_client, mail_settings, mailoutbox, valid_submission):
        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'message': MESSAGE_SENT}
        assert len(mailoutbox) == 1

        sent = mailoutbox[0]
        assert sent.reply_to == ['a@b.co']
        assert sent.to == ['inbox@hexel-tech.de']
        assert sent.from_email == '"HEXEL tech Contact Form" <relay@hexel-tech.de>'
        assert sent.subject == 'Contact: Hi there — Al'
        assert 'Name: Al' in sent.body
        assert 'Company: -' in sent.body

    def test_line_breaks_in_subject_are_relayed(self, api_client, mail_settings, mailoutbox, valid_submission):
        valid_submission.update({'subject': 'Hi\nthere', 'name': 'Al\r\nBundy'})

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1
        assert mailoutbox[0].subject == 'Contact: Hi there — Al Bundy'
        assert 'Subject: Hi\nthere' in mailoutbox[0].body

    def test_trailing_slash_accepted(self, api_client, mail_settings, mailoutbox, valid_submission):
        response = api_client.post(CONTACT_URL + '/', valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1

    def test_recipient_falls_back_to_sender_account(self, api_client, mail_settings, mailoutbox, valid_submission):
        mail_settings.CONTACT_EMAIL_TO = ''

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert mailoutbox[0].to == ['relay@hexel-tech.de']

    def test_invalid_email(self, api_client, mail_settings, mailoutbox, valid_submission):
        valid_submission['email'] = 'not-an-email'

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': 'Invalid email address.'}
        assert mailoutbox == []

    def test_consent_false(self, api_client, mail_settings, mailoutbox, valid_submission):
        valid_submission['consent'] = False

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': 'Please confirm the privacy policy.'}
        assert mailoutbox == []

    def test_first_failing_field_reported(self, api_client, mail_settings, valid_submission):
        valid_submission.update({'subject': 'x', 'budget': 'unknown', 'consent': False})

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': 'Subject is too short.'}

    def test_missing_mail_credentials(self, api_client, settings, mailoutbox, valid_submission):
        settings.EMAIL_HOST_USER = ''
        settings.EMAIL_HOST_PASSWORD = ''

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'message': MESSAGE_NOT_CONFIGURED}
        assert MESSAGE_NOT_CONFIGURED != MESSAGE_SEND_FAILED
        assert mailoutbox == []

    def test_missing_password_only(self, api_client, mail_settings, mailoutbox, valid_submission):
        mail_settings.EMAIL_HOST_PASSWORD = ''

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'message': MESSAGE_NOT_CONFIGURED}

    def test_cors_headers_on_submission(self, api_client, mail_settings, mailoutbox, valid_submission):
        response = api_client.post(
            CONTACT_URL,
            valid_submission,
            format='json',
            HTTP_ORIGIN='https://hexel-node1.vercel.app',
        )

        assert response['Access-Control-Allow-Origin'] == 'https://hexel-node1.vercel.app'
        assert response['Access-Control-Allow-Methods'] == 'POST, OPTIONS'


class TestRequestParsing:
    """Test handling of request bodies that are not a JSON object."""

    def test_invalid_json(self, api_client, mailoutbox):
        response = api_client.post(CONTACT_URL, data='{"name": "Al",', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': MESSAGE_BAD_REQUEST}
        assert mailoutbox == []

    def test_empty_body(self, api_client):
        response = api_client.post(CONTACT_URL, data='', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': MESSAGE_BAD_REQUEST}

    def test_json_sent_as_text_plain(self, api_client, mail_settings, mailoutbox, valid_submission):
        """Test simple cross-origin posts without a JSON content type."""
        response = api_client.post(
            CONTACT_URL,
            data=json.dumps(valid_submission),
            content_type='text/plain;charset=UTF-8',
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1

    @pytest.mark.parametrize('constant', ['NaN', 'Infinity', '-Infinity'])
    def test_non_standard_json_constants_rejected(self, api_client, mail_settings, mailoutbox, valid_submission, constant):
        body = json.dumps(valid_submission).replace('"name": "Al"', f'"name": {constant}')

        response = api_client.post(CONTACT_URL, data=body, content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': MESSAGE_BAD_REQUEST}
        assert mailoutbox == []

    def test_oversized_body(self, api_client, settings, mailoutbox, valid_submission):
        settings.DATA_UPLOAD_MAX_MEMORY_SIZE = 100
        valid_submission['message'] = 'x' * 500

        response = api_client.post(
            CONTACT_URL,
            valid_submission,
            format='json',
            HTTP_ORIGIN='https://www.hexel-tech.de',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': MESSAGE_BAD_REQUEST}
        assert response['Access-Control-Allow-Origin'] == 'https://www.hexel-tech.de'
        assert mailoutbox == []

    def test_json_array_fails_on_name(self, api_client):
        response = api_client.post(CONTACT_URL, data='[1, 2, 3]', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': 'Name must be at least 2 characters long.'}


class TestHoneypot:
    """Test the hidden spam trap field."""

    def test_filled_honeypot_mimics_success(self, api_client, mail_settings, mailoutbox, valid_submission):
        valid_submission['website'] = 'http://spam.example'

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'message': MESSAGE_HONEYPOT}
        assert mailoutbox == []

    def test_honeypot_skips_validation(self, api_client, mailoutbox):
        response = api_client.post(
            CONTACT_URL,
            {'website': 'bot', 'email': 'not-an-email'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'message': MESSAGE_HONEYPOT}
        assert mailoutbox == []

    def test_honeypot_skips_configuration_check(self, api_client, settings, valid_submission):
        settings.EMAIL_HOST_USER = ''
        valid_submission['website'] = 'filled'

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK

    def test_blank_honeypot_is_ignored(self, api_client, mail_settings, mailoutbox, valid_submission):
        valid_submission['website'] = '   '

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'message': MESSAGE_SENT}
        assert len(mailoutbox) == 1

    def test_non_string_honeypot_is_ignored(self, api_client, mail_settings, mailoutbox, valid_submission):
        valid_submission['website'] = 42

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.json() == {'message': MESSAGE_SENT}
        assert len(mailoutbox) == 1


class TestInjectedCollaborators:
    """Test the view with an explicit config and a stand-in mailer."""

    def _post(self, request_factory, view, payload, **extra):
        request = request_factory.post(CONTACT_URL, payload, format='json', **extra)
        return view(request)

    def test_dispatch_uses_injected_mailer(self, request_factory, relay_config, recording_mailer, valid_submission):
        view = ContactFormSubmitView.as_view(config=relay_config, mailer=recording_mailer)

        response = self._post(request_factory, view, valid_submission)

        assert response.status_code == status.HTTP_200_OK
        assert len(recording_mailer.sent) == 1
        sent = recording_mailer.sent[0]
        assert sent['reply_to'] == 'a@b.co'
        assert sent['recipient'] == 'inbox@hexel-tech.de'
        assert sent['sender'] == '"HEXEL tech Contact Form" <relay@hexel-tech.de>'
        assert sent['body'].startswith('New contact request (HEXEL tech)\n')

    def test_dispatch_failure(self, request_factory, relay_config, failing_mailer, valid_submission):
        view = ContactFormSubmitView.as_view(config=relay_config, mailer=failing_mailer)

        response = self._post(request_factory, view, valid_submission)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'message': MESSAGE_SEND_FAILED}

    def test_dispatch_failure_is_logged(self, request_factory, relay_config, failing_mailer, valid_submission, caplog):
        view = ContactFormSubmitView.as_view(config=relay_config, mailer=failing_mailer)

        with caplog.at_level('ERROR', logger='contact.views'):
            self._post(request_factory, view, valid_submission)

        assert 'mail dispatch failed' in caplog.text
        assert 'SMTP connection refused' in caplog.text

    def test_missing_configuration_is_logged(self, request_factory, recording_mailer, valid_submission, caplog):
        from contact.config import MailRelayConfig

        view = ContactFormSubmitView.as_view(config=MailRelayConfig(), mailer=recording_mailer)

        with caplog.at_level('ERROR', logger='contact.views'):
            response = self._post(request_factory, view, valid_submission)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'message': MESSAGE_NOT_CONFIGURED}
        assert 'not configured' in caplog.text
        assert recording_mailer.sent == []

    def test_validation_failure_never_dispatches(self, request_factory, relay_config, recording_mailer, valid_submission):
        view = ContactFormSubmitView.as_view(config=relay_config, mailer=recording_mailer)
        valid_submission['message'] = 'too short'

        response = self._post(request_factory, view, valid_submission)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Message must be at least 20 characters long.'}
        assert recording_mailer.sent == []

    def test_injected_allow_list(self, request_factory, recording_mailer, valid_submission):
        from contact.config import MailRelayConfig

        config = MailRelayConfig(
            email_user='relay@example.org',
            email_password='secret',
            allowed_origins=('https://example.org',),
            default_origin='https://example.org',
        )
        view = ContactFormSubmitView.as_view(config=config, mailer=recording_mailer)

        response = self._post(request_factory, view, valid_submission, HTTP_ORIGIN='https://hexel-tech.de')

        assert response['Access-Control-Allow-Origin'] == 'https://example.org'
        assert recording_mailer.sent[0]['recipient'] == 'relay@example.org'
