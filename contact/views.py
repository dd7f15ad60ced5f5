"""
Contact Relay Views

Public endpoint that validates a contact form submission and relays it
to the site owner by email.
"""
import logging
from collections.abc import Mapping

from django.core.exceptions import RequestDataTooBig
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.utils import json
from rest_framework.views import APIView

from .config import MailRelayConfig
from .cors import cors_headers, get_request_origin
from .mailer import ContactMailer, MailDispatchError
from .serializers import ContactFormSubmitSerializer, is_honeypot_filled

logger = logging.getLogger(__name__)


MESSAGE_BAD_REQUEST = 'Invalid request (JSON).'
MESSAGE_HONEYPOT = 'Thanks! We will get back to you shortly.'
MESSAGE_NOT_CONFIGURED = 'Mail configuration missing (server).'
MESSAGE_SENT = 'Thanks! Your message was sent successfully.'
MESSAGE_SEND_FAILED = 'Failed to send the message.'


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    OPTIONS /api/contact   CORS preflight
    POST    /api/contact   validate and relay a submission

    No authentication required. Pass ``config`` or ``mailer`` to
    ``as_view()`` to replace the settings-derived defaults.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    config = None
    mailer = None

    def get_config(self):
        if self.config is None:
            self.config = MailRelayConfig.from_settings()
        return self.config

    def get_mailer(self):
        if self.mailer is None:
            return ContactMailer(self.get_config())
        return self.mailer

    def finalize_response(self, request, response, *args, **kwargs):
        """Attach CORS headers to every response from this endpoint."""
        response = super().finalize_response(request, response, *args, **kwargs)
        config = self.get_config()
        headers = cors_headers(
            get_request_origin(request),
            config.allowed_origins,
            config.default_origin,
        )
        for name, value in headers.items():
            response[name] = value
        return response

    def options(self, request, *args, **kwargs):
        """CORS preflight: no body, permission headers only."""
        return Response(status=status.HTTP_204_NO_CONTENT)

    def post(self, request):
        """Submit a contact form."""
        # Body is read as JSON whatever the Content-Type header says
        try:
            data = json.loads(request.body)
        except (ValueError, RequestDataTooBig) as exc:
            logger.info(f"Rejected contact submission with unreadable body: {exc}")
            return self._reply(MESSAGE_BAD_REQUEST, status.HTTP_400_BAD_REQUEST)

        if not isinstance(data, Mapping):
            data = {}

        # Honeypot hits get the ordinary thank-you response
        if is_honeypot_filled(data):
            logger.info("Contact submission dropped by honeypot")
            return self._reply(MESSAGE_HONEYPOT, status.HTTP_200_OK)

        serializer = ContactFormSubmitSerializer(data=data)
        if not serializer.is_valid():
            field_name, message = serializer.first_error()
            logger.info(f"Contact submission rejected on field '{field_name}'")
            return self._reply(message, status.HTTP_400_BAD_REQUEST)

        config = self.get_config()
        if not config.is_configured:
            logger.error("Contact relay mail account not configured: EMAIL_USER / EMAIL_PASS missing")
            return self._reply(MESSAGE_NOT_CONFIGURED, status.HTTP_500_INTERNAL_SERVER_ERROR)

        reply_to = serializer.validated_data['email']
        try:
            self.get_mailer().send(
                sender=config.sender,
                recipient=config.recipient,
                subject=serializer.build_mail_subject(),
                body=serializer.build_mail_text(config.site_name),
                reply_to=reply_to,
            )
        except MailDispatchError:
            logger.exception("Contact relay mail dispatch failed")
            return self._reply(MESSAGE_SEND_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

        logger.info(f"Contact submission relayed to {config.recipient}")
        return self._reply(MESSAGE_SENT, status.HTTP_200_OK)

    @staticmethod
    def _reply(message, status_code):
        return Response({'message': message}, status=status_code)
