"""
Contact Form Serializers

Normalizes and validates contact form submissions before they are relayed.
"""
import re

from rest_framework import serializers
from rest_framework.fields import empty


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]{2,}$', re.IGNORECASE)
PHONE_PATTERN = re.compile(r'^[+()0-9\s-]{6,}$')

PROJECT_TYPES = frozenset({'Branding', 'Business Website', 'Web-App', 'Beratung'})
BUDGETS = frozenset({'< 1k', '1k–3k', '3k–7k', '7k–15k', '15k+'})

HONEYPOT_FIELD = 'website'

HEADER_LINE_BREAKS = re.compile(r'[\r\n]+')


def as_text(value):
    """Text form of a JSON value, spelled the way a browser would send it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ','.join('' if item is None else as_text(item) for item in value)
    if isinstance(value, dict):
        return '[object Object]'
    return str(value)


def normalize_text(value, max_length=None):
    """
    Coerce a raw JSON value to trimmed text, cut to ``max_length``.

    Missing and falsy values become an empty string.
    """
    text = as_text(value).strip() if value else ''
    if max_length is not None and len(text) > max_length:
        text = text[:max_length]
    return text


def is_honeypot_filled(data):
    """True when the hidden trap field carries any non-blank text."""
    value = data.get(HONEYPOT_FIELD)
    return isinstance(value, str) and bool(value.strip())


class NormalizedCharField(serializers.Field):
    """
    Text field that trims and silently truncates instead of rejecting.

    Every rule failure reports the field's single ``invalid`` message.
    """

    default_error_messages = {
        'invalid': 'Invalid value.',
    }

    def __init__(self, max_length=None, min_length=0, **kwargs):
        self.max_length = max_length
        self.min_length = min_length
        kwargs.setdefault('required', False)
        super().__init__(**kwargs)

    def run_validation(self, data=empty):
        value = self.to_internal_value(None if data is empty else data)
        if len(value) < self.min_length:
            self.fail('invalid')
        return value

    def to_internal_value(self, data):
        return normalize_text(data, self.max_length)

    def to_representation(self, value):
        return value


class NormalizedChoiceField(NormalizedCharField):
    """Normalized text that must be one of a fixed set of values."""

    def __init__(self, choices, **kwargs):
        self.choices = frozenset(choices)
        super().__init__(**kwargs)

    def run_validation(self, data=empty):
        value = super().run_validation(data)
        if value not in self.choices:
            self.fail('invalid')
        return value


class ConsentField(serializers.Field):
    """Accepts only the JSON literal ``true``."""

    default_error_messages = {
        'invalid': 'Consent required.',
    }

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(**kwargs)

    def run_validation(self, data=empty):
        if data is not True:
            self.fail('invalid')
        return True

    def to_internal_value(self, data):
        return data is True

    def to_representation(self, value):
        return bool(value)


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Fields are declared in the order they are checked; ``first_error``
    reports the earliest failing one.
    """

    name = NormalizedCharField(
        max_length=80,
        min_length=2,
        error_messages={'invalid': 'Name must be at least 2 characters long.'}
    )

    email = NormalizedCharField(
        max_length=140,
        min_length=1,
        error_messages={'invalid': 'Invalid email address.'}
    )

    company = NormalizedCharField(max_length=80)

    subject = NormalizedCharField(
        max_length=120,
        min_length=3,
        error_messages={'invalid': 'Subject is too short.'}
    )

    projectType = NormalizedChoiceField(
        choices=PROJECT_TYPES,
        error_messages={'invalid': 'Please choose a project type.'}
    )

    budget = NormalizedChoiceField(
        choices=BUDGETS,
        error_messages={'invalid': 'Please choose a budget.'}
    )

    phone = NormalizedCharField(
        max_length=40,
        error_messages={'invalid': 'Phone number looks invalid.'}
    )

    message = NormalizedCharField(
        max_length=5000,
        min_length=20,
        error_messages={'invalid': 'Message must be at least 20 characters long.'}
    )

    consent = ConsentField(
        error_messages={'invalid': 'Please confirm the privacy policy.'}
    )

    def validate_email(self, value):
        if not EMAIL_PATTERN.match(value):
            self.fields['email'].fail('invalid')
        return value

    def validate_phone(self, value):
        """Phone is optional, but must look like a number when given."""
        if value and not PHONE_PATTERN.match(value):
            self.fields['phone'].fail('invalid')
        return value

    def first_error(self):
        """
        Return ``(field_name, message)`` for the first failing field.

        Must be called after ``is_valid()``. Returns ``(None, None)`` when
        the submission is valid.
        """
        for field_name, messages in self.errors.items():
            return field_name, str(messages[0])
        return None, None

    def build_mail_subject(self):
        """Single-line subject; line breaks in subject or name become spaces."""
        data = self.validated_data
        subject = HEADER_LINE_BREAKS.sub(' ', data['subject'])
        name = HEADER_LINE_BREAKS.sub(' ', data['name'])
        return f"Contact: {subject} — {name}"

    def build_mail_text(self, site_name):
        """Plain-text mail body with labeled fields in a fixed order."""
        data = self.validated_data
        return '\n'.join([
            f"New contact request ({site_name})",
            "",
            f"Name: {data['name']}",
            f"Email: {data['email']}",
            f"Company: {data['company'] or '-'}",
            f"Phone: {data['phone'] or '-'}",
            f"Subject: {data['subject']}",
            f"Project type: {data['projectType']}",
            f"Budget: {data['budget']}",
            "",
            "Message:",
            data['message'],
        ])
