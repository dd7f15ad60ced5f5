"""
Tests for contact form normalization and validation.
"""
import pytest

from contact.serializers import (
    BUDGETS,
    PROJECT_TYPES,
    ContactFormSubmitSerializer,
    is_honeypot_filled,
    normalize_text,
)


# (field, invalid value, valid value, message) in the order fields are checked
FIELD_RULES = [
    ('name', 'A', 'Al', 'Name must be at least 2 characters long.'),
    ('email', 'not-an-email', 'a@b.co', 'Invalid email address.'),
    ('subject', 'Hi', 'Hi there', 'Subject is too short.'),
    ('projectType', 'Logo', 'Branding', 'Please choose a project type.'),
    ('budget', '1 million', '< 1k', 'Please choose a budget.'),
    ('phone', 'call me maybe', '+49 (0) 30 1234-567', 'Phone number looks invalid.'),
    ('message', 'too short', 'x' * 20, 'Message must be at least 20 characters long.'),
    ('consent', False, True, 'Please confirm the privacy policy.'),
]


def validate(payload):
    serializer = ContactFormSubmitSerializer(data=payload)
    serializer.is_valid()
    return serializer


class TestNormalizeText:

    def test_trims_whitespace(self):
        assert normalize_text('  Al \n') == 'Al'

    def test_falsy_values_become_empty(self):
        for value in (None, '', 0, False, [], {}):
            assert normalize_text(value) == ''

    def test_non_strings_are_stringified(self):
        assert normalize_text(12345) == '12345'

    def test_booleans_spelled_lowercase(self):
        assert normalize_text(True) == 'true'

    def test_lists_joined_with_commas(self):
        assert normalize_text(['Branding']) == 'Branding'
        assert normalize_text(['a', None, 1]) == 'a,,1'

    def test_whole_floats_drop_fraction(self):
        assert normalize_text(2.0) == '2'
        assert normalize_text(2.5) == '2.5'

    def test_objects_use_placeholder(self):
        assert normalize_text({'a': 1}) == '[object Object]'

    def test_truncates_to_exact_prefix(self):
        value = ''.join(chr(ord('a') + i % 26) for i in range(200))
        assert normalize_text(value, 80) == value[:80]

    def test_truncates_after_trimming(self):
        assert normalize_text('   ' + 'b' * 10, 5) == 'bbbbb'

    def test_short_values_untouched(self):
        assert normalize_text('Al', 80) == 'Al'


class TestHoneypotDetection:

    def test_filled(self):
        assert is_honeypot_filled({'website': 'http://spam.example'}) is True

    def test_empty_or_blank(self):
        assert is_honeypot_filled({}) is False
        assert is_honeypot_filled({'website': ''}) is False
        assert is_honeypot_filled({'website': '  \t'}) is False

    def test_non_string(self):
        assert is_honeypot_filled({'website': 1}) is False
        assert is_honeypot_filled({'website': ['x']}) is False


class TestContactFormSubmitSerializer:

    def test_valid_submission(self, valid_submission):
        serializer = validate(valid_submission)

        assert serializer.errors == {}
        assert serializer.first_error() == (None, None)
        assert serializer.validated_data['company'] == ''
        assert serializer.validated_data['phone'] == ''
        assert serializer.validated_data['consent'] is True

    def test_fields_are_trimmed(self, valid_submission):
        valid_submission.update({
            'name': '  Al  ',
            'email': ' a@b.co ',
            'projectType': ' Branding ',
            'budget': '< 1k\n',
        })

        data = validate(valid_submission).validated_data

        assert data['name'] == 'Al'
        assert data['email'] == 'a@b.co'
        assert data['projectType'] == 'Branding'
        assert data['budget'] == '< 1k'

    @pytest.mark.parametrize('field, limit', [
        ('name', 80),
        ('company', 80),
        ('subject', 120),
        ('message', 5000),
    ])
    def test_long_values_are_truncated(self, valid_submission, field, limit):
        value = 'Lorem ipsum dolor sit amet ' * 250
        valid_submission[field] = value

        serializer = validate(valid_submission)

        assert serializer.errors == {}
        assert serializer.validated_data[field] == value.strip()[:limit]

    def test_long_phone_is_truncated(self, valid_submission):
        valid_submission['phone'] = '+49 ' + '1' * 60

        data = validate(valid_submission).validated_data

        assert data['phone'] == ('+49 ' + '1' * 60)[:40]

    def test_email_checked_after_truncation(self, valid_submission):
        valid_submission['email'] = 'a' * 150 + '@example.com'

        assert validate(valid_submission).first_error() == ('email', 'Invalid email address.')

    def test_long_email_within_limit(self, valid_submission):
        email = 'a' * 120 + '@example.com'
        valid_submission['email'] = email

        assert validate(valid_submission).validated_data['email'] == email

    @pytest.mark.parametrize('field, invalid, valid, message', FIELD_RULES)
    def test_each_rule_message(self, valid_submission, field, invalid, valid, message):
        valid_submission[field] = invalid

        assert validate(valid_submission).first_error() == (field, message)

    @pytest.mark.parametrize('position', range(len(FIELD_RULES)))
    def test_first_failure_in_fixed_order(self, position):
        """Every field from ``position`` on is invalid; the earliest is reported."""
        payload = {}
        for index, (field, invalid, valid, _) in enumerate(FIELD_RULES):
            payload[field] = valid if index < position else invalid

        field, _, _, message = FIELD_RULES[position]
        assert validate(payload).first_error() == (field, message)

    def test_empty_payload_fails_on_name(self):
        assert validate({}).first_error() == ('name', 'Name must be at least 2 characters long.')

    def test_missing_fields_treated_as_empty(self, valid_submission):
        del valid_submission['subject']

        assert validate(valid_submission).first_error() == ('subject', 'Subject is too short.')

    @pytest.mark.parametrize('email', ['a@b.co', 'First.Last@Sub.Example.DE', 'x+tag@domain.info'])
    def test_accepted_emails(self, valid_submission, email):
        valid_submission['email'] = email

        assert validate(valid_submission).errors == {}

    @pytest.mark.parametrize('email', ['a@b.c', 'a b@c.de', 'a@@b.de', '@b.de', 'a@b'])
    def test_rejected_emails(self, valid_submission, email):
        valid_submission['email'] = email

        assert validate(valid_submission).first_error()[0] == 'email'

    @pytest.mark.parametrize('phone', ['', '   ', '+49 30 123456', '(030) 123-456', '123456'])
    def test_accepted_phones(self, valid_submission, phone):
        valid_submission['phone'] = phone

        assert validate(valid_submission).errors == {}

    @pytest.mark.parametrize('phone', ['12345', '+49 30 12ab34', '030/123456'])
    def test_rejected_phones(self, valid_submission, phone):
        valid_submission['phone'] = phone

        assert validate(valid_submission).first_error()[0] == 'phone'

    def test_all_project_types_and_budgets_accepted(self, valid_submission):
        for project_type in PROJECT_TYPES:
            for budget in BUDGETS:
                valid_submission.update({'projectType': project_type, 'budget': budget})
                assert validate(valid_submission).errors == {}

    @pytest.mark.parametrize('consent', ['true', 1, 'yes', None])
    def test_consent_must_be_literal_true(self, valid_submission, consent):
        valid_submission['consent'] = consent

        assert validate(valid_submission).first_error() == (
            'consent', 'Please confirm the privacy policy.'
        )

    def test_missing_consent(self, valid_submission):
        del valid_submission['consent']

        assert validate(valid_submission).first_error()[0] == 'consent'

    def test_numeric_name_is_stringified(self, valid_submission):
        valid_submission['name'] = 12345

        assert validate(valid_submission).validated_data['name'] == '12345'


class TestMailContent:

    def test_mail_text_layout(self, valid_submission):
        valid_submission.update({'company': 'ACME GmbH', 'phone': '+49 30 123456'})
        serializer = validate(valid_submission)

        assert serializer.build_mail_text('HEXEL tech') == '\n'.join([
            'New contact request (HEXEL tech)',
            '',
            'Name: Al',
            'Email: a@b.co',
            'Company: ACME GmbH',
            'Phone: +49 30 123456',
            'Subject: Hi there',
            'Project type: Branding',
            'Budget: < 1k',
            '',
            'Message:',
            'x' * 20,
        ])

    def test_optional_fields_shown_as_dash(self, valid_submission):
        text = validate(valid_submission).build_mail_text('HEXEL tech')

        assert 'Company: -' in text
        assert 'Phone: -' in text

    def test_mail_subject(self, valid_submission):
        assert validate(valid_submission).build_mail_subject() == 'Contact: Hi there — Al'

    def test_mail_subject_is_single_line(self, valid_submission):
        valid_submission.update({'subject': 'Hi\r\n\nthere', 'name': 'Al\nBundy'})

        assert validate(valid_submission).build_mail_subject() == 'Contact: Hi there — Al Bundy'

    def test_single_item_list_matches_choice(self, valid_submission):
        valid_submission['projectType'] = ['Branding']

        assert validate(valid_submission).validated_data['projectType'] == 'Branding'
