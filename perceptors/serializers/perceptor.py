"""
Field level (structural) validation of the hospital form and of the
search criteria.  Nothing here looks at stored state; catalog and
manager existence is checked afterwards by the business validator.
"""
import html

import bleach
from django.core.validators import RegexValidator
from rest_framework import serializers

from perceptors.models import Perceptor


class CleanCharField(serializers.CharField):
    """CharField that strips any markup from the submitted text.

    The result is plain text, so the entities bleach escapes are decoded again.
    """
    def to_internal_value(self, data):
        cleaned = bleach.clean(super().to_internal_value(data), tags=[], strip=True)
        return html.unescape(cleaned).strip()


class CodeField(serializers.CharField):
    """Catalog style code: trimmed and upper-cased."""
    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 10)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return super().to_internal_value(data).upper()


def validate_priority_range(value: str) -> None:
    if not value.isdigit() or not 1 <= int(value) <= 9:
        raise serializers.ValidationError('Priority must be a number between 1 and 9.', code='out_of_range')


specialty_format = RegexValidator(
    r'^[A-Z0-9]{1,10}$', 'Specialty codes are 1 to 10 letters or digits.', code='invalid_format'
)
tax_id_format = RegexValidator(
    r'^[A-HJNP-SUVW]\d{7}[0-9A-J]$', 'Enter a valid tax identification code (e.g. Q2866004A).', code='invalid_format'
)
# Spanish postal codes: province prefix 01-52.
postal_code_format = RegexValidator(
    r'^(0[1-9]|[1-4]\d|5[0-2])\d{3}$', 'Enter a valid 5 digit postal code.', code='invalid_format'
)
phone_format = RegexValidator(r'^[6-9]\d{8}$', 'Enter a 9 digit phone number.', code='invalid_format')


class HospitalDetailsSerializer(serializers.Serializer):
    taxId = CodeField(validators=[tax_id_format])
    address = CleanCharField(max_length=200)
    city = CleanCharField(max_length=80, required=False, allow_blank=True, default='')
    postalCode = serializers.CharField(max_length=5, validators=[postal_code_format])
    phone = serializers.CharField(max_length=9, required=False, allow_blank=True, default='')
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    bedCount = serializers.IntegerField(min_value=0, max_value=10000, required=False, allow_null=True, default=None)

    def validate_phone(self, v):
        if v:
            phone_format(v)
        return v


class HospitalSerializer(serializers.Serializer):
    """The hospital create/edit form.

    Identity (category, code) and status are not part of the form; if a
    client sends them they are ignored.
    """
    name = CleanCharField(min_length=2, max_length=120)
    priority = CodeField(max_length=1, validators=[validate_priority_range])
    specialty = CodeField(validators=[specialty_format])
    activity = CodeField(required=False, allow_blank=True, default='')
    lineOfBusiness = CodeField(required=False, allow_blank=True, default='')
    # Absent keeps the current owner on update; null unassigns.
    manager = CodeField(required=False, allow_blank=True, allow_null=True)
    details = HospitalDetailsSerializer()
    # Version the client loaded, to reject lost updates.
    version = serializers.IntegerField(min_value=1, required=False)


class SearchCriteriaSerializer(serializers.Serializer):
    # Accepted for compatibility; the server always searches its own category.
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=10)
    manager = CodeField(required=False, allow_blank=True, allow_null=True)
    name = CleanCharField(required=False, allow_blank=True, max_length=120)
    code = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    codeFrom = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    codeTo = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    status = serializers.ChoiceField(
        choices=[s for s, _ in Perceptor.STATUS_CHOICES], required=False, allow_blank=True, allow_null=True
    )
    priority = CodeField(required=False, allow_blank=True, allow_null=True)
    specialty = CodeField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        lo, hi = attrs.get('codeFrom'), attrs.get('codeTo')
        if lo is not None and hi is not None and lo > hi:
            raise serializers.ValidationError(
                {'codeTo': 'Must be greater than or equal to codeFrom.'}, code='invalid_range'
            )
        return attrs
