"""
Input validation helpers used by serializers and views
"""
import re

from rest_framework import serializers

from .exceptions import BadRequestError
from .models import DEFAULT_Z_INDEX

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
HEX_COLOR_PATTERN = re.compile(r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$')
PHONE_PATTERN = re.compile(r'^[0-9+\s()-]+$')

Z_INDEX_MIN = 0
Z_INDEX_MAX = 100

TRUE_VALUES = ('true', '1', 'yes')


def validate_slug(value):
    if not SLUG_PATTERN.match(value or ''):
        raise serializers.ValidationError(
            'Slug must contain only lowercase letters, numbers, and single hyphens'
        )
    return value


def normalize_color_code(value):
    """Accept #RGB or #RRGGBB and store it upper-cased"""
    if value in (None, ''):
        return None
    if not HEX_COLOR_PATTERN.match(value):
        raise serializers.ValidationError('Color code must be a valid hex color (e.g. #FFFFFF)')
    return value.upper()


def validate_z_index(value):
    if value is None:
        return value
    if value < Z_INDEX_MIN or value > Z_INDEX_MAX:
        raise serializers.ValidationError(
            f'z_index must be between {Z_INDEX_MIN} and {Z_INDEX_MAX}'
        )
    return value


def validate_phone(value):
    value = (value or '').strip()
    if len(value) < 10:
        raise serializers.ValidationError('Phone number must be at least 10 digits')
    if not PHONE_PATTERN.match(value):
        raise serializers.ValidationError('Invalid phone number format')
    return value


def validate_postal_code(value):
    value = (value or '').strip()
    if len(value) < 3:
        raise serializers.ValidationError('Postal code must be at least 3 characters')
    return value


def parse_id_param(value, label='resource'):
    """
    Parse a positive integer id from a URL or query parameter.

    The string must round-trip exactly ("12" is valid, "012", "12abc" and
    "-3" are not).
    """
    text = str(value).strip() if value is not None else ''
    try:
        parsed = int(text)
    except ValueError:
        parsed = None
    if parsed is None or parsed <= 0 or str(parsed) != text:
        raise BadRequestError(f'Invalid {label} ID')
    return parsed


def optional_id_param(query_params, name, label):
    """Like parse_id_param for an optional query string filter"""
    value = query_params.get(name)
    if value in (None, ''):
        return None
    return parse_id_param(value, label)


def sanitize_search(value):
    """Trim a free-text search and strip angle brackets. Empty means no filter."""
    if not value:
        return ''
    return re.sub(r'[<>]', '', value.strip())


def parse_bool_param(value):
    if value is None:
        return None
    return str(value).strip().lower() in TRUE_VALUES


def resolve_z_index(explicit=None, subcategory=None, category=None):
    """Explicit value first, then the subcategory, then the category, then the default"""
    if explicit is not None:
        return explicit
    if subcategory is not None and subcategory.z_index is not None:
        return subcategory.z_index
    if category is not None and category.z_index is not None:
        return category.z_index
    return DEFAULT_Z_INDEX
