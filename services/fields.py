"""
Field Validation Helpers

Turn raw JSON/form values into validated engine inputs, raising
ValidationError with the offending field name.
"""

import math
from datetime import date

from constants import MAX_PRICE
from utils.numbers import safe_float, safe_int
from utils.sanitizer import sanitize_name

from .errors import ValidationError


def require_name(value, field='name', max_length=200):
    """Sanitized, non-empty name."""
    name = sanitize_name(value, max_length=max_length)
    if not name:
        raise ValidationError(f'{field} is required', field=field)
    return name


def name_matches(column, name):
    """Case-insensitive equality on `column`; % and _ in `name` match literally."""
    pattern = name.strip().replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return column.ilike(pattern, escape='\\')


def non_negative(value, field, default=0.0, max_val=MAX_PRICE):
    """A number >= 0; missing values take `default`."""
    if value is None or value == '':
        return default
    number = safe_float(value, default=None)
    if number is None or not math.isfinite(number) or number < 0:
        raise ValidationError(f'{field} must be a non-negative number', field=field)
    if number > max_val:
        raise ValidationError(f'{field} must be at most {max_val}', field=field)
    return number


def positive(value, field, max_val=MAX_PRICE):
    """A number > 0."""
    number = safe_float(value, default=None)
    if number is None or not math.isfinite(number) or number <= 0:
        raise ValidationError(f'{field} must be greater than zero', field=field)
    if number > max_val:
        raise ValidationError(f'{field} must be at most {max_val}', field=field)
    return number


def positive_int(value, field, max_val=None):
    """A whole number > 0."""
    if isinstance(value, bool) or isinstance(value, float) and not value.is_integer():
        raise ValidationError(f'{field} must be a positive whole number', field=field)
    number = safe_int(value, default=None)
    if number is None or number <= 0:
        raise ValidationError(f'{field} must be a positive whole number', field=field)
    if max_val is not None and number > max_val:
        raise ValidationError(f'{field} must be at most {max_val}', field=field)
    return number


def optional_id(value, field):
    """An integer id, or None for empty input."""
    if value is None or value == '':
        return None
    number = safe_int(value, default=None)
    if number is None:
        raise ValidationError(f'{field} must be an id', field=field)
    return number


def parse_date(value, field):
    """An ISO YYYY-MM-DD date."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a date (YYYY-MM-DD)', field=field)


def flag(value, default=False):
    """Boolean from JSON true/false or form '1'/'true'/'0'/'false'."""
    if value is None or value == '':
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)
