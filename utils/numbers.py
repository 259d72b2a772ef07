"""
Numeric Input Parsing

Lenient parsers for form/JSON values, accepting pt-BR decimal commas.
"""

import math


def _to_number_text(value):
    if isinstance(value, str):
        value = value.strip().replace('R$', '').strip()
        # "1.234,56" -> "1234.56"; "2,5" -> "2.5"
        if ',' in value:
            value = value.replace('.', '').replace(',', '.')
    return value


def safe_float(value, default=0.0, min_val=None, max_val=None):
    """Safely parse a float value with optional bounds."""
    if value is None or value == '':
        return default
    try:
        result = float(_to_number_text(value))
    except (ValueError, TypeError):
        return default
    if not math.isfinite(result):
        return default
    if min_val is not None:
        result = max(min_val, result)
    if max_val is not None:
        result = min(max_val, result)
    return result


def safe_int(value, default=1, min_val=None, max_val=None):
    """Safely parse an integer value with optional bounds."""
    if value is None or value == '':
        return default
    try:
        result = int(value)
    except (ValueError, TypeError, OverflowError):
        return default
    if min_val is not None:
        result = max(min_val, result)
    if max_val is not None:
        result = min(max_val, result)
    return result
