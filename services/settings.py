"""
Settings Service

Key-value settings stored in the settings table, with pricing defaults
falling back to app config when no row exists.
"""

from flask import current_app

from models import Settings, db
from utils.numbers import safe_float
from utils.sanitizer import sanitize_text

from .errors import ValidationError

PRICING_KEYS = ('default_margin', 'default_packaging_cost')
KNOWN_KEYS = PRICING_KEYS + ('bakery_name',)


def get_setting(key, default=None):
    """Return the value for a settings key, or default if not found."""
    row = Settings.query.filter_by(key=key).first()
    return row.value if row else default


def set_setting(key, value):
    """Insert or update a settings key-value pair. Caller commits."""
    row = Settings.query.filter_by(key=key).first()
    if row is None:
        row = Settings(key=key)
        db.session.add(row)
    row.value = None if value is None else str(value)
    return row


def get_pricing_defaults():
    """Default margin and packaging cost applied to new recipes and products."""
    return {
        'default_margin': safe_float(
            get_setting('default_margin'), default=current_app.config['DEFAULT_MARGIN']
        ),
        'default_packaging_cost': safe_float(
            get_setting('default_packaging_cost'), default=current_app.config['DEFAULT_PACKAGING_COST']
        ),
    }


def get_all():
    """All settings as a dict, pricing defaults always present."""
    data = {row.key: row.value for row in Settings.query.order_by(Settings.key).all()}
    data.update(get_pricing_defaults())
    data['resale_discount_factor'] = current_app.config['RESALE_DISCOUNT_FACTOR']
    return data


def update(fields):
    """Store the given settings. Pricing keys must be non-negative numbers."""
    values = {}
    for key, value in fields.items():
        if key in PRICING_KEYS:
            number = safe_float(value, default=None)
            if number is None or number < 0:
                raise ValidationError(f'{key} must be a non-negative number', field=key)
            value = number
        elif key == 'resale_discount_factor':
            raise ValidationError('resale_discount_factor is set in configuration', field=key)
        elif key not in KNOWN_KEYS:
            raise ValidationError(f'Unknown setting: {key}', field=key)
        else:
            value = sanitize_text(value, max_length=200)
        values[key] = value

    for key, value in values.items():
        set_setting(key, value)
    db.session.commit()
    return get_all()
