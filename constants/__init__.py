"""
Constants Package

Unit vocabularies, validation limits and bootstrap data.
"""

from .units import (
    PURCHASE_UNITS,
    MEASUREMENT_UNITS,
    UNIT_MAPPINGS,
    SUBUNIT_FACTORS,
)
from .validation import (
    SCHEDULE_STATUSES,
    VALID_SCHEDULE_STATUSES,
    MAX_LENGTHS,
    MAX_PRICE,
    MAX_QUANTITY,
    MAX_MARGIN,
    MAX_BATCHES,
    ALLOWED_EXTENSIONS,
)
from .recipes import BOOTSTRAP_RECIPES
