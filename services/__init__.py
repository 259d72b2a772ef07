"""
Services Package

Business logic for the confectionery costing engine.
"""

from .errors import (
    CostingError,
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    Shortage,
)

from .conversion import (
    normalize_unit,
    to_purchase_quantity,
    resolve_conversion,
)

from .cost import (
    parse_yield,
    aggregate_cost,
    recalculate_recipe,
)

from .pricing import (
    PriceQuote,
    compute_prices,
    margin_from_price,
)

from .production import (
    produce,
    get_history,
)

from .seed import seed_recipes

__all__ = [
    # Errors
    'CostingError',
    'ValidationError',
    'NotFoundError',
    'InsufficientStockError',
    'Shortage',
    # Conversion
    'normalize_unit',
    'to_purchase_quantity',
    'resolve_conversion',
    # Cost
    'parse_yield',
    'aggregate_cost',
    'recalculate_recipe',
    # Pricing
    'PriceQuote',
    'compute_prices',
    'margin_from_price',
    # Production
    'produce',
    'get_history',
    # Seeding
    'seed_recipes',
]
