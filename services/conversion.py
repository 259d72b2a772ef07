"""
Unit Conversion Service

Converts a recipe line's quantity into the ingredient's purchase unit so
the ingredient's unit cost can be applied.

Only kg->g and l->ml are known sub-unit pairs. Any other mismatch treats
the requested quantity as already being in purchase units.
"""

import logging

from constants import SUBUNIT_FACTORS, UNIT_MAPPINGS

logger = logging.getLogger(__name__)


def normalize_unit(unit, default='un'):
    """Map user/legacy unit spellings ('L', 'caixa', 'gramas') to a standard unit."""
    if not unit:
        return default
    key = str(unit).strip().lower()
    return UNIT_MAPPINGS.get(key, key)


def to_purchase_quantity(quantity, unit, purchase_unit):
    """
    Express `quantity` of `unit` in `purchase_unit`.

    Args:
        quantity: Amount requested by the recipe line
        unit: Unit of that amount (g, kg, ml, l, un, caixa, ...)
        purchase_unit: Unit the ingredient is bought and stocked in

    Returns:
        The quantity in purchase units; zero for zero or negative input
    """
    if not quantity or quantity <= 0:
        return 0.0

    from_unit = normalize_unit(unit)
    base_unit = normalize_unit(purchase_unit)

    if from_unit == base_unit:
        return float(quantity)

    factor = SUBUNIT_FACTORS.get((base_unit, from_unit))
    if factor:
        return quantity / factor

    logger.warning(
        "No conversion from %s to %s; using quantity %s as-is", from_unit, base_unit, quantity
    )
    return float(quantity)


def resolve_conversion(purchase_unit, unit_cost, quantity, unit):
    """Return the cost of `quantity` `unit` of an ingredient priced at `unit_cost` per `purchase_unit`."""
    if not unit_cost:
        return 0.0
    return unit_cost * to_purchase_quantity(quantity, unit, purchase_unit)


def ingredient_line_cost(ingredient, quantity, unit):
    """Cost of a recipe line for `ingredient`; a missing ingredient costs nothing."""
    if ingredient is None:
        return 0.0
    return resolve_conversion(ingredient.purchase_unit, ingredient.unit_cost, quantity, unit)
