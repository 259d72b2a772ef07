"""
Cost Calculation Service

Functions for rolling ingredient line costs, additional costs and a
prorated sub-recipe into a recipe's total cost.
"""

import logging
import re

from .conversion import ingredient_line_cost

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r'^\s*(\d+(?:[.,]\d+)?)')


def parse_yield(yield_description):
    """
    Read the number of portions from a free-text yield.

    '30', '10 fatias' and '2,5 kg' are numeric (30, 10, 2.5).
    Returns None when the text does not start with a number.
    """
    if yield_description is None:
        return None
    if isinstance(yield_description, (int, float)):
        return float(yield_description)
    match = _LEADING_NUMBER.match(str(yield_description))
    if not match:
        return None
    return float(match.group(1).replace(',', '.'))


def calculate_line_cost(line):
    """Cost of one recipe ingredient line, resolved against its ingredient."""
    return ingredient_line_cost(line.ingredient, line.quantity, line.unit)


def prorated_sub_recipe_cost(sub_recipe, portions):
    """
    Cost of `portions` portions of `sub_recipe`.

    Uses the sub-recipe's stored total cost divided by its numeric yield.
    A non-numeric or non-positive yield contributes nothing.
    """
    if sub_recipe is None or not portions or portions <= 0:
        return 0.0
    yield_count = parse_yield(sub_recipe.yield_description)
    if not yield_count or yield_count <= 0:
        logger.warning(
            "Sub-recipe %r has non-numeric yield %r; portion cost ignored",
            sub_recipe.name, sub_recipe.yield_description,
        )
        return 0.0
    return (sub_recipe.total_cost or 0.0) / yield_count * portions


def aggregate_cost(lines, additional_costs=0.0, sub_recipe=None, portions=0):
    """
    Total cost of a recipe.

    Args:
        lines: Iterable of objects with ingredient, quantity and unit
        additional_costs: Flat packaging/gas amount
        sub_recipe: Optional component recipe
        portions: Portions of sub_recipe consumed

    Returns:
        Σ line costs + additional costs + prorated sub-recipe cost
    """
    total = sum(calculate_line_cost(line) for line in lines)
    total += additional_costs or 0.0
    total += prorated_sub_recipe_cost(sub_recipe, portions)
    return total


def recalculate_recipe(recipe):
    """Refresh every cached line cost and the recipe's total_cost. Returns the total."""
    for line in recipe.ingredients:
        line.cost = calculate_line_cost(line)
    recipe.total_cost = aggregate_cost(
        recipe.ingredients,
        recipe.additional_costs,
        recipe.sub_recipe,
        recipe.sub_recipe_portions,
    )
    return recipe.total_cost
