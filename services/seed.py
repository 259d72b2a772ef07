"""
Bootstrap Recipe Seeding

Loads BOOTSTRAP_RECIPES into the database: missing ingredients are created
unpriced, existing recipes get their lines replaced, and every recipe is
costed and priced the same way an edit through the recipe service would be.
"""

import logging

from constants import BOOTSTRAP_RECIPES
from models import Recipe, RecipeIngredient, db

from .conversion import normalize_unit
from .cost import recalculate_recipe
from .ingredients import get_or_create
from .pricing import apply_prices
from .recipes import get_by_name
from .settings import get_pricing_defaults

logger = logging.getLogger(__name__)


def seed_recipes(recipes=None):
    """
    Create or update the standard recipes.

    Recipes are processed in order, so a sub-recipe must be listed before
    the recipes that use it.

    Returns:
        Tuple of (created, updated) recipe counts
    """
    recipes = BOOTSTRAP_RECIPES if recipes is None else recipes
    defaults = get_pricing_defaults()
    created = updated = 0

    for data in recipes:
        recipe = get_by_name(data['name'])
        if recipe is None:
            recipe = Recipe(name=data['name'], instructions='', stock=0)
            db.session.add(recipe)
            created += 1
        else:
            updated += 1

        lines = []
        for name, quantity, unit in data['ingredients']:
            unit = normalize_unit(unit)
            ingredient, was_created = get_or_create(name, unit)
            if was_created:
                logger.info("Seed created ingredient %s (%s)", ingredient.name, unit)
            lines.append(RecipeIngredient(ingredient=ingredient, quantity=float(quantity), unit=unit))
        recipe.ingredients = lines

        sub_recipe, portions = None, 0.0
        if data.get('sub_recipe'):
            sub_name, portions = data['sub_recipe']
            sub_recipe = get_by_name(sub_name)
            if sub_recipe is None:
                logger.warning("Sub-recipe %s for %s not found; skipped", sub_name, data['name'])
                portions = 0.0
        recipe.sub_recipe = sub_recipe
        recipe.sub_recipe_portions = float(portions)

        recipe.yield_description = str(data['yield'])
        recipe.additional_costs = 0.0
        recipe.margin = defaults['default_margin']

        recalculate_recipe(recipe)
        apply_prices(recipe, recipe.total_cost)
        db.session.flush()

    db.session.commit()
    logger.info("Seeded recipes: %s created, %s updated", created, updated)
    return created, updated
