"""
Recipe Service

CRUD for recipes. Every edit that touches the ingredient lines, additional
costs, margin or sub-recipe re-costs the recipe and re-derives its prices.
Explicit sale/resale prices are stored as overrides and survive edits to
unrelated fields until the next cost- or margin-triggered recompute.
"""

import logging

from constants import MAX_LENGTHS, MAX_MARGIN, MAX_QUANTITY, MEASUREMENT_UNITS
from models import Ingredient, ProductionScheduleEntry, Recipe, RecipeIngredient, db
from utils.numbers import safe_float
from utils.sanitizer import sanitize_instructions, sanitize_text

from .conversion import normalize_unit
from .cost import recalculate_recipe
from .errors import NotFoundError, ValidationError
from .fields import name_matches, non_negative, optional_id, require_name
from .pricing import apply_prices
from .settings import get_pricing_defaults

logger = logging.getLogger(__name__)

# Fields whose change re-costs the recipe and overwrites its prices
COST_FIELDS = ('ingredients', 'additional_costs', 'margin', 'sub_recipe_id', 'sub_recipe_portions')
PRICE_FIELDS = ('sale_price', 'resale_price')

LINE_UNITS = {normalize_unit(unit) for unit in MEASUREMENT_UNITS}


def get_all():
    """Return all recipes sorted alphabetically by name."""
    return Recipe.query.order_by(Recipe.name).all()


def get(recipe_id):
    """Return a recipe or raise NotFoundError."""
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError(f'Recipe {recipe_id} not found')
    return recipe


def get_by_name(name):
    """Case-insensitive lookup by name, or None."""
    if not name:
        return None
    return Recipe.query.filter(name_matches(Recipe.name, name)).first()


def _check_unique_name(name, exclude_id=None):
    existing = get_by_name(name)
    if existing and existing.id != exclude_id:
        raise ValidationError(f'A recipe named "{name}" already exists', field='name')


def _build_lines(raw_lines):
    """RecipeIngredient rows for the submitted lines. Lines without an ingredient or quantity are dropped."""
    if not isinstance(raw_lines, list):
        raise ValidationError('ingredients must be a list', field='ingredients')

    lines = []
    for index, raw in enumerate(raw_lines):
        field = f'ingredients[{index}]'
        if not isinstance(raw, dict):
            raise ValidationError(f'{field} must be an object', field=field)

        ingredient_id = optional_id(raw.get('ingredient_id'), f'{field}.ingredient_id')
        quantity = safe_float(raw.get('quantity'), default=0.0)
        if ingredient_id is None or quantity <= 0:
            continue
        if quantity > MAX_QUANTITY:
            raise ValidationError(f'{field}.quantity must be at most {MAX_QUANTITY}', field=field)

        ingredient = db.session.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise ValidationError(f'Ingredient {ingredient_id} not found', field=f'{field}.ingredient_id')

        unit = normalize_unit(raw.get('unit'), default=ingredient.purchase_unit)
        if unit not in LINE_UNITS and unit != ingredient.purchase_unit:
            raise ValidationError(f'Invalid unit: {raw.get("unit")}', field=f'{field}.unit')

        lines.append(RecipeIngredient(ingredient=ingredient, quantity=quantity, unit=unit))
    return lines


def _resolve_sub_recipe(recipe, sub_recipe_id):
    """The sub-recipe for `recipe`, rejecting self references and cycles."""
    if sub_recipe_id is None:
        return None
    sub_recipe = db.session.get(Recipe, sub_recipe_id)
    if sub_recipe is None:
        raise ValidationError(f'Recipe {sub_recipe_id} not found', field='sub_recipe_id')
    if recipe is not None and recipe.id is not None:
        node = sub_recipe
        while node is not None:
            if node.id == recipe.id:
                raise ValidationError('A recipe cannot use itself as a sub-recipe', field='sub_recipe_id')
            node = node.sub_recipe
    return sub_recipe


def _price_overrides(fields):
    overrides = {}
    for key in PRICE_FIELDS:
        if fields.get(key) not in (None, ''):
            overrides[key] = non_negative(fields[key], key)
    return overrides


def _margin(value, default):
    return non_negative(value, 'margin', default=default, max_val=MAX_MARGIN)


def create(fields):
    """Create a recipe with its ingredient lines, cost and prices."""
    defaults = get_pricing_defaults()

    name = require_name(fields.get('name'), max_length=MAX_LENGTHS['recipe_name'])
    _check_unique_name(name)
    sub_recipe = _resolve_sub_recipe(None, optional_id(fields.get('sub_recipe_id'), 'sub_recipe_id'))
    lines = _build_lines(fields.get('ingredients') or [])
    overrides = _price_overrides(fields)

    recipe = Recipe(
        name=name,
        instructions=sanitize_instructions(fields.get('instructions'), max_length=MAX_LENGTHS['instructions']),
        yield_description=sanitize_text(fields.get('yield_description'), max_length=MAX_LENGTHS['yield_description']),
        additional_costs=non_negative(
            fields.get('additional_costs'), 'additional_costs', default=defaults['default_packaging_cost']
        ),
        margin=_margin(fields.get('margin'), defaults['default_margin']),
        sub_recipe_portions=non_negative(fields.get('sub_recipe_portions'), 'sub_recipe_portions', max_val=MAX_QUANTITY),
        stock=0,
    )
    recipe.sub_recipe = sub_recipe
    recipe.ingredients = lines

    recalculate_recipe(recipe)
    apply_prices(recipe, recipe.total_cost)
    for key, value in overrides.items():
        setattr(recipe, key, value)

    db.session.add(recipe)
    db.session.commit()
    logger.info("Created recipe %s: cost %.2f, sale %.2f", recipe.name, recipe.total_cost, recipe.sale_price)
    return recipe


def update(recipe_id, fields):
    """Apply a partial update; re-cost only when a cost field is present."""
    recipe = get(recipe_id)

    changes = {}
    if 'name' in fields:
        name = require_name(fields['name'], max_length=MAX_LENGTHS['recipe_name'])
        if name.lower() != recipe.name.lower():
            _check_unique_name(name, exclude_id=recipe.id)
        changes['name'] = name
    if 'instructions' in fields:
        changes['instructions'] = sanitize_instructions(fields['instructions'], max_length=MAX_LENGTHS['instructions'])
    if 'yield_description' in fields:
        changes['yield_description'] = sanitize_text(
            fields['yield_description'], max_length=MAX_LENGTHS['yield_description']
        )
    if 'additional_costs' in fields:
        changes['additional_costs'] = non_negative(fields['additional_costs'], 'additional_costs')
    if 'margin' in fields:
        changes['margin'] = _margin(fields['margin'], recipe.margin)
    if 'sub_recipe_portions' in fields:
        changes['sub_recipe_portions'] = non_negative(
            fields['sub_recipe_portions'], 'sub_recipe_portions', max_val=MAX_QUANTITY
        )
    if 'sub_recipe_id' in fields:
        changes['sub_recipe'] = _resolve_sub_recipe(recipe, optional_id(fields['sub_recipe_id'], 'sub_recipe_id'))
    if 'ingredients' in fields:
        changes['ingredients'] = _build_lines(fields['ingredients'] or [])
    overrides = _price_overrides(fields)

    previous_total = recipe.total_cost
    previous_yield = recipe.yield_description

    for key, value in changes.items():
        setattr(recipe, key, value)

    if any(key in fields for key in COST_FIELDS):
        recalculate_recipe(recipe)
        apply_prices(recipe, recipe.total_cost)
    for key, value in overrides.items():
        setattr(recipe, key, value)

    if recipe.total_cost != previous_total or recipe.yield_description != previous_yield:
        _refresh_dependents(recipe)

    db.session.commit()
    return recipe


def delete(recipe_id):
    """Delete a recipe, detaching it from parent recipes, products and the schedule."""
    recipe = get(recipe_id)

    parents = Recipe.query.filter_by(sub_recipe_id=recipe.id).all()
    for parent in parents:
        parent.sub_recipe = None
        parent.sub_recipe_portions = 0.0
    ProductionScheduleEntry.query.filter_by(recipe_id=recipe.id).delete()

    for parent in parents:
        _recost(parent)

    db.session.delete(recipe)
    db.session.commit()
    logger.info("Deleted recipe %s", recipe_id)


def _recost(recipe):
    """Re-cost and re-price a recipe, then every recipe that uses it as a sub-recipe."""
    recalculate_recipe(recipe)
    apply_prices(recipe, recipe.total_cost)
    logger.info("Re-costed recipe %s: cost %.2f", recipe.name, recipe.total_cost)
    _refresh_dependents(recipe)


def _refresh_dependents(recipe):
    for parent in Recipe.query.filter_by(sub_recipe_id=recipe.id).all():
        _recost(parent)


def refresh_for_ingredient(ingredient_id):
    """Re-cost every recipe with a line for `ingredient_id`. Caller commits."""
    recipes = (
        Recipe.query.join(RecipeIngredient, RecipeIngredient.recipe_id == Recipe.id)
        .filter(RecipeIngredient.ingredient_id == ingredient_id)
        .distinct()
        .all()
    )
    for recipe in recipes:
        _recost(recipe)
    return recipes
