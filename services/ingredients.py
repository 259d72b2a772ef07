"""
Ingredient Ledger Service

CRUD for purchased ingredients plus restocking. Changing an ingredient's
lot pricing re-costs every recipe that uses it.
"""

import logging

from constants import MAX_LENGTHS, MAX_QUANTITY, PURCHASE_UNITS
from models import Ingredient, RecipeIngredient, db

from .conversion import normalize_unit
from .errors import NotFoundError, ValidationError
from .fields import name_matches, non_negative, positive, require_name
from .recipes import refresh_for_ingredient

logger = logging.getLogger(__name__)

PRICING_FIELDS = ('purchase_unit', 'purchase_price', 'purchase_quantity')


def get_all():
    """Return all ingredients sorted alphabetically by name."""
    return Ingredient.query.order_by(Ingredient.name).all()


def get(ingredient_id):
    """Return an ingredient or raise NotFoundError."""
    ingredient = db.session.get(Ingredient, ingredient_id)
    if ingredient is None:
        raise NotFoundError(f'Ingredient {ingredient_id} not found')
    return ingredient


def get_by_name(name):
    """Case-insensitive lookup by name, or None."""
    if not name:
        return None
    return Ingredient.query.filter(name_matches(Ingredient.name, name)).first()


def _purchase_unit(value):
    unit = normalize_unit(value)
    if unit not in PURCHASE_UNITS:
        raise ValidationError(
            f"Invalid purchase unit: {value}. Use one of {', '.join(sorted(PURCHASE_UNITS))}",
            field='purchase_unit',
        )
    return unit


def _check_unique_name(name, exclude_id=None):
    existing = get_by_name(name)
    if existing and existing.id != exclude_id:
        raise ValidationError(f'An ingredient named "{name}" already exists', field='name')


def create(fields):
    """Register a new ingredient and return it."""
    name = require_name(fields.get('name'), max_length=MAX_LENGTHS['ingredient_name'])
    _check_unique_name(name)

    ingredient = Ingredient(
        name=name,
        purchase_unit=_purchase_unit(fields.get('purchase_unit')),
        purchase_price=non_negative(fields.get('purchase_price'), 'purchase_price'),
        purchase_quantity=positive(fields.get('purchase_quantity', 1), 'purchase_quantity', max_val=MAX_QUANTITY),
        stock=non_negative(fields.get('stock'), 'stock', max_val=MAX_QUANTITY),
    )
    db.session.add(ingredient)
    db.session.commit()
    logger.info("Created ingredient %s (%s)", ingredient.name, ingredient.purchase_unit)
    return ingredient


def get_or_create(name, unit):
    """Return the ingredient named `name`, adding an unpriced one if missing. Caller commits."""
    ingredient = get_by_name(name)
    if ingredient:
        return ingredient, False
    ingredient = Ingredient(
        name=require_name(name, max_length=MAX_LENGTHS['ingredient_name']),
        purchase_unit=_purchase_unit(unit),
        purchase_price=0.0,
        purchase_quantity=1.0,
        stock=0.0,
    )
    db.session.add(ingredient)
    db.session.flush()
    return ingredient, True


def update(ingredient_id, fields):
    """Apply a partial update. Pricing changes re-cost dependent recipes."""
    ingredient = get(ingredient_id)

    changes = {}
    if 'name' in fields:
        name = require_name(fields['name'], max_length=MAX_LENGTHS['ingredient_name'])
        if name.lower() != ingredient.name.lower():
            _check_unique_name(name, exclude_id=ingredient.id)
        changes['name'] = name
    if 'purchase_unit' in fields:
        changes['purchase_unit'] = _purchase_unit(fields['purchase_unit'])
    if 'purchase_price' in fields:
        changes['purchase_price'] = non_negative(fields['purchase_price'], 'purchase_price')
    if 'purchase_quantity' in fields:
        changes['purchase_quantity'] = positive(fields['purchase_quantity'], 'purchase_quantity', max_val=MAX_QUANTITY)
    if 'stock' in fields:
        changes['stock'] = non_negative(fields['stock'], 'stock', max_val=MAX_QUANTITY)

    for key, value in changes.items():
        setattr(ingredient, key, value)

    if any(key in changes for key in PRICING_FIELDS):
        refresh_for_ingredient(ingredient.id)

    db.session.commit()
    return ingredient


def restock(ingredient_id, quantity, purchase_price=None, purchase_quantity=None):
    """
    Add `quantity` purchase units to stock.

    When a new lot price is given, it replaces the current pricing and
    dependent recipes are re-costed.
    """
    ingredient = get(ingredient_id)
    quantity = positive(quantity, 'quantity', max_val=MAX_QUANTITY)

    repriced = purchase_price is not None
    if repriced:
        lot_price = non_negative(purchase_price, 'purchase_price')
        lot_quantity = positive(
            purchase_quantity if purchase_quantity is not None else quantity,
            'purchase_quantity', max_val=MAX_QUANTITY,
        )
        ingredient.purchase_price = lot_price
        ingredient.purchase_quantity = lot_quantity

    # SQL-side increment so concurrent restocks and productions don't clobber each other
    ingredient.stock = Ingredient.stock + quantity
    db.session.flush()
    if repriced:
        refresh_for_ingredient(ingredient.id)
    db.session.commit()
    logger.info("Restocked %s with %s %s", ingredient.name, quantity, ingredient.purchase_unit)
    return ingredient


def delete(ingredient_id):
    """Delete an ingredient that no recipe uses."""
    ingredient = get(ingredient_id)
    in_use = RecipeIngredient.query.filter_by(ingredient_id=ingredient.id).count()
    if in_use:
        raise ValidationError(
            f'"{ingredient.name}" is used by {in_use} recipe line(s) and cannot be deleted'
        )
    db.session.delete(ingredient)
    db.session.commit()
