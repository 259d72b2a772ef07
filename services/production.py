"""
Production Service

Runs "produce N batches of a recipe": checks every ingredient's stock,
then, in one transaction, decrements ingredient stock, adds the batches to
the recipe's and its products' stock and writes a ProductionEvent.

Stock is decremented with a conditional UPDATE (stock >= required), so a
concurrent run that got there first turns into an InsufficientStockError
and a rollback instead of negative stock.
"""

import logging
from collections import OrderedDict
from datetime import date

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from constants import MAX_BATCHES
from models import Ingredient, Product, ProductionEvent, Recipe, atomic, db

from .conversion import to_purchase_quantity
from .errors import InsufficientStockError, NotFoundError, Shortage
from .fields import positive_int

logger = logging.getLogger(__name__)

# Quantities are compared after rounding away float noise (0.1 * 3 -> 0.3)
QUANTITY_PRECISION = 6
QUANTITY_TOLERANCE = 10 ** -QUANTITY_PRECISION


def required_quantities(recipe, batch_count):
    """
    Stock needed per ingredient for `batch_count` batches of `recipe`.

    Returns:
        OrderedDict of ingredient -> quantity in the ingredient's purchase unit.
        Lines for the same ingredient are summed.
    """
    required = OrderedDict()
    for line in recipe.ingredients:
        ingredient = line.ingredient
        if ingredient is None:
            continue
        per_batch = to_purchase_quantity(line.quantity, line.unit, ingredient.purchase_unit)
        required[ingredient] = required.get(ingredient, 0.0) + per_batch * batch_count
    for ingredient, quantity in required.items():
        required[ingredient] = round(quantity, QUANTITY_PRECISION)
    return required


def find_shortages(required):
    """Every ingredient whose stock cannot cover its required quantity."""
    shortages = []
    for ingredient, quantity in required.items():
        available = ingredient.stock or 0.0
        if quantity > round(available, QUANTITY_PRECISION):
            shortages.append(Shortage(ingredient.name, available, quantity, ingredient.purchase_unit))
    return shortages


def run_production(recipe_id, batch_count):
    """
    Apply a production run to the session without committing.

    Callers own the transaction; see produce() and schedule.complete().

    Raises:
        ValidationError: batch_count is not a positive whole number
        NotFoundError: recipe does not exist
        InsufficientStockError: one or more ingredients are short
    """
    batch_count = positive_int(batch_count, 'batch_count', max_val=MAX_BATCHES)

    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError(f'Recipe {recipe_id} not found')

    # Lock the ingredient rows where the backend supports it
    ingredient_ids = [line.ingredient_id for line in recipe.ingredients]
    if ingredient_ids:
        (
            db.session.query(Ingredient)
            .filter(Ingredient.id.in_(ingredient_ids))
            .populate_existing()
            .with_for_update()
            .all()
        )

    required = required_quantities(recipe, batch_count)
    shortages = find_shortages(required)
    if shortages:
        raise InsufficientStockError(shortages)

    for ingredient, quantity in required.items():
        result = db.session.execute(
            update(Ingredient)
            .where(Ingredient.id == ingredient.id, Ingredient.stock >= quantity - QUANTITY_TOLERANCE)
            .values(stock=db.func.round(Ingredient.stock - quantity, QUANTITY_PRECISION))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.session.refresh(ingredient)
            raise InsufficientStockError(
                [Shortage(ingredient.name, ingredient.stock, quantity, ingredient.purchase_unit)]
            )

    db.session.execute(
        update(Recipe)
        .where(Recipe.id == recipe.id)
        .values(stock=db.func.coalesce(Recipe.stock, 0) + batch_count)
        .execution_options(synchronize_session=False)
    )
    db.session.execute(
        update(Product)
        .where(Product.recipe_id == recipe.id)
        .values(stock=db.func.coalesce(Product.stock, 0) + batch_count)
        .execution_options(synchronize_session=False)
    )

    event = ProductionEvent(
        recipe_id=recipe.id,
        recipe_name=recipe.name,
        quantity=batch_count,
        produced_on=date.today(),
    )
    db.session.add(event)
    db.session.flush()
    return event


def produce(recipe_id, batch_count):
    """
    Produce `batch_count` batches of a recipe atomically.

    Returns:
        The ProductionEvent written for the run

    Raises:
        ValidationError, NotFoundError, InsufficientStockError: nothing was changed
        SQLAlchemyError: store failure; the transaction was rolled back
    """
    try:
        with atomic():
            event = run_production(recipe_id, batch_count)
    except SQLAlchemyError:
        logger.exception("Production of recipe %s rolled back", recipe_id)
        raise
    logger.info("Produced %s batch(es) of %s", event.quantity, event.recipe_name)
    return event


def get_history(recipe_id=None):
    """Production events, newest first, optionally for one recipe."""
    query = ProductionEvent.query
    if recipe_id is not None:
        query = query.filter_by(recipe_id=recipe_id)
    return query.order_by(ProductionEvent.produced_on.desc(), ProductionEvent.id.desc()).all()


def get_event(event_id):
    """Return a production event or raise NotFoundError."""
    event = db.session.get(ProductionEvent, event_id)
    if event is None:
        raise NotFoundError(f'Production event {event_id} not found')
    return event
