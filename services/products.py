"""
Product Service

CRUD for sellable products. A product copies its recipe's total cost when
the recipe is assigned and prices itself from that cost; later recipe
changes are not pushed to the product until it is re-saved with recipe_id.
"""

import logging

from flask import current_app

from constants import ALLOWED_EXTENSIONS, MAX_LENGTHS, MAX_MARGIN, MAX_QUANTITY
from models import Product, Recipe, db
from utils.image_handler import remove_photo, save_product_photo
from utils.sanitizer import sanitize_text

from .errors import NotFoundError, ValidationError
from .fields import flag, non_negative, optional_id, require_name
from .pricing import apply_prices
from .settings import get_pricing_defaults

logger = logging.getLogger(__name__)

COST_FIELDS = ('recipe_id', 'production_cost', 'additional_costs', 'margin')
PRICE_FIELDS = ('sale_price', 'resale_price')


def get_all(active_only=False):
    """Return products sorted by name, optionally only the active ones."""
    query = Product.query
    if active_only:
        query = query.filter_by(active=True)
    return query.order_by(Product.name).all()


def get(product_id):
    """Return a product or raise NotFoundError."""
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f'Product {product_id} not found')
    return product


def get_low_stock():
    """Active products whose stock is at or below their minimum."""
    return (
        Product.query.filter(Product.active.is_(True), Product.min_stock > 0, Product.stock <= Product.min_stock)
        .order_by(Product.name)
        .all()
    )


def _recipe(recipe_id):
    if recipe_id is None:
        return None
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None:
        raise ValidationError(f'Recipe {recipe_id} not found', field='recipe_id')
    return recipe


def _stock(value, field):
    return int(non_negative(value, field, max_val=MAX_QUANTITY))


def _price_overrides(fields):
    overrides = {}
    for key in PRICE_FIELDS:
        if fields.get(key) not in (None, ''):
            overrides[key] = non_negative(fields[key], key)
    return overrides


def total_cost(product):
    """Production cost plus the product's own additional costs."""
    return (product.production_cost or 0.0) + (product.additional_costs or 0.0)


def create(fields):
    """Create a product, copying cost from its recipe when one is given."""
    defaults = get_pricing_defaults()

    name = require_name(fields.get('name'), max_length=MAX_LENGTHS['product_name'])
    recipe = _recipe(optional_id(fields.get('recipe_id'), 'recipe_id'))
    production_cost = (
        recipe.total_cost if recipe is not None
        else non_negative(fields.get('production_cost'), 'production_cost')
    )
    overrides = _price_overrides(fields)

    product = Product(
        name=name,
        description=sanitize_text(fields.get('description'), max_length=MAX_LENGTHS['description']),
        recipe=recipe,
        production_cost=production_cost,
        additional_costs=non_negative(
            fields.get('additional_costs'), 'additional_costs', default=defaults['default_packaging_cost']
        ),
        margin=non_negative(fields.get('margin'), 'margin', default=defaults['default_margin'], max_val=MAX_MARGIN),
        active=flag(fields.get('active'), default=True),
        stock=_stock(fields.get('stock'), 'stock'),
        min_stock=_stock(fields.get('min_stock'), 'min_stock'),
    )
    apply_prices(product, total_cost(product))
    for key, value in overrides.items():
        setattr(product, key, value)

    db.session.add(product)
    db.session.commit()
    logger.info("Created product %s: cost %.2f, sale %.2f", product.name, total_cost(product), product.sale_price)
    return product


def update(product_id, fields):
    """
    Apply a partial update.

    Sending recipe_id (even unchanged) re-copies the recipe's current cost.
    Cost, additional-cost or margin changes re-derive both prices.
    """
    product = get(product_id)

    changes = {}
    if 'name' in fields:
        changes['name'] = require_name(fields['name'], max_length=MAX_LENGTHS['product_name'])
    if 'description' in fields:
        changes['description'] = sanitize_text(fields['description'], max_length=MAX_LENGTHS['description'])
    if 'production_cost' in fields:
        changes['production_cost'] = non_negative(fields['production_cost'], 'production_cost')
    if 'recipe_id' in fields:
        recipe = _recipe(optional_id(fields['recipe_id'], 'recipe_id'))
        changes['recipe'] = recipe
        if recipe is not None:
            changes['production_cost'] = recipe.total_cost
    if 'additional_costs' in fields:
        changes['additional_costs'] = non_negative(fields['additional_costs'], 'additional_costs')
    if 'margin' in fields:
        changes['margin'] = non_negative(fields['margin'], 'margin', max_val=MAX_MARGIN)
    if 'active' in fields:
        changes['active'] = flag(fields['active'])
    if 'stock' in fields:
        changes['stock'] = _stock(fields['stock'], 'stock')
    if 'min_stock' in fields:
        changes['min_stock'] = _stock(fields['min_stock'], 'min_stock')
    overrides = _price_overrides(fields)

    for key, value in changes.items():
        setattr(product, key, value)

    if any(key in fields for key in COST_FIELDS):
        apply_prices(product, total_cost(product))
    for key, value in overrides.items():
        setattr(product, key, value)

    db.session.commit()
    return product


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def set_photo(product_id, file_storage):
    """
    Validate, re-encode and store an uploaded product photo.

    Raises:
        ValidationError: No file or a disallowed extension
        ImageValidationError: The file is not a safe image
    """
    product = get(product_id)

    if file_storage is None or not file_storage.filename:
        raise ValidationError('No image selected', field='photo')
    if not allowed_file(file_storage.filename):
        raise ValidationError('Invalid file type. Use PNG, JPG, GIF, or WEBP.', field='photo')

    upload_folder = current_app.config['UPLOAD_FOLDER']
    filename = save_product_photo(file_storage, upload_folder, product.id)
    if product.photo != filename:
        remove_photo(upload_folder, product.photo)

    product.photo = filename
    db.session.commit()
    return product


def delete(product_id):
    """Delete a product and its photo file."""
    product = get(product_id)
    remove_photo(current_app.config['UPLOAD_FOLDER'], product.photo)
    db.session.delete(product)
    db.session.commit()
