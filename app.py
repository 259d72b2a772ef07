import logging
import sqlite3

from flask import Flask, jsonify, request
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from config import get_config
from logging_config import configure_logging
from models import db
from services import ingredients, production, products, recipes, schedule, settings
from services.errors import CostingError, ValidationError
from services.fields import non_negative, optional_id
from services.pricing import compute_prices, margin_from_price
from services.seed import seed_recipes
from utils.formatting import format_brl
from utils.image_handler import ImageValidationError

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(get_config())

db.init_app(app)
migrate = Migrate(app, db)
configure_logging(app)

# Register Jinja filter for currency display
app.jinja_env.filters['brl'] = format_brl


# Enable SQLite foreign key enforcement
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _payload():
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


# ============================================
# ERROR HANDLERS
# ============================================

@app.errorhandler(CostingError)
def handle_costing_error(error):
    db.session.rollback()
    return jsonify(error.to_dict()), error.status_code


@app.errorhandler(ImageValidationError)
def handle_image_error(error):
    db.session.rollback()
    return jsonify({'error': str(error), 'field': 'photo'}), 400


@app.errorhandler(SQLAlchemyError)
def handle_store_error(error):
    db.session.rollback()
    logger.error("Database error on %s %s: %s", request.method, request.path, error)
    return jsonify({'error': 'Database error, nothing was saved'}), 500


# ============================================
# INGREDIENTS
# ============================================

@app.route('/api/ingredients', methods=['GET'])
def ingredients_list():
    return jsonify([i.to_dict() for i in ingredients.get_all()])


@app.route('/api/ingredients', methods=['POST'])
def ingredient_add():
    ingredient = ingredients.create(_payload())
    return jsonify(ingredient.to_dict()), 201


@app.route('/api/ingredients/<int:id>', methods=['GET'])
def ingredient_view(id):
    return jsonify(ingredients.get(id).to_dict())


@app.route('/api/ingredients/<int:id>', methods=['PUT'])
def ingredient_edit(id):
    return jsonify(ingredients.update(id, _payload()).to_dict())


@app.route('/api/ingredients/<int:id>', methods=['DELETE'])
def ingredient_delete(id):
    ingredients.delete(id)
    return '', 204


@app.route('/api/ingredients/<int:id>/restock', methods=['POST'])
def ingredient_restock(id):
    data = _payload()
    ingredient = ingredients.restock(
        id,
        data.get('quantity'),
        purchase_price=data.get('purchase_price'),
        purchase_quantity=data.get('purchase_quantity'),
    )
    return jsonify(ingredient.to_dict())


# ============================================
# RECIPES
# ============================================

@app.route('/api/recipes', methods=['GET'])
def recipes_list():
    return jsonify([r.to_dict() for r in recipes.get_all()])


@app.route('/api/recipes', methods=['POST'])
def recipe_add():
    recipe = recipes.create(_payload())
    return jsonify(recipe.to_dict()), 201


@app.route('/api/recipes/<int:id>', methods=['GET'])
def recipe_view(id):
    return jsonify(recipes.get(id).to_dict())


@app.route('/api/recipes/<int:id>', methods=['PUT'])
def recipe_edit(id):
    return jsonify(recipes.update(id, _payload()).to_dict())


@app.route('/api/recipes/<int:id>', methods=['DELETE'])
def recipe_delete(id):
    recipes.delete(id)
    return '', 204


@app.route('/api/recipes/<int:id>/produce', methods=['POST'])
def recipe_produce(id):
    data = _payload()
    production_event = production.produce(id, data.get('batch_count', data.get('quantity')))
    return jsonify(production_event.to_dict()), 201


@app.route('/api/production', methods=['GET'])
def production_history():
    recipe_id = optional_id(request.args.get('recipe_id'), 'recipe_id')
    return jsonify([e.to_dict() for e in production.get_history(recipe_id)])


@app.route('/api/production/<int:id>', methods=['GET'])
def production_view(id):
    return jsonify(production.get_event(id).to_dict())


# ============================================
# PRODUCTS
# ============================================

@app.route('/api/products', methods=['GET'])
def products_list():
    active_only = request.args.get('active') in ('1', 'true')
    return jsonify([p.to_dict() for p in products.get_all(active_only=active_only)])


@app.route('/api/products', methods=['POST'])
def product_add():
    product = products.create(_payload())
    return jsonify(product.to_dict()), 201


@app.route('/api/products/low-stock', methods=['GET'])
def products_low_stock():
    return jsonify([p.to_dict() for p in products.get_low_stock()])


@app.route('/api/products/<int:id>', methods=['GET'])
def product_view(id):
    return jsonify(products.get(id).to_dict())


@app.route('/api/products/<int:id>', methods=['PUT'])
def product_edit(id):
    return jsonify(products.update(id, _payload()).to_dict())


@app.route('/api/products/<int:id>', methods=['DELETE'])
def product_delete(id):
    products.delete(id)
    return '', 204


@app.route('/api/products/<int:id>/photo', methods=['POST'])
def product_upload_photo(id):
    product = products.set_photo(id, request.files.get('photo'))
    return jsonify(product.to_dict())


# ============================================
# PRODUCTION SCHEDULE
# ============================================

@app.route('/api/schedule', methods=['GET'])
def schedule_list():
    start = request.args.get('start')
    end = request.args.get('end')
    if start or end:
        entries = schedule.get_by_week(start, end)
    else:
        entries = schedule.get_all()
    return jsonify([e.to_dict() for e in entries])


@app.route('/api/schedule', methods=['POST'])
def schedule_add():
    entry = schedule.create(_payload())
    return jsonify(entry.to_dict()), 201


@app.route('/api/schedule/<int:id>', methods=['PUT'])
def schedule_edit(id):
    return jsonify(schedule.update(id, _payload()).to_dict())


@app.route('/api/schedule/<int:id>', methods=['DELETE'])
def schedule_delete(id):
    schedule.delete(id)
    return '', 204


@app.route('/api/schedule/<int:id>/complete', methods=['POST'])
def schedule_complete(id):
    entry, production_event = schedule.complete(id)
    return jsonify({'entry': entry.to_dict(), 'production': production_event.to_dict()})


# ============================================
# SETTINGS & PRICING
# ============================================

@app.route('/api/settings', methods=['GET'])
def settings_view():
    return jsonify(settings.get_all())


@app.route('/api/settings', methods=['PUT'])
def settings_edit():
    return jsonify(settings.update(_payload()))


@app.route('/api/pricing/quote', methods=['POST'])
def pricing_quote():
    data = _payload()
    total_cost = non_negative(data.get('total_cost'), 'total_cost')
    margin = non_negative(
        data.get('margin'), 'margin', default=settings.get_pricing_defaults()['default_margin']
    )
    quote = compute_prices(total_cost, margin)
    result = {
        'total_cost': total_cost,
        'margin': margin,
        'sale_price': quote.sale_price,
        'resale_price': quote.resale_price,
    }
    if data.get('sale_price') not in (None, ''):
        result['margin_for_sale_price'] = margin_from_price(
            total_cost, non_negative(data['sale_price'], 'sale_price')
        )
    return jsonify(result)


# ============================================
# INITIALIZE DATABASE
# ============================================

def init_db():
    with app.app_context():
        db.create_all()


@app.cli.command('init-db')
def init_db_command():
    """Create all tables."""
    init_db()
    print('Database initialized.')


@app.cli.command('seed-recipes')
def seed_recipes_command():
    """Create or update the bakery's standard recipes."""
    created, updated = seed_recipes()
    print(f'Recipes seeded: {created} created, {updated} updated.')


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
