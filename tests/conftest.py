"""
Pytest configuration and shared fixtures for the costing engine tests.
"""
import os

import pytest

os.environ['FLASK_ENV'] = 'testing'

from app import app as flask_app  # noqa: E402
from models import db  # noqa: E402
from services import ingredients, products, recipes  # noqa: E402


@pytest.fixture(scope='function')
def app(tmp_path):
    """App bound to a fresh in-memory database for each test."""
    flask_app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def make_ingredient(app):
    def _make(name='Açúcar', purchase_unit='g', purchase_price=10.0, purchase_quantity=1000, stock=0):
        return ingredients.create({
            'name': name,
            'purchase_unit': purchase_unit,
            'purchase_price': purchase_price,
            'purchase_quantity': purchase_quantity,
            'stock': stock,
        })
    return _make


@pytest.fixture
def make_recipe(app):
    def _make(name='Bolo', lines=(), **fields):
        data = {
            'name': name,
            'ingredients': [
                {'ingredient_id': ingredient.id, 'quantity': quantity, 'unit': unit}
                for ingredient, quantity, unit in lines
            ],
        }
        data.update(fields)
        return recipes.create(data)
    return _make


@pytest.fixture
def make_product(app):
    def _make(name='Fatia de Bolo', recipe=None, **fields):
        data = {'name': name, 'recipe_id': recipe.id if recipe is not None else None}
        data.update(fields)
        return products.create(data)
    return _make
