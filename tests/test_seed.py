import pytest

from constants import BOOTSTRAP_RECIPES
from models import Ingredient, Recipe
from services import ingredients, recipes
from services.seed import seed_recipes


def test_seed_creates_every_recipe(app):
    created, updated = seed_recipes()

    assert (created, updated) == (len(BOOTSTRAP_RECIPES), 0)
    assert Recipe.query.count() == len(BOOTSTRAP_RECIPES)

    cup = recipes.get_by_name('Copo da Felicidade')
    assert cup.sub_recipe.name == 'Base de Brownie'
    assert cup.sub_recipe_portions == pytest.approx(5)
    assert cup.yield_description == '7'


def test_seed_is_idempotent(app):
    seed_recipes()
    ingredient_count = Ingredient.query.count()

    created, updated = seed_recipes()

    assert (created, updated) == (0, len(BOOTSTRAP_RECIPES))
    assert Ingredient.query.count() == ingredient_count
    assert len(recipes.get_by_name('Banoffee').ingredients) == 8


def test_seed_prices_from_existing_ingredient_costs(app):
    ingredients.create({'name': 'Ovo', 'purchase_unit': 'un', 'purchase_price': 12.0, 'purchase_quantity': 12})
    ingredients.create({'name': 'Açúcar', 'purchase_unit': 'kg', 'purchase_price': 5.0, 'purchase_quantity': 1})

    seed_recipes()

    base = recipes.get_by_name('Base de Brownie')
    # 4 eggs at 1.00 plus 360 g of sugar at 5.00/kg
    assert base.total_cost == pytest.approx(4.0 + 1.8)
    assert base.sale_price == pytest.approx(base.total_cost * 1.35)
    assert base.resale_price == pytest.approx(base.sale_price * 0.80)

    cup = recipes.get_by_name('Copo da Felicidade')
    assert cup.total_cost == pytest.approx(base.total_cost / 30 * 5)


def test_seed_cli(runner):
    result = runner.invoke(args=['seed-recipes'])
    assert 'created' in result.output
    assert Recipe.query.count() == len(BOOTSTRAP_RECIPES)
