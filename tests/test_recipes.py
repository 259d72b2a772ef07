import pytest

from models import Product, Recipe, RecipeIngredient, db
from services import ingredients, recipes
from services.errors import NotFoundError, ValidationError


@pytest.fixture
def sugar(make_ingredient):
    return make_ingredient('Açúcar', 'g', purchase_price=10.0, purchase_quantity=1000, stock=5000)


def test_cost_and_prices_on_create(app, sugar, make_recipe):
    recipe = make_recipe('Calda', lines=[(sugar, 500, 'g')], additional_costs=2.0, margin=35)

    assert recipe.total_cost == pytest.approx(7.00)
    assert recipe.sale_price == pytest.approx(9.45)
    assert recipe.resale_price == pytest.approx(7.56)
    assert recipe.ingredients[0].cost == pytest.approx(5.00)


def test_settings_defaults_apply_to_new_recipes(app, sugar, make_recipe):
    recipe = make_recipe('Calda', lines=[(sugar, 100, 'g')])
    assert recipe.margin == pytest.approx(35)
    assert recipe.additional_costs == pytest.approx(0)


def test_blank_and_zero_lines_are_dropped(app, sugar):
    recipe = recipes.create({
        'name': 'Calda',
        'ingredients': [
            {'ingredient_id': sugar.id, 'quantity': 100, 'unit': 'g'},
            {'ingredient_id': '', 'quantity': 50, 'unit': 'g'},
            {'ingredient_id': sugar.id, 'quantity': 0, 'unit': 'g'},
        ],
    })
    assert len(recipe.ingredients) == 1


def test_line_unit_defaults_to_purchase_unit(app, make_ingredient):
    flour = make_ingredient('Farinha', 'kg', purchase_price=6.0, purchase_quantity=1)
    recipe = recipes.create({'name': 'Pão', 'ingredients': [{'ingredient_id': flour.id, 'quantity': 2}]})
    assert recipe.ingredients[0].unit == 'kg'
    assert recipe.total_cost == pytest.approx(12.0)


def test_invalid_line_unit(app, sugar):
    with pytest.raises(ValidationError):
        recipes.create({'name': 'Calda', 'ingredients': [{'ingredient_id': sugar.id, 'quantity': 1, 'unit': 'xícara'}]})


def test_unknown_ingredient_in_line(app):
    with pytest.raises(ValidationError):
        recipes.create({'name': 'Calda', 'ingredients': [{'ingredient_id': 42, 'quantity': 1, 'unit': 'g'}]})


def test_duplicate_name_is_rejected(app, make_recipe):
    make_recipe('Pudim')
    with pytest.raises(ValidationError):
        make_recipe('pudim')


def test_wildcard_characters_in_names_match_literally(app, make_recipe):
    make_recipe('Torta 100% Chocolate')
    tart = make_recipe('Torta 100%')
    assert recipes.get_by_name('torta 100%').id == tart.id
    assert recipes.get_by_name('Torta_100%') is None


@pytest.mark.parametrize('margin', ['nan', 'inf', float('nan')])
def test_non_finite_margin_is_rejected(app, margin):
    with pytest.raises(ValidationError):
        recipes.create({'name': 'Pudim', 'ingredients': [], 'margin': margin})
    assert Recipe.query.count() == 0


def test_name_is_required(app):
    with pytest.raises(ValidationError):
        recipes.create({'name': '   ', 'ingredients': []})


def test_get_unknown_recipe(app):
    with pytest.raises(NotFoundError):
        recipes.get(123)


def test_editing_lines_recomputes_cost_and_prices(app, sugar, make_recipe):
    recipe = make_recipe('Calda', lines=[(sugar, 500, 'g')], margin=35)

    updated = recipes.update(recipe.id, {
        'ingredients': [{'ingredient_id': sugar.id, 'quantity': 1000, 'unit': 'g'}],
    })

    assert updated.total_cost == pytest.approx(10.0)
    assert updated.sale_price == pytest.approx(13.5)
    assert RecipeIngredient.query.count() == 1


def test_price_override_survives_unrelated_edits(app, sugar, make_recipe):
    recipe = make_recipe('Calda', lines=[(sugar, 500, 'g')], margin=35)

    recipes.update(recipe.id, {'sale_price': 15.0, 'resale_price': 12.0})
    recipes.update(recipe.id, {'name': 'Calda de Açúcar', 'instructions': 'Ferver.'})

    recipe = db.session.get(Recipe, recipe.id)
    assert recipe.sale_price == pytest.approx(15.0)
    assert recipe.resale_price == pytest.approx(12.0)

    recipes.update(recipe.id, {'margin': 50})
    recipe = db.session.get(Recipe, recipe.id)
    assert recipe.sale_price == pytest.approx(7.5)
    assert recipe.resale_price == pytest.approx(6.0)


def test_ingredient_repricing_recosts_recipes(app, sugar, make_recipe):
    recipe = make_recipe('Calda', lines=[(sugar, 500, 'g')], margin=0)

    ingredients.update(sugar.id, {'purchase_price': 20.0})

    recipe = db.session.get(Recipe, recipe.id)
    assert recipe.total_cost == pytest.approx(10.0)
    assert recipe.ingredients[0].cost == pytest.approx(10.0)
    assert recipe.sale_price == pytest.approx(10.0)


def test_sub_recipe_is_prorated_and_refreshed(app, sugar, make_recipe):
    base = make_recipe('Base de Brownie', lines=[(sugar, 3000, 'g')], yield_description='30')
    cup = make_recipe('Copo da Felicidade', sub_recipe_id=base.id, sub_recipe_portions=5)

    assert base.total_cost == pytest.approx(30.0)
    assert cup.total_cost == pytest.approx(5.0)

    recipes.update(base.id, {'additional_costs': 30.0})
    assert db.session.get(Recipe, cup.id).total_cost == pytest.approx(10.0)

    recipes.update(base.id, {'yield_description': '60 porções'})
    assert db.session.get(Recipe, cup.id).total_cost == pytest.approx(5.0)


def test_sub_recipe_cycles_are_rejected(app, make_recipe):
    first = make_recipe('Primeira')
    second = make_recipe('Segunda', sub_recipe_id=first.id, sub_recipe_portions=1)

    with pytest.raises(ValidationError):
        recipes.update(first.id, {'sub_recipe_id': second.id})
    with pytest.raises(ValidationError):
        recipes.update(first.id, {'sub_recipe_id': first.id})


def test_delete_detaches_parents_and_products(app, sugar, make_recipe, make_product):
    base = make_recipe('Base', lines=[(sugar, 3000, 'g')], yield_description='30')
    cup = make_recipe('Copo', sub_recipe_id=base.id, sub_recipe_portions=5)
    product = make_product('Copo', recipe=base)

    recipes.delete(base.id)

    cup = db.session.get(Recipe, cup.id)
    assert cup.sub_recipe_id is None
    assert cup.total_cost == pytest.approx(0.0)
    assert db.session.get(Product, product.id).recipe_id is None
    assert RecipeIngredient.query.count() == 0
