from datetime import date

import pytest

from models import Ingredient, Product, ProductionEvent, Recipe, db
from services import production
from services.errors import InsufficientStockError, NotFoundError, ValidationError


@pytest.fixture
def cake(make_ingredient, make_recipe):
    flour = make_ingredient('Farinha de Trigo', 'kg', purchase_price=6.0, purchase_quantity=1, stock=5)
    eggs = make_ingredient('Ovo', 'un', purchase_price=12.0, purchase_quantity=12, stock=30)
    milk = make_ingredient('Leite', 'l', purchase_price=5.0, purchase_quantity=1, stock=2)
    recipe = make_recipe('Bolo de Fubá', lines=[(flour, 300, 'g'), (eggs, 4, 'un'), (milk, 250, 'ml')])
    return recipe, flour, eggs, milk


def test_produce_decrements_ingredients_in_purchase_units(app, cake, make_product):
    recipe, flour, eggs, milk = cake
    slice_ = make_product('Fatia de Bolo', recipe=recipe)
    whole = make_product('Bolo Inteiro', recipe=recipe)

    event = production.produce(recipe.id, 3)

    assert db.session.get(Ingredient, flour.id).stock == pytest.approx(5 - 0.9)
    assert db.session.get(Ingredient, eggs.id).stock == pytest.approx(30 - 12)
    assert db.session.get(Ingredient, milk.id).stock == pytest.approx(2 - 0.75)
    assert db.session.get(Recipe, recipe.id).stock == 3
    assert db.session.get(Product, slice_.id).stock == 3
    assert db.session.get(Product, whole.id).stock == 3

    events = ProductionEvent.query.all()
    assert len(events) == 1
    assert events[0].id == event.id
    assert events[0].quantity == 3
    assert events[0].recipe_name == 'Bolo de Fubá'
    assert events[0].produced_on == date.today()


@pytest.mark.parametrize('batch_count', [0, -1, 1.5, 'dois', None, True])
def test_invalid_batch_count_changes_nothing(app, cake, make_product, batch_count):
    recipe, flour, _, _ = cake
    slice_ = make_product('Fatia de Bolo', recipe=recipe)
    with pytest.raises(ValidationError):
        production.produce(recipe.id, batch_count)
    assert db.session.get(Ingredient, flour.id).stock == pytest.approx(5)
    assert db.session.get(Recipe, recipe.id).stock == 0
    assert db.session.get(Product, slice_.id).stock == 0
    assert ProductionEvent.query.count() == 0


def test_unknown_recipe(app):
    with pytest.raises(NotFoundError):
        production.produce(999, 1)


def test_shortage_names_ingredient_and_changes_nothing(app, make_ingredient, make_recipe):
    flour = make_ingredient('Farinha de Trigo', 'g', purchase_price=6.0, purchase_quantity=1000, stock=250)
    sugar = make_ingredient('Açúcar', 'g', stock=1000)
    recipe = make_recipe('Pão Doce', lines=[(flour, 300, 'g'), (sugar, 100, 'g')])

    with pytest.raises(InsufficientStockError) as exc_info:
        production.produce(recipe.id, 1)

    error = exc_info.value
    assert [s.name for s in error.shortages] == ['Farinha de Trigo']
    assert error.shortages[0].available == pytest.approx(250)
    assert error.shortages[0].required == pytest.approx(300)
    assert 'Farinha de Trigo (available: 250 g, required: 300 g)' in str(error)

    assert db.session.get(Ingredient, flour.id).stock == pytest.approx(250)
    assert db.session.get(Ingredient, sugar.id).stock == pytest.approx(1000)
    assert db.session.get(Recipe, recipe.id).stock == 0
    assert ProductionEvent.query.count() == 0


def test_shortage_lists_every_short_ingredient(app, make_ingredient, make_recipe):
    flour = make_ingredient('Farinha de Trigo', 'kg', stock=0.1)
    butter = make_ingredient('Manteiga', 'g', stock=10)
    recipe = make_recipe('Biscoito', lines=[(flour, 500, 'g'), (butter, 200, 'g')])

    with pytest.raises(InsufficientStockError) as exc_info:
        production.produce(recipe.id, 2)

    shortages = {s.name: s for s in exc_info.value.shortages}
    assert set(shortages) == {'Farinha de Trigo', 'Manteiga'}
    assert shortages['Farinha de Trigo'].required == pytest.approx(1.0)
    assert shortages['Farinha de Trigo'].unit == 'kg'
    assert shortages['Manteiga'].required == pytest.approx(400)


def test_exact_stock_is_enough(app, make_ingredient, make_recipe):
    cream = make_ingredient('Creme de Leite', 'g', stock=600)
    recipe = make_recipe('Mousse', lines=[(cream, 200, 'g')])

    production.produce(recipe.id, 3)

    assert db.session.get(Ingredient, cream.id).stock == pytest.approx(0)


def test_repeated_lines_for_one_ingredient_are_summed(app, make_ingredient, make_recipe):
    butter = make_ingredient('Manteiga', 'g', stock=30)
    recipe = make_recipe('Torta', lines=[(butter, 20, 'g'), (butter, 15, 'g')])

    with pytest.raises(InsufficientStockError) as exc_info:
        production.produce(recipe.id, 1)
    assert exc_info.value.shortages[0].required == pytest.approx(35)


def test_products_of_other_recipes_are_untouched(app, cake, make_recipe, make_product):
    recipe, _, _, _ = cake
    other = make_recipe('Pudim')
    pudding = make_product('Pudim', recipe=other, stock=4)

    production.produce(recipe.id, 1)

    assert db.session.get(Product, pudding.id).stock == 4


def test_history_is_newest_first_and_filterable(app, cake, make_recipe):
    recipe, _, _, _ = cake
    other = make_recipe('Pudim')
    first = production.produce(recipe.id, 1)
    second = production.produce(other.id, 2)

    assert [e.id for e in production.get_history()] == [second.id, first.id]
    assert [e.id for e in production.get_history(recipe.id)] == [first.id]


def test_events_are_immutable(app, cake):
    recipe, _, _, _ = cake
    event = production.produce(recipe.id, 1)

    event.quantity = 10
    with pytest.raises(ValueError):
        db.session.flush()
    db.session.rollback()

    assert db.session.get(ProductionEvent, event.id).quantity == 1


def test_history_survives_recipe_deletion(app, cake):
    from services import recipes

    recipe, _, _, _ = cake
    production.produce(recipe.id, 2)
    recipes.delete(recipe.id)

    events = production.get_history()
    assert len(events) == 1
    assert events[0].recipe_name == 'Bolo de Fubá'


def test_last_of_an_ingredient_can_be_used_up(app, make_ingredient, make_recipe):
    cream = make_ingredient('Creme de Leite', 'kg', purchase_price=30.0, purchase_quantity=1, stock=0.7)
    mousse = make_recipe('Mousse', lines=[(cream, 400, 'g')])
    pave = make_recipe('Pavê', lines=[(cream, 300, 'g')])

    production.produce(mousse.id, 1)
    production.produce(pave.id, 1)

    assert db.session.get(Ingredient, cream.id).stock == pytest.approx(0, abs=1e-9)
    assert ProductionEvent.query.count() == 2
    with pytest.raises(InsufficientStockError):
        production.produce(pave.id, 1)
