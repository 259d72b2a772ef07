import io
import os

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

from models import Product, db
from services import products, recipes
from services.errors import ValidationError
from utils.image_handler import ImageValidationError


@pytest.fixture
def cake(make_ingredient, make_recipe):
    sugar = make_ingredient('Açúcar', 'g', purchase_price=10.0, purchase_quantity=1000)
    return make_recipe('Bolo', lines=[(sugar, 500, 'g')], additional_costs=2.0)


def _png_upload(filename='bolo.png'):
    buffer = io.BytesIO()
    Image.new('RGB', (64, 48), (200, 120, 80)).save(buffer, 'PNG')
    buffer.seek(0)
    return FileStorage(stream=buffer, filename=filename, content_type='image/png')


def test_product_copies_recipe_cost(app, cake, make_product):
    product = make_product('Fatia', recipe=cake, additional_costs=1.0, margin=100)

    assert product.production_cost == pytest.approx(7.0)
    assert product.sale_price == pytest.approx(16.0)
    assert product.resale_price == pytest.approx(12.8)


def test_product_without_recipe_uses_given_cost(app, make_product):
    product = make_product('Brigadeiro', production_cost=1.5, margin=100)
    assert product.production_cost == pytest.approx(1.5)
    assert product.sale_price == pytest.approx(3.0)


def test_recipe_cost_changes_are_not_pushed_until_resaved(app, cake, make_product):
    product = make_product('Fatia', recipe=cake, margin=0)

    recipes.update(cake.id, {'additional_costs': 5.0})
    assert db.session.get(Product, product.id).production_cost == pytest.approx(7.0)

    products.update(product.id, {'recipe_id': cake.id})
    product = db.session.get(Product, product.id)
    assert product.production_cost == pytest.approx(10.0)
    assert product.sale_price == pytest.approx(10.0)


def test_price_override_survives_stock_and_active_edits(app, cake, make_product):
    product = make_product('Fatia', recipe=cake)

    products.update(product.id, {'sale_price': 20.0})
    products.update(product.id, {'stock': 5, 'active': 'false'})

    product = db.session.get(Product, product.id)
    assert product.sale_price == pytest.approx(20.0)
    assert product.stock == 5
    assert product.active is False


def test_unknown_recipe_is_rejected(app, make_product):
    with pytest.raises(ValidationError):
        products.create({'name': 'Fatia', 'recipe_id': 99})


def test_low_stock(app, make_product):
    make_product('Brigadeiro', stock=2, min_stock=5)
    make_product('Beijinho', stock=10, min_stock=5)
    make_product('Cajuzinho', stock=0, min_stock=0)
    make_product('Olho de Sogra', stock=1, min_stock=3, active=False)

    assert [p.name for p in products.get_low_stock()] == ['Brigadeiro']


def test_active_only_listing(app, make_product):
    make_product('Brigadeiro')
    make_product('Beijinho', active=False)

    assert [p.name for p in products.get_all(active_only=True)] == ['Brigadeiro']
    assert len(products.get_all()) == 2


def test_set_photo_stores_reencoded_jpeg(app, make_product):
    product = make_product('Brigadeiro')

    product = products.set_photo(product.id, _png_upload())

    assert product.photo == f'product_{product.id}.jpg'
    path = os.path.join(app.config['UPLOAD_FOLDER'], product.photo)
    with Image.open(path) as img:
        assert img.format == 'JPEG'


def test_set_photo_rejects_bad_extension(app, make_product):
    product = make_product('Brigadeiro')
    with pytest.raises(ValidationError):
        products.set_photo(product.id, _png_upload('bolo.exe'))


def test_set_photo_rejects_non_image(app, make_product):
    product = make_product('Brigadeiro')
    upload = FileStorage(stream=io.BytesIO(b'not an image'), filename='bolo.png')
    with pytest.raises(ImageValidationError):
        products.set_photo(product.id, upload)


def test_delete_removes_photo(app, make_product):
    product = make_product('Brigadeiro')
    product = products.set_photo(product.id, _png_upload())
    path = os.path.join(app.config['UPLOAD_FOLDER'], product.photo)

    products.delete(product.id)

    assert not os.path.exists(path)
    assert Product.query.count() == 0
