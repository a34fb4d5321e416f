import random
from datetime import datetime

from cachelib import SimpleCache

from conftest import FakeInventoryApi
from services.draft_editor import (
    AddVariant,
    SetCategory,
    SetName,
    SetPendingColor,
    SetPendingImage,
    SetPrice,
    SetStock,
    SetSubcategory,
    apply_edits,
)
from services.inventory_store import CREATED, FAILED, INVALID, InventoryStore
from services.models import CategoryRef, DraftEditor, DraftProduct

IMAGE = 'data:image/png;base64,AAA'


def _blue_shirt_editor():
    return apply_edits(DraftEditor(), [
        SetName('Blue Shirt'),
        SetPrice(20),
        SetStock(5),
        SetCategory('c1'),
        SetSubcategory('Casual'),
        SetPendingColor('Blue'),
        SetPendingImage(IMAGE),
        AddVariant(),
    ])


def test_end_to_end_create_posts_once_and_resolves_category():
    api = FakeInventoryApi(categories=[{'id': 'c1', 'name': 'Shirts'}])
    store = InventoryStore(api, SimpleCache())
    assert store.products() == []

    outcome = store.create_product(_blue_shirt_editor(), now_ms=1718000000123, rng=random.Random(0))

    assert outcome.status == CREATED
    assert len(api.calls_to('create_product')) == 1
    products = store.products()
    assert len(products) == 1
    assert products[0].category == CategoryRef(id='c1', name='Shirts')
    assert outcome.product == products[0]


def test_create_fills_codes_when_empty(store, fake_api):
    store.create_product(_blue_shirt_editor(), now_ms=1718000000123, rng=random.Random(0))

    payload = fake_api.calls_to('create_product')[0][1]
    assert payload['qrCode'] == 'QR-BLUESHIRT-1718000000123'
    assert payload['barcode'].startswith('1718000000123')
    assert payload['categoryId'] == 'c1'


def test_invalid_draft_sends_nothing(store, fake_api):
    outcome = store.create_product(DraftProduct(name='Nameless'))

    assert outcome.status == INVALID
    assert 'price' in outcome.validation.missing
    assert fake_api.calls_to('create_product') == []


def test_create_refetches_products_after_success(store, fake_api):
    store.products()
    listed_before = len(fake_api.calls_to('list_products'))

    store.create_product(_blue_shirt_editor())

    assert len(fake_api.calls_to('list_products')) == listed_before + 1
    assert len(store.products()) == 3


def test_failed_create_leaves_cache_unchanged(store, fake_api):
    before = store.products()
    fake_api.fail.add('create_product')

    outcome = store.create_product(_blue_shirt_editor())

    assert outcome.status == FAILED
    assert outcome.error
    assert store.products() == before


def test_products_are_cached_between_reads(store, fake_api):
    store.products()
    store.products()

    assert len(fake_api.calls_to('list_products')) == 1


def test_products_normalized_against_categories(store):
    products = {p.id: p for p in store.products()}

    assert products['p1'].category.name == 'Shirts'
    assert products['p1'].price == 20.0
    assert products['p2'].category.name == 'Dresses'


def test_fetch_failure_returns_empty_without_caching(store, fake_api):
    fake_api.fail.add('list_products')
    assert store.products() == []

    fake_api.fail.discard('list_products')
    assert len(store.products()) == 2


def test_set_availability_round_trips_through_backend(store, fake_api):
    store.products()

    assert store.set_availability('p2', True) is True

    assert fake_api.calls_to('update_product') == [('update_product', 'p2', {'availability': True})]
    assert store.get_product('p2').availability is True


def test_failed_toggle_keeps_server_state(store, fake_api):
    store.products()
    fake_api.fail.add('update_product')

    assert store.set_availability('p2', True) is False
    assert store.get_product('p2').availability is False


def test_delete_refetches_instead_of_splicing(store, fake_api):
    store.products()
    # a concurrent change on the server must show up after our own delete
    fake_api.products.append({'_id': 'p3', 'name': 'Socks', 'price': 3})

    assert store.delete_product('p1') is True

    assert sorted(p.id for p in store.products()) == ['p2', 'p3']


def test_failed_delete_keeps_product(store, fake_api):
    fake_api.fail.add('delete_product')

    assert store.delete_product('p1') is False
    assert store.get_product('p1') is not None


def test_create_category_invalidates_category_list(store, fake_api):
    assert len(store.categories()) == 2

    category = store.create_category('  Hats ')

    assert category is not None
    assert category.name == 'Hats'
    assert fake_api.calls_to('create_category') == [('create_category', 'Hats')]
    assert [c.name for c in store.categories()] == ['Shirts', 'Dresses', 'Hats']


def test_create_category_with_empty_name_is_noop(store, fake_api):
    assert store.create_category('') is None
    assert store.create_category(None) is None
    assert fake_api.calls_to('create_category') == []


def test_create_category_failure_returns_none(store, fake_api):
    fake_api.fail.add('create_category')

    assert store.create_category('Hats') is None


def test_last_updated_moves_on_mutation(store):
    started = store.last_updated()

    store.delete_product('p1')

    assert isinstance(store.last_updated(), datetime)
    assert store.last_updated() >= started
