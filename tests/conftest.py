"""Shared fixtures for the inventory service tests."""
import copy
import sys
from pathlib import Path

import pytest
from cachelib import SimpleCache

# Add root to path so tests can import services
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.inventory_api import InventoryApiError
from services.inventory_store import InventoryStore
from services.models import Category, CategoryRef, Product, Subcategory, Variant


class FakeInventoryApi:
    """In-memory stand-in for the REST backend that records every call."""

    def __init__(self, products=None, categories=None):
        self.products = copy.deepcopy(products or [])
        self.categories = copy.deepcopy(categories or [])
        self.calls = []
        self.fail = set()
        self._next_id = 1000

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise InventoryApiError(f'{name} failed', status_code=500)

    def calls_to(self, name):
        return [call for call in self.calls if call[0] == name]

    def list_products(self):
        self._record('list_products')
        return copy.deepcopy(self.products)

    def create_product(self, payload):
        self._record('create_product', payload)
        self._next_id += 1
        created = dict(payload, _id=f'p{self._next_id}')
        self.products.append(created)
        return copy.deepcopy(created)

    def update_product(self, product_id, updates):
        self._record('update_product', product_id, updates)
        for product in self.products:
            if product['_id'] == product_id:
                product.update(updates)
                return copy.deepcopy(product)
        raise InventoryApiError('not found', status_code=404)

    def delete_product(self, product_id):
        self._record('delete_product', product_id)
        self.products = [p for p in self.products if p['_id'] != product_id]

    def list_categories(self):
        self._record('list_categories')
        return copy.deepcopy(self.categories)

    def create_category(self, name):
        self._record('create_category', name)
        self._next_id += 1
        created = {'_id': f'c{self._next_id}', 'name': name, 'subcategories': []}
        self.categories.append(created)
        return copy.deepcopy(created)


@pytest.fixture
def category_records():
    return [
        {'_id': 'c1', 'name': 'Shirts', 'subcategories': [{'name': 'Casual'}, {'name': 'Formal'}]},
        {'_id': 'c2', 'name': 'Dresses', 'subcategories': [{'name': 'Evening'}]},
    ]


@pytest.fixture
def product_records():
    return [
        {
            '_id': 'p1',
            'name': 'Blue Shirt',
            'sizes': ['M', 'L'],
            'variants': [{'color': 'Blue', 'image': 'data:image/png;base64,AAA'}],
            'price': '20.00',
            'stock': 5,
            'availability': True,
            'categoryId': 'c1',
            'subcategory': 'Casual',
            'qrCode': 'QR1',
            'barcode': 'BAR1',
            'description': '',
        },
        {
            '_id': 'p2',
            'name': 'Red Dress',
            'sizes': ['S'],
            'variants': [{'color': 'Red', 'image': '/woman-in-red-dress.png'}],
            'price': 50,
            'stock': 2,
            'availability': False,
            'categoryId': {'_id': 'c2', 'name': 'Dresses'},
            'subcategory': 'Evening',
            'qrCode': 'QR2',
            'barcode': 'BAR2',
        },
    ]


@pytest.fixture
def fake_api(product_records, category_records):
    return FakeInventoryApi(products=product_records, categories=category_records)


@pytest.fixture
def store(fake_api):
    return InventoryStore(fake_api, SimpleCache())


def make_product(product_id, name, price=10.0, stock=1, availability=True, category_id='c1', category_name='Shirts'):
    return Product(
        id=product_id,
        name=name,
        price=price,
        stock=stock,
        availability=availability,
        category=CategoryRef(id=category_id, name=category_name),
        variants=[Variant(color='Blue', image='data:image/png;base64,AAA')],
    )


@pytest.fixture
def sample_products():
    return [
        make_product('p1', 'blue shirt', price=20.0, stock=5, availability=True),
        make_product('p2', 'Red Dress', price=50.0, stock=2, availability=False, category_id='c2', category_name='Dresses'),
        make_product('p3', 'Green Shirt', price=15.5, stock=9, availability=True),
        make_product('p4', 'Alpha Socks', price=3.0, stock=0, availability=False, category_id='c3', category_name='Socks'),
        make_product('p5', 'Shirt Dress', price=20.0, stock=5, availability=True, category_id='c2', category_name='Dresses'),
    ]


@pytest.fixture
def categories():
    return [
        Category(id='c1', name='Shirts', subcategories=[Subcategory(name='Casual')]),
        Category(id='c2', name='Dresses'),
    ]
