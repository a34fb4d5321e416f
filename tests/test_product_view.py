import pytest

from conftest import make_product
from services.product_view import (
    compute_stats,
    compute_view,
    filter_products,
    format_currency,
    name_sort_key,
    sort_products,
)


@pytest.mark.parametrize('search_term', ['', 'shirt', 'SHIRT', 'dress', 'zzz', 'e'])
def test_search_keeps_only_case_insensitive_matches(sample_products, search_term):
    view = compute_view(sample_products, search_term, 'all', 'name')

    assert len(view.visible) <= len(sample_products)
    assert all(search_term.lower() in p.name.lower() for p in view.visible)
    expected = {p.id for p in sample_products if search_term.lower() in p.name.lower()}
    assert {p.id for p in view.visible} == expected


@pytest.mark.parametrize('sort_key,attr', [
    ('name', lambda p: name_sort_key(p.name)),
    ('price', lambda p: p.price),
    ('stock', lambda p: p.stock),
])
def test_sort_is_non_decreasing_permutation_of_filtered(sample_products, sort_key, attr):
    view = compute_view(sample_products, 'S', 'all', sort_key)
    filtered = filter_products(sample_products, 'S', 'all')

    values = [attr(p) for p in view.visible]
    assert values == sorted(values)
    assert sorted(p.id for p in view.visible) == sorted(p.id for p in filtered)


def test_sort_is_stable_for_equal_keys(sample_products):
    ordered = sort_products(sample_products, 'price')

    equal_price = [p.id for p in ordered if p.price == 20.0]
    assert equal_price == ['p1', 'p5']


def test_name_sort_ignores_case(sample_products):
    names = [p.name for p in sort_products(sample_products, 'name')]

    assert names == ['Alpha Socks', 'blue shirt', 'Green Shirt', 'Red Dress', 'Shirt Dress']


def test_name_sort_places_accented_names_with_their_base_letter():
    products = [
        make_product('p1', 'Zebra Tee'),
        make_product('p2', 'Éclair Top'),
        make_product('p3', 'apple'),
        make_product('p4', 'eclair top'),
    ]

    names = [p.name for p in sort_products(products, 'name')]

    assert names == ['apple', 'eclair top', 'Éclair Top', 'Zebra Tee']


def test_unknown_sort_key_falls_back_to_name(sample_products):
    assert sort_products(sample_products, 'colour') == sort_products(sample_products, 'name')
    assert sort_products(sample_products, None) == sort_products(sample_products, 'name')


def test_category_filter(sample_products):
    only_c1 = compute_view(sample_products, '', 'c1', 'name').visible
    everything = compute_view(sample_products, '', 'all', 'name').visible

    assert {p.category.id for p in only_c1} == {'c1'}
    assert len(only_c1) == 2
    assert len(everything) == len(sample_products)


def test_empty_category_filter_means_all(sample_products):
    assert len(compute_view(sample_products, '', None, 'name').visible) == len(sample_products)
    assert len(compute_view(sample_products, None, '', 'name').visible) == len(sample_products)


def test_stats_ignore_search_and_filter(sample_products):
    view = compute_view(sample_products, 'dress', 'c2', 'price')

    assert view.stats.total == 5
    assert view.stats.available == 3
    assert view.stats.out_of_stock == 2
    assert view.stats.total_value == pytest.approx(108.5)


def test_stats_of_empty_set():
    stats = compute_stats([])

    assert (stats.total, stats.available, stats.total_value) == (0, 0, 0.0)


def test_compute_view_does_not_mutate_input(sample_products):
    before = [p.id for p in sample_products]

    compute_view(sample_products, '', 'all', 'stock')

    assert [p.id for p in sample_products] == before


def test_format_currency_two_decimals():
    assert format_currency(108.5) == '$108.50'
    assert format_currency(0) == '$0.00'
    assert format_currency(1234.567) == '$1,234.57'
