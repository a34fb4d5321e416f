from typing import Any, Dict, List, Sequence

import dash_mantine_components as dmc
from dash import html

from services.models import Product
from services.product_view import format_currency

TABLE_COLUMNS = ['Image', 'Product', 'Category', 'Sizes', 'Colors', 'Stock', 'Price', 'Codes', 'Status', 'Actions']
PLACEHOLDER_IMAGE = '/assets/placeholder.svg'


def _codes_cell(product: Product):
    lines = []
    if product.qr_code:
        lines.append(dmc.Text(f'QR: {product.qr_code}', size='xs', truncate='end'))
    if product.barcode:
        lines.append(dmc.Text(f'Barcode: {product.barcode}', size='xs', truncate='end'))
    return dmc.Stack(lines, gap=2, maw=160)


def _name_cell(product: Product):
    lines = [dmc.Text(product.name, fw=500)]
    if product.subcategory:
        lines.append(dmc.Text(product.subcategory, size='xs', c='dimmed'))
    return dmc.Stack(lines, gap=0)


def _status_cell(product: Product):
    return dmc.Group(
        [
            dmc.Switch(
                id={'type': 'product-availability', 'index': product.id},
                checked=product.availability,
                color='green',
                size='sm',
            ),
            dmc.Badge(
                'In Stock' if product.availability else 'Out of Stock',
                color='green' if product.availability else 'gray',
                variant='light',
                size='sm',
            ),
        ],
        gap='xs',
        wrap='nowrap',
    )


def build_product_row(product: Product):
    return dmc.TableTr(
        [
            dmc.TableTd(
                dmc.Image(
                    src=product.thumbnail or PLACEHOLDER_IMAGE,
                    w=48,
                    h=48,
                    radius='sm',
                    fit='cover',
                )
            ),
            dmc.TableTd(_name_cell(product)),
            dmc.TableTd(dmc.Badge(product.category.name, variant='outline')),
            dmc.TableTd(', '.join(product.sizes) or 'N/A'),
            dmc.TableTd(', '.join(product.colors) or 'N/A'),
            dmc.TableTd(str(product.stock)),
            dmc.TableTd(dmc.Text(format_currency(product.price), fw=500)),
            dmc.TableTd(_codes_cell(product)),
            dmc.TableTd(_status_cell(product)),
            dmc.TableTd(
                dmc.Button(
                    'Delete',
                    id={'type': 'product-delete', 'index': product.id},
                    color='red',
                    variant='outline',
                    size='xs',
                )
            ),
        ],
    )


def build_empty_state():
    return dmc.Stack(
        [
            dmc.Title('No products found', order=4),
            dmc.Text('Add your first product to get started.', c='dimmed'),
        ],
        align='center',
        py='xl',
    )


def build_product_table(products: Sequence[Product]):
    if not products:
        return build_empty_state()

    return dmc.Table(
        [
            dmc.TableThead(dmc.TableTr([dmc.TableTh(column) for column in TABLE_COLUMNS])),
            dmc.TableTbody([build_product_row(product) for product in products]),
        ],
        striped=True,
        highlightOnHover=True,
        withTableBorder=True,
        verticalSpacing='sm',
    )


def build_status_card(status: Dict[str, Any]):
    healthy = status.get('status') == 'healthy'
    return dmc.Paper(
        dmc.Group(
            [
                dmc.Stack(
                    [
                        dmc.Text('System Status', fw=600, c='green.9' if healthy else 'red.9'),
                        dmc.Text(status.get('message', ''), size='sm', c='green.7' if healthy else 'red.7'),
                    ],
                    gap=0,
                ),
                dmc.Text(f"Last updated: {status.get('last_updated', '')}", size='sm', c='dimmed'),
            ],
            justify='space-between',
        ),
        p='md',
        radius='md',
        withBorder=True,
        bg='green.0' if healthy else 'red.0',
    )


def build_variant_previews(variants: List[Dict[str, str]]):
    """Thumbnails with remove buttons for the variants of a draft."""
    if not variants:
        return dmc.Text('No variants added yet.', size='sm', c='dimmed')

    return dmc.Group(
        [
            dmc.Paper(
                dmc.Stack(
                    [
                        dmc.Image(src=variant['image'], w=72, h=72, radius='sm', fit='cover'),
                        dmc.Text(variant['color'], size='sm', ta='center'),
                        dmc.Button(
                            'Remove',
                            id={'type': 'variant-remove', 'index': index},
                            color='red',
                            variant='subtle',
                            size='compact-xs',
                        ),
                    ],
                    gap=4,
                    align='center',
                ),
                p='xs',
                withBorder=True,
                radius='md',
            )
            for index, variant in enumerate(variants)
        ],
        gap='sm',
    )


def build_size_badges(sizes: List[str]):
    if not sizes:
        return dmc.Text('No sizes added yet.', size='sm', c='dimmed')

    return dmc.Group(
        [
            dmc.Badge(
                dmc.Group(
                    [
                        html.Span(size),
                        dmc.Button(
                            'x',
                            id={'type': 'size-remove', 'index': index},
                            variant='transparent',
                            size='compact-xs',
                        ),
                    ],
                    gap=2,
                    wrap='nowrap',
                ),
                variant='light',
                size='lg',
            )
            for index, size in enumerate(sizes)
        ],
        gap='xs',
    )
