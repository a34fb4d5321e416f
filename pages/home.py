import logging

import dash
from dash import ALL, Input, Output, State, ctx, dcc
import dash_mantine_components as dmc

from services.config import ALL_CATEGORIES, DEFAULT_SORT_KEY, STATUS_REFRESH_MS
from services.inventory_store import get_inventory_store
from services.inventory_table import build_product_table, build_status_card
from services.product_view import compute_view, format_currency
from services.system_status import health_check

logger = logging.getLogger(__name__)

dash.register_page(__name__, path='/', name='Inventory', title='Inventory Management')

SORT_OPTIONS = [
    {'value': 'name', 'label': 'Name'},
    {'value': 'price', 'label': 'Price'},
    {'value': 'stock', 'label': 'Stock'},
]


def _stat_card(title, value_id, caption_id):
    return dmc.GridCol(
        dmc.Paper(
            dmc.Stack([
                dmc.Text(title, size='sm', c='dimmed'),
                dmc.Text('0', size='xl', fw=600, id=value_id),
                dmc.Text('', size='xs', c='dimmed', id=caption_id),
            ]),
            p='md',
            radius='md',
            withBorder=True,
        ),
        span=4,
    )


def _category_options():
    options = [{'value': ALL_CATEGORIES, 'label': 'All categories'}]
    options.extend({'value': category.id, 'label': category.name} for category in get_inventory_store().categories())
    return options


def layout():
    return dmc.Container(
        [
            dmc.Title('Inventory Management', order=2),
            dmc.Text('Manage your products and track inventory status.', c='dimmed'),
            dcc.Store(id='inventory-version', data=0),
            dcc.Store(id='inventory-availability', data={}),
            dcc.Interval(id='inventory-status-interval', interval=STATUS_REFRESH_MS),

            # KPI Cards Row
            dmc.Grid(
                [
                    _stat_card('Total Products', 'inventory-kpi-total', 'inventory-kpi-total-caption'),
                    _stat_card('Available Items', 'inventory-kpi-available', 'inventory-kpi-available-caption'),
                    _stat_card('Total Value', 'inventory-kpi-value', 'inventory-kpi-value-caption'),
                ],
                gutter='lg',
                mt='md',
            ),

            # Filters
            dmc.Paper(
                dmc.Group(
                    [
                        dmc.TextInput(
                            id='inventory-search',
                            label='Search',
                            placeholder='Search products by name',
                            value='',
                            w=280,
                        ),
                        dmc.Select(
                            id='inventory-category-filter',
                            label='Category',
                            data=_category_options(),
                            value=ALL_CATEGORIES,
                            allowDeselect=False,
                            w=220,
                        ),
                        dmc.Select(
                            id='inventory-sort',
                            label='Sort by',
                            data=SORT_OPTIONS,
                            value=DEFAULT_SORT_KEY,
                            allowDeselect=False,
                            w=160,
                        ),
                    ],
                    gap='xl',
                    align='flex-end',
                ),
                p='md',
                radius='md',
                withBorder=True,
                mt='md',
            ),

            dmc.Paper(
                dmc.Stack([
                    dmc.Text('Product Inventory', fw=600),
                    dmc.Text('View and manage your product inventory', size='sm', c='dimmed'),
                    dmc.Box(id='inventory-table'),
                ]),
                p='md',
                radius='md',
                withBorder=True,
                mt='lg',
            ),

            dmc.Box(id='inventory-system-status', mt='lg'),
        ],
        size='xl',
        py='lg'
    )


def product_action(triggered, value, rendered_availability):
    """Backend mutation requested by a table control, or None.

    Re-rendering the table mounts fresh switches that fire with the value
    they were rendered with; those match ``rendered_availability`` and are
    ignored.
    """
    if not isinstance(triggered, dict) or value is None:
        return None
    product_id = triggered.get('index')
    if triggered.get('type') == 'product-delete':
        return ('delete', product_id) if value else None
    if (rendered_availability or {}).get(product_id) == bool(value):
        return None
    return ('availability', product_id, bool(value))


def inventory_outputs(store, search_term, category_filter, sort_key):
    view = compute_view(store.products(), search_term, category_filter, sort_key)
    stats = view.stats
    return (
        f'{stats.total:,}',
        f'{stats.available:,} available',
        f'{stats.available:,}',
        f'{stats.out_of_stock:,} out of stock',
        format_currency(stats.total_value),
        'Inventory value',
        build_product_table(view.visible),
        {product.id: product.availability for product in view.visible},
    )


@dash.callback(
    Output('inventory-version', 'data'),
    Input({'type': 'product-availability', 'index': ALL}, 'checked'),
    Input({'type': 'product-delete', 'index': ALL}, 'n_clicks'),
    State('inventory-availability', 'data'),
    State('inventory-version', 'data'),
    prevent_initial_call=True,
)
def handle_product_actions(checked_values, delete_clicks, rendered_availability, version):
    value = ctx.triggered[0]['value'] if ctx.triggered else None
    action = product_action(ctx.triggered_id, value, rendered_availability)
    if action is None:
        return dash.no_update

    store = get_inventory_store()
    if action[0] == 'delete':
        changed = store.delete_product(action[1])
    else:
        changed = store.set_availability(action[1], action[2])

    # a failed request still bumps the version so the table re-renders server state
    logger.info(f"{action[0]} on {action[1]}: {'ok' if changed else 'failed'}")
    return (version or 0) + 1


@dash.callback(
    Output('inventory-kpi-total', 'children'),
    Output('inventory-kpi-total-caption', 'children'),
    Output('inventory-kpi-available', 'children'),
    Output('inventory-kpi-available-caption', 'children'),
    Output('inventory-kpi-value', 'children'),
    Output('inventory-kpi-value-caption', 'children'),
    Output('inventory-table', 'children'),
    Output('inventory-availability', 'data'),
    Input('inventory-search', 'value'),
    Input('inventory-category-filter', 'value'),
    Input('inventory-sort', 'value'),
    Input('inventory-version', 'data'),
)
def render_inventory(search_term, category_filter, sort_key, version):
    return inventory_outputs(get_inventory_store(), search_term, category_filter, sort_key)


@dash.callback(
    Output('inventory-system-status', 'children'),
    Input('inventory-version', 'data'),
    Input('inventory-status-interval', 'n_intervals'),
)
def render_system_status(version, n_intervals):
    return build_status_card(health_check(get_inventory_store()))
