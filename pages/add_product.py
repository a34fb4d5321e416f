import logging

import dash
from dash import ALL, Input, Output, State, ctx, dcc, html
import dash_mantine_components as dmc

from services.config import SIZE_OPTIONS, VARIANT_AWARE_FORM
from services.draft_editor import (
    AddSize,
    AddVariant,
    RemoveSize,
    RemoveVariant,
    SetAvailability,
    SetBarcode,
    SetCategory,
    SetDescription,
    SetName,
    SetPendingColor,
    SetPendingImage,
    SetPendingSize,
    SetPrice,
    SetQrCode,
    SetStock,
    SetSubcategory,
    apply_edit,
    load_editor,
    validate_draft,
)
from services.inventory_store import get_inventory_store
from services.inventory_table import build_size_badges, build_variant_previews
from services.models import DraftEditor

logger = logging.getLogger(__name__)

dash.register_page(__name__, path='/add-product', name='Add Product', title='Add Product')

FIELD_ACTIONS = {
    'product-name': SetName,
    'product-price': SetPrice,
    'product-stock': SetStock,
    'product-availability': SetAvailability,
    'product-category': SetCategory,
    'product-subcategory': SetSubcategory,
    'product-description': SetDescription,
    'product-qr-code': SetQrCode,
    'product-barcode': SetBarcode,
    'variant-color': SetPendingColor,
    'variant-image-url': SetPendingImage,
    'variant-upload': SetPendingImage,
    'size-select': SetPendingSize,
}

# (component id, property, value after a reset), in callback output order
RESETTABLE_FIELDS = [
    ('product-name', 'value', ''),
    ('product-price', 'value', ''),
    ('product-stock', 'value', ''),
    ('product-availability', 'checked', True),
    ('product-category', 'value', None),
    ('product-subcategory', 'value', None),
    ('product-description', 'value', ''),
    ('product-qr-code', 'value', ''),
    ('product-barcode', 'value', ''),
    ('variant-color', 'value', ''),
    ('variant-image-url', 'value', ''),
    ('variant-upload', 'contents', None),
    ('size-select', 'value', None),
]
VARIANT_FIELDS = {'variant-color', 'variant-image-url', 'variant-upload'}
FIELD_INDEX = {component_id: i for i, (component_id, _, _) in enumerate(RESETTABLE_FIELDS)}


def _category_data():
    return [{'value': category.id, 'label': category.name} for category in get_inventory_store().categories()]


def _subcategory_data(category_id):
    if not category_id:
        return []
    for category in get_inventory_store().categories():
        if category.id == category_id:
            return category.subcategory_names()
    return []


def _field(component, span=6):
    return dmc.GridCol(component, span=span)


def layout():
    return dmc.Container(
        [
            dmc.Title('Add New Product', order=2),
            dmc.Text('Add a new product to your inventory.', c='dimmed'),
            dcc.Store(id='draft-editor-store', data=DraftEditor().model_dump()),

            dmc.Paper(
                dmc.Stack([
                    dmc.Grid(
                        [
                            _field(dmc.TextInput(id='product-name', label='Product Name', placeholder='Enter product name', required=True, value='')),
                            _field(
                                dmc.Stack([
                                    dmc.Group(
                                        [
                                            dmc.Select(
                                                id='product-category',
                                                label='Category',
                                                placeholder='Select category',
                                                data=_category_data(),
                                                required=True,
                                                searchable=True,
                                                flex=1,
                                            ),
                                            dmc.Button('Add New', id='category-new-toggle', variant='outline'),
                                        ],
                                        align='flex-end',
                                        gap='xs',
                                    ),
                                    dmc.Collapse(
                                        dmc.Group(
                                            [
                                                dmc.TextInput(id='category-new-name', placeholder='New category name', value='', flex=1),
                                                dmc.Button('Add', id='category-new-add'),
                                                dmc.Button('Cancel', id='category-new-cancel', variant='outline'),
                                            ],
                                            gap='xs',
                                        ),
                                        id='category-new-panel',
                                        opened=False,
                                    ),
                                ], gap='xs')
                            ),
                            _field(dmc.Select(
                                id='product-subcategory',
                                label='Subcategory',
                                placeholder='Select subcategory',
                                data=[],
                                required=VARIANT_AWARE_FORM,
                            )),
                            _field(dmc.TextInput(id='product-description', label='Description', placeholder='Enter description', value='')),
                            _field(dmc.NumberInput(id='product-stock', label='Stock', placeholder='0', min=0, allowDecimal=False, required=True, value=''), span=3),
                            _field(dmc.NumberInput(id='product-price', label='Price ($)', placeholder='0.00', min=0, step=0.01, decimalScale=2, required=True, value=''), span=3),
                            _field(dmc.Switch(id='product-availability', label='Available', checked=True, mt='xl'), span=6),
                            _field(dmc.TextInput(id='product-qr-code', label='QR Code (Auto-generated)', placeholder='Will be auto-generated', value='')),
                            _field(dmc.TextInput(id='product-barcode', label='Barcode (Auto-generated)', placeholder='Will be auto-generated', value='')),
                        ],
                        gutter='lg',
                    ),

                    dmc.Divider(label='Sizes', labelPosition='left'),
                    dmc.Group(
                        [
                            dmc.Select(id='size-select', placeholder='Select size', data=SIZE_OPTIONS, w=160),
                            dmc.Button('Add Size', id='size-add-btn', variant='light'),
                        ],
                        align='flex-end',
                    ),
                    dmc.Box(id='size-badges'),

                    dmc.Divider(label='Variants', labelPosition='left'),
                    dmc.Group(
                        [
                            dmc.TextInput(id='variant-color', label='Color', placeholder='Enter color', value='', w=180),
                            dmc.TextInput(id='variant-image-url', label='Image', placeholder='Enter image URL', value='', flex=1),
                            dcc.Upload(
                                dmc.Button('Upload', variant='outline'),
                                id='variant-upload',
                                accept='image/*',
                                multiple=False,
                            ),
                            dmc.Button('Add Variant', id='variant-add-btn', variant='light'),
                        ],
                        align='flex-end',
                    ),
                    html.Div(id='variant-pending-preview'),
                    dmc.Box(id='variant-previews'),

                    dmc.Group(
                        [
                            dmc.Button('Add Product', id='product-submit-btn', disabled=True),
                            dmc.Text('', id='draft-validation-hint', size='sm', c='dimmed'),
                        ],
                        mt='md',
                    ),
                    dmc.Text('', id='submit-feedback', size='sm'),
                ]),
                p='md',
                radius='md',
                withBorder=True,
                mt='md',
            ),
        ],
        size='lg',
        py='lg'
    )


def _field_outputs():
    return [dash.no_update] * len(RESETTABLE_FIELDS)


def _reset_fields(outputs, component_ids=None):
    for component_id, _, reset_value in RESETTABLE_FIELDS:
        if component_ids is None or component_id in component_ids:
            outputs[FIELD_INDEX[component_id]] = reset_value
    return outputs


def plan_editor_update(editor, triggered, value):
    """Work out the editor state and form field outputs for one trigger.

    Returns ``(store_data, field_outputs, feedback)``; ``field_outputs``
    follows ``RESETTABLE_FIELDS`` order and holds ``dash.no_update`` for
    fields that keep their current value.
    """
    outputs = _field_outputs()
    feedback = dash.no_update

    if triggered is None:
        return editor.model_dump(), outputs, feedback

    if isinstance(triggered, dict):
        if not value:
            return dash.no_update, outputs, feedback
        if triggered['type'] == 'variant-remove':
            editor = apply_edit(editor, RemoveVariant(int(triggered['index'])))
        elif triggered['type'] == 'size-remove':
            editor = apply_edit(editor, RemoveSize(int(triggered['index'])))
    elif triggered == 'variant-add-btn':
        before = len(editor.draft.variants)
        editor = apply_edit(editor, AddVariant())
        if len(editor.draft.variants) > before:
            _reset_fields(outputs, VARIANT_FIELDS)
    elif triggered == 'size-add-btn':
        before = len(editor.draft.sizes)
        editor = apply_edit(editor, AddSize())
        if len(editor.draft.sizes) > before:
            _reset_fields(outputs, {'size-select'})
    elif triggered == 'product-submit-btn':
        outcome = get_inventory_store().create_product(editor, variant_aware=VARIANT_AWARE_FORM)
        if outcome.created:
            editor = DraftEditor()
            _reset_fields(outputs)
            feedback = f"Product '{outcome.product.name if outcome.product else 'new product'}' added."
        elif outcome.status == 'invalid':
            feedback = f'Cannot submit yet, {outcome.validation.describe()}.'
        else:
            feedback = 'Product could not be saved. Check the server logs.'
    elif triggered in FIELD_ACTIONS:
        before = editor.draft.category_id
        editor = apply_edit(editor, FIELD_ACTIONS[triggered](value))
        if triggered == 'product-category' and editor.draft.category_id != before:
            _reset_fields(outputs, {'product-subcategory'})

    return editor.model_dump(), outputs, feedback


@dash.callback(
    Output('draft-editor-store', 'data'),
    *[Output(component_id, prop) for component_id, prop, _ in RESETTABLE_FIELDS],
    Output('submit-feedback', 'children'),
    *[Input(component_id, prop) for component_id, prop, _ in RESETTABLE_FIELDS],
    Input('variant-add-btn', 'n_clicks'),
    Input('size-add-btn', 'n_clicks'),
    Input({'type': 'variant-remove', 'index': ALL}, 'n_clicks'),
    Input({'type': 'size-remove', 'index': ALL}, 'n_clicks'),
    Input('product-submit-btn', 'n_clicks'),
    State('draft-editor-store', 'data'),
    prevent_initial_call=True,
)
def update_editor(*args):
    value = ctx.triggered[0]['value'] if ctx.triggered else None
    data, outputs, feedback = plan_editor_update(load_editor(args[-1]), ctx.triggered_id, value)
    return data, *outputs, feedback


@dash.callback(
    Output('size-badges', 'children'),
    Output('variant-previews', 'children'),
    Output('variant-pending-preview', 'children'),
    Output('product-submit-btn', 'disabled'),
    Output('draft-validation-hint', 'children'),
    Input('draft-editor-store', 'data'),
)
def render_editor(data):
    editor = load_editor(data)
    validation = validate_draft(editor.draft, variant_aware=VARIANT_AWARE_FORM)

    pending_image = editor.pending_variant.image
    preview = dmc.Image(src=pending_image, w=80, h=80, radius='sm', fit='cover') if pending_image else None

    return (
        build_size_badges(editor.draft.sizes),
        build_variant_previews([variant.model_dump() for variant in editor.draft.variants]),
        preview,
        not validation.valid,
        '' if validation.valid else validation.describe(),
    )


@dash.callback(
    Output('product-subcategory', 'data'),
    Input('product-category', 'value'),
)
def update_subcategory_options(category_id):
    return _subcategory_data(category_id)


@dash.callback(
    Output('category-new-panel', 'opened'),
    Output('product-category', 'data'),
    Output('product-category', 'value', allow_duplicate=True),
    Output('category-new-name', 'value'),
    Input('category-new-toggle', 'n_clicks'),
    Input('category-new-add', 'n_clicks'),
    Input('category-new-cancel', 'n_clicks'),
    State('category-new-name', 'value'),
    prevent_initial_call=True,
)
def manage_categories(toggle_clicks, add_clicks, cancel_clicks, new_name):
    triggered = ctx.triggered_id
    if triggered == 'category-new-toggle':
        return True, dash.no_update, dash.no_update, dash.no_update
    if triggered == 'category-new-cancel':
        return False, dash.no_update, dash.no_update, ''

    category = get_inventory_store().create_category(new_name)
    if category is None:
        return dash.no_update, _category_data(), dash.no_update, dash.no_update
    logger.info(f"Created category {category.name!r} ({category.id})")
    return False, _category_data(), category.id, ''
