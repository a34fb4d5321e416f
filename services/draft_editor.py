"""Draft product editor for the add-product form.

Every change to the draft goes through ``apply_edit`` with one of the edit
actions below, so the form callbacks never patch the draft by field name.
All functions are pure: they take an editor and return a new one.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from services.models import DraftEditor, DraftProduct, PendingVariant, Variant

# ---------------------------------------------------------------------------
# Edit actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetName:
    value: Optional[str]


@dataclass(frozen=True)
class SetPrice:
    value: Any


@dataclass(frozen=True)
class SetStock:
    value: Any


@dataclass(frozen=True)
class SetAvailability:
    value: Optional[bool]


@dataclass(frozen=True)
class SetCategory:
    value: Optional[str]


@dataclass(frozen=True)
class SetSubcategory:
    value: Optional[str]


@dataclass(frozen=True)
class SetDescription:
    value: Optional[str]


@dataclass(frozen=True)
class SetQrCode:
    value: Optional[str]


@dataclass(frozen=True)
class SetBarcode:
    value: Optional[str]


@dataclass(frozen=True)
class SetPendingColor:
    value: Optional[str]


@dataclass(frozen=True)
class SetPendingImage:
    value: Optional[str]


@dataclass(frozen=True)
class SetPendingSize:
    value: Optional[str]


@dataclass(frozen=True)
class AddVariant:
    pass


@dataclass(frozen=True)
class RemoveVariant:
    index: int


@dataclass(frozen=True)
class AddSize:
    label: Optional[str] = None


@dataclass(frozen=True)
class RemoveSize:
    index: int


@dataclass(frozen=True)
class ResetDraft:
    pass


EditAction = Union[
    SetName, SetPrice, SetStock, SetAvailability, SetCategory, SetSubcategory,
    SetDescription, SetQrCode, SetBarcode, SetPendingColor, SetPendingImage,
    SetPendingSize, AddVariant, RemoveVariant, AddSize, RemoveSize, ResetDraft,
]


# ---------------------------------------------------------------------------
# Form value coercion
# ---------------------------------------------------------------------------

def parse_price(value: Any) -> float:
    """Form price input -> non-negative float, anything unparseable is 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def parse_stock(value: Any) -> int:
    """Form stock input -> non-negative int (fractions truncated)."""
    if isinstance(value, bool):
        return 0
    try:
        stock = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(stock, 0)


def _text(value: Optional[str]) -> str:
    return value if isinstance(value, str) else ''


# ---------------------------------------------------------------------------
# Variant / size collection
# ---------------------------------------------------------------------------

def add_variant(editor: DraftEditor) -> DraftEditor:
    pending = editor.pending_variant
    if not pending.color or not pending.image:
        return editor
    variants = editor.draft.variants + [Variant(color=pending.color, image=pending.image)]
    return editor.model_copy(update={
        'draft': editor.draft.model_copy(update={'variants': variants}),
        'pending_variant': PendingVariant(),
    })


def remove_variant(editor: DraftEditor, index: int) -> DraftEditor:
    variants = editor.draft.variants
    if not 0 <= index < len(variants):
        return editor
    remaining = variants[:index] + variants[index + 1:]
    return editor.model_copy(update={'draft': editor.draft.model_copy(update={'variants': remaining})})


def add_size(editor: DraftEditor, label: Optional[str] = None) -> DraftEditor:
    size = editor.pending_size if label is None else label
    if not size or size in editor.draft.sizes:
        return editor
    sizes = editor.draft.sizes + [size]
    return editor.model_copy(update={
        'draft': editor.draft.model_copy(update={'sizes': sizes}),
        'pending_size': '',
    })


def remove_size(editor: DraftEditor, index: int) -> DraftEditor:
    sizes = editor.draft.sizes
    if not 0 <= index < len(sizes):
        return editor
    remaining = sizes[:index] + sizes[index + 1:]
    return editor.model_copy(update={'draft': editor.draft.model_copy(update={'sizes': remaining})})


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------

def _set_draft(editor: DraftEditor, **changes) -> DraftEditor:
    return editor.model_copy(update={'draft': editor.draft.model_copy(update=changes)})


def _set_pending(editor: DraftEditor, **changes) -> DraftEditor:
    return editor.model_copy(update={'pending_variant': editor.pending_variant.model_copy(update=changes)})


def apply_edit(editor: DraftEditor, action: EditAction) -> DraftEditor:
    """Apply a single edit action to the editor state."""
    if isinstance(action, SetName):
        return _set_draft(editor, name=_text(action.value))
    if isinstance(action, SetPrice):
        return _set_draft(editor, price=parse_price(action.value))
    if isinstance(action, SetStock):
        return _set_draft(editor, stock=parse_stock(action.value))
    if isinstance(action, SetAvailability):
        return _set_draft(editor, availability=bool(action.value))
    if isinstance(action, SetCategory):
        category_id = _text(action.value)
        if category_id == editor.draft.category_id:
            return editor
        # subcategory options belong to the selected category
        return _set_draft(editor, category_id=category_id, subcategory='')
    if isinstance(action, SetSubcategory):
        return _set_draft(editor, subcategory=_text(action.value))
    if isinstance(action, SetDescription):
        return _set_draft(editor, description=_text(action.value))
    if isinstance(action, SetQrCode):
        return _set_draft(editor, qr_code=_text(action.value).strip())
    if isinstance(action, SetBarcode):
        return _set_draft(editor, barcode=_text(action.value).strip())
    if isinstance(action, SetPendingColor):
        return _set_pending(editor, color=_text(action.value).strip())
    if isinstance(action, SetPendingImage):
        return _set_pending(editor, image=_text(action.value).strip())
    if isinstance(action, SetPendingSize):
        return editor.model_copy(update={'pending_size': _text(action.value)})
    if isinstance(action, AddVariant):
        return add_variant(editor)
    if isinstance(action, RemoveVariant):
        return remove_variant(editor, action.index)
    if isinstance(action, AddSize):
        return add_size(editor, action.label)
    if isinstance(action, RemoveSize):
        return remove_size(editor, action.index)
    if isinstance(action, ResetDraft):
        return DraftEditor()
    raise TypeError(f'Unsupported edit action: {action!r}')


def apply_edits(editor: DraftEditor, actions: List[EditAction]) -> DraftEditor:
    for action in actions:
        editor = apply_edit(editor, action)
    return editor


def load_editor(data: Optional[Dict[str, Any]]) -> DraftEditor:
    """Rebuild editor state from a ``dcc.Store`` payload."""
    if not data:
        return DraftEditor()
    return DraftEditor.model_validate(data)


# ---------------------------------------------------------------------------
# Submission validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationResult:
    missing: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing

    def describe(self) -> str:
        if self.valid:
            return 'ready to submit'
        return 'missing or invalid: ' + ', '.join(self.missing)


def validate_draft(draft: DraftProduct, variant_aware: bool = True) -> ValidationResult:
    missing = []
    if not draft.name.strip():
        missing.append('name')
    if draft.price <= 0:
        missing.append('price')
    if not draft.category_id:
        missing.append('category')
    if variant_aware:
        if not draft.subcategory:
            missing.append('subcategory')
        if not draft.variants:
            missing.append('variants')
    return ValidationResult(missing=missing)


def build_create_payload(draft: DraftProduct) -> Dict[str, Any]:
    """Wire body for ``POST products``."""
    return {
        'name': draft.name.strip(),
        'sizes': list(draft.sizes),
        'variants': [variant.model_dump() for variant in draft.variants],
        'price': draft.price,
        'stock': draft.stock,
        'availability': draft.availability,
        'categoryId': draft.category_id,
        'subcategory': draft.subcategory,
        'qrCode': draft.qr_code,
        'barcode': draft.barcode,
        'description': draft.description,
    }
