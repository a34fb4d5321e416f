"""Product, category and draft models shared by the inventory services and pages.

Models are pydantic so they round-trip through ``dcc.Store`` and the
server-side cache as plain JSON.
"""
from typing import List

from pydantic import BaseModel, Field

from services.config import UNKNOWN_CATEGORY


class Subcategory(BaseModel):
    name: str


class Category(BaseModel):
    id: str
    name: str
    subcategories: List[Subcategory] = Field(default_factory=list)

    def subcategory_names(self) -> List[str]:
        return [sub.name for sub in self.subcategories]


class CategoryRef(BaseModel):
    id: str = ''
    name: str = UNKNOWN_CATEGORY


class Variant(BaseModel):
    color: str
    image: str


class PendingVariant(BaseModel):
    color: str = ''
    image: str = ''


class DraftProduct(BaseModel):
    name: str = ''
    sizes: List[str] = Field(default_factory=list)
    variants: List[Variant] = Field(default_factory=list)
    price: float = Field(default=0.0, ge=0)
    stock: int = Field(default=0, ge=0)
    availability: bool = True
    category_id: str = ''
    subcategory: str = ''
    qr_code: str = ''
    barcode: str = ''
    description: str = ''


class DraftEditor(BaseModel):
    draft: DraftProduct = Field(default_factory=DraftProduct)
    pending_variant: PendingVariant = Field(default_factory=PendingVariant)
    pending_size: str = ''


class Product(BaseModel):
    """Canonical product as rendered by the dashboard."""

    id: str
    name: str = ''
    sizes: List[str] = Field(default_factory=list)
    variants: List[Variant] = Field(default_factory=list)
    price: float = Field(default=0.0, ge=0)
    stock: int = Field(default=0, ge=0)
    availability: bool = False
    category: CategoryRef = Field(default_factory=CategoryRef)
    subcategory: str = ''
    qr_code: str = ''
    barcode: str = ''
    description: str = ''

    @property
    def colors(self) -> List[str]:
        return [variant.color for variant in self.variants]

    @property
    def thumbnail(self) -> str:
        return self.variants[0].image if self.variants else ''
