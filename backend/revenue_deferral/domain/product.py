"""
Product Domain Model

Represents a catalog product together with the finance meta the deferral
dates feature reads (GL code, deferred revenue flag, static deferral dates).

Author: TM3
Date: 2025-10-17
Updated: 2025-11-20 (finance meta, categories and variations)
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional

# Product meta keys
GL_CODE_KEY = '_finance_gl_code'
DEFERRED_REQUIRED_KEY = '_finance_deferred_required'
DEFERRAL_START_DATE_KEY = '_finance_deferral_start_date'
DEFERRAL_END_DATE_KEY = '_finance_deferral_end_date'

PRODUCT_TYPE_SIMPLE = 'simple'
PRODUCT_TYPE_VARIABLE = 'variable'
PRODUCT_TYPE_VARIATION = 'variation'


class ProductCategory(BaseModel):
    """Product category (taxonomy term)"""

    id: int = Field(..., description="Category ID")
    slug: str = Field(..., description="Category slug")
    name: Optional[str] = Field(None, description="Category name")

    model_config = ConfigDict(from_attributes=True)


class Product(BaseModel):
    """
    Product domain model

    Fields:
        id: Internal product ID
        name: Product name
        type: simple, variable, variation, subscription...
        parent_id: Parent product ID (variations only)
        categories: Categories the product belongs to
        meta: Product meta (finance keys live here)
    """

    id: int = Field(..., description="Internal product ID")
    name: str = Field("", description="Product name")
    type: str = Field(PRODUCT_TYPE_SIMPLE, description="Product type")
    parent_id: Optional[int] = Field(None, description="Parent product ID for variations")
    categories: List[ProductCategory] = Field(default_factory=list, description="Product categories")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Product meta")

    model_config = ConfigDict(from_attributes=True)

    def is_variation(self) -> bool:
        """Check if product is a variation of a variable product"""
        return self.type == PRODUCT_TYPE_VARIATION

    def is_variable(self) -> bool:
        return self.type == PRODUCT_TYPE_VARIABLE

    @property
    def category_ids(self) -> List[int]:
        return [category.id for category in self.categories]

    @property
    def category_slugs(self) -> List[str]:
        return [category.slug for category in self.categories]

    def category_slug(self, category_id: int) -> str:
        """Slug for one of this product's categories, empty string if unknown"""
        for category in self.categories:
            if category.id == category_id:
                return category.slug
        return ''

    def get_meta(self, key: str, default: Any = '') -> Any:
        value = self.meta.get(key)
        return default if value is None else value

    def update_meta(self, key: str, value: Any) -> None:
        self.meta[key] = value
