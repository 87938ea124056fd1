"""
Order Domain Models

Represents orders, their line items and the order notes (audit log).

Author: TM3
Date: 2025-10-17
Updated: 2025-11-20 (line item meta and order notes for finance dates)
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import datetime

# Line item meta keys
START_DATE_KEY = '_finance_start_date'
END_DATE_KEY = '_finance_end_date'
ITEM_GL_CODE_KEY = '_finance_gl_code'

# Order statuses
STATUS_DRAFT = 'draft'
STATUS_PENDING = 'pending'
STATUS_ON_HOLD = 'on-hold'
STATUS_PROCESSING = 'processing'
STATUS_COMPLETED = 'completed'

ORDER_STATUSES = (
    STATUS_DRAFT,
    STATUS_PENDING,
    STATUS_ON_HOLD,
    STATUS_PROCESSING,
    STATUS_COMPLETED,
)


class OrderItem(BaseModel):
    """
    Order Item domain model - a product line item in an order

    Fields:
        id: Line item ID
        order_id: Parent order ID
        product_id: Product ID (the parent product for variations)
        variation_id: Variation ID, None when the product is not a variation
        name: Product name at order time
        quantity: Quantity ordered
        meta: Line item meta (finance dates and GL code live here)
    """

    id: int = Field(..., description="Line item ID")
    order_id: int = Field(..., description="Parent order ID")
    product_id: Optional[int] = Field(None, description="Product ID")
    variation_id: Optional[int] = Field(None, description="Variation ID")
    name: str = Field("", description="Product name at order time")
    quantity: int = Field(1, description="Quantity ordered", ge=0)
    meta: Dict[str, Any] = Field(default_factory=dict, description="Line item meta")

    model_config = ConfigDict(from_attributes=True)

    @property
    def effective_product_id(self) -> Optional[int]:
        """Variation ID when set, otherwise product ID"""
        return self.variation_id or self.product_id

    def matches_product(self, product_id: int) -> bool:
        """Check if this item was bought as product_id (product or variation)"""
        if not product_id:
            return False
        return product_id in (self.product_id, self.variation_id)

    def get_meta(self, key: str, default: Any = '') -> Any:
        value = self.meta.get(key)
        return default if value is None else value

    def update_meta(self, key: str, value: Any) -> None:
        self.meta[key] = value


class OrderNote(BaseModel):
    """Order note - append-only audit entry on an order"""

    id: Optional[int] = Field(None, description="Note ID, None until persisted")
    order_id: int = Field(..., description="Parent order ID")
    content: str = Field(..., description="Note text")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_pending(self) -> bool:
        return self.id is None


class Order(BaseModel):
    """
    Order domain model

    Fields:
        id: Internal order ID
        status: Order status (draft, pending, on-hold, processing, completed...)
        items: Product line items
        notes: Audit notes, oldest first
    """

    id: int = Field(..., description="Internal order ID")
    status: str = Field(..., description="Order status")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    items: List[OrderItem] = Field(default_factory=list, description="Order items")
    notes: List[OrderNote] = Field(default_factory=list, description="Order notes")

    model_config = ConfigDict(from_attributes=True)

    def get_status(self) -> str:
        return self.status

    def get_items(self) -> Dict[int, OrderItem]:
        """Line items keyed by item ID, in order"""
        return {item.id: item for item in self.items}

    def get_item(self, item_id: int) -> Optional[OrderItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def add_note(self, content: str) -> OrderNote:
        """Append a note; it is written on the next repository save"""
        note = OrderNote(order_id=self.id, content=content)
        self.notes.append(note)
        return note

    @property
    def pending_notes(self) -> List[OrderNote]:
        return [note for note in self.notes if note.is_pending]
