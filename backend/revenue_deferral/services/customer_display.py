"""
Customer Display - which line item dates customers get to see

Surfaces: order confirmation, emails, my account, subscriptions and PDF
invoices. Dates are shown only when Eligibility allows it for the surface.

Author: TM3
Date: 2025-11-20
"""
from typing import Any, Dict, List, Optional

from revenue_deferral.domain.order import Order, OrderItem
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.eligibility import Eligibility
from revenue_deferral.services.finance_settings import SURFACE_PDF_INVOICE
from revenue_deferral.services.line_item_meta import LineItemMeta

INVOICE_DOCUMENT_TYPE = 'invoice'


class CustomerDisplay:

    def __init__(
        self,
        eligibility: Eligibility,
        line_item_meta: LineItemMeta,
        order_repository: OrderRepository,
        product_repository: ProductRepository,
        date_formatter: Optional[DateFormatter] = None
    ):
        self.eligibility = eligibility
        self.line_item_meta = line_item_meta
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.date_formatter = date_formatter or DateFormatter()

    def get_item_display(self, item: OrderItem, surface: str) -> Optional[Dict[str, Any]]:
        """Formatted term dates for a line item, None when not shown on the surface"""
        product = self.product_repository.find_by_id(item.effective_product_id)
        if product is None:
            return None

        data = self.line_item_meta.get_line_item_data(item)
        if not self.eligibility.is_eligible_for_display(product, surface, data['start_date'], data['end_date']):
            return None

        return {
            'item_id': item.id,
            'name': item.name,
            'start_date': self.date_formatter.format_for_display(data['start_date']),
            'end_date': self.date_formatter.format_for_display(data['end_date']),
        }

    def get_order_display(self, order_id: int, surface: str) -> Optional[List[Dict[str, Any]]]:
        """Display rows for every eligible item, None if the order does not exist"""
        order = self.order_repository.find_by_id(order_id)
        if order is None:
            return None

        rows = []
        for item in order.items:
            row = self.get_item_display(item, surface)
            if row is not None:
                rows.append(row)
        return rows

    def render_on_pdf_invoice(self, document_type: str, order: Order, item: OrderItem) -> Optional[Dict[str, Any]]:
        # Packing slips and other documents never show the dates
        if document_type != INVOICE_DOCUMENT_TYPE:
            return None

        return self.get_item_display(item, SURFACE_PDF_INVOICE)
