"""
Export Adapter - finance columns for order item and product exports

Author: TM3
Date: 2025-11-20
"""
import csv
import io
from typing import Any, Dict, List

from revenue_deferral.domain.order import Order, OrderItem
from revenue_deferral.domain.product import Product
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.line_item_meta import LineItemMeta
from revenue_deferral.services.product_finance_meta import ProductFinanceMeta

ITEM_COLUMNS = {
    'finance_gl_code': 'Finance GL Code',
    'finance_term_start': 'Finance Term Start Date',
    'finance_term_end': 'Finance Term End Date',
}

PRODUCT_COLUMNS = {
    'finance_gl_code': 'GL Code',
    'finance_deferred_required': 'Deferred Revenue Required',
    'finance_term_start': 'Term Start Date',
    'finance_term_end': 'Term End Date',
}

BASE_ITEM_COLUMNS = {
    'order_id': 'Order ID',
    'item_id': 'Item ID',
    'product_id': 'Product ID',
    'name': 'Product',
    'quantity': 'Quantity',
}


class ExportAdapter:

    def __init__(
        self,
        line_item_meta: LineItemMeta,
        product_meta: ProductFinanceMeta,
        date_formatter: DateFormatter
    ):
        self.line_item_meta = line_item_meta
        self.product_meta = product_meta
        self.date_formatter = date_formatter

    def add_export_columns(self, columns: Dict[str, str]) -> Dict[str, str]:
        return {**columns, **ITEM_COLUMNS}

    def add_product_export_columns(self, columns: Dict[str, str]) -> Dict[str, str]:
        return {**columns, **PRODUCT_COLUMNS}

    def add_export_data(self, data: Dict[str, Any], item: OrderItem) -> Dict[str, Any]:
        """Line item finance values, dates in display format"""
        finance = self.line_item_meta.get_line_item_data(item)

        return {
            **data,
            'finance_gl_code': finance['gl_code'],
            'finance_term_start': self.date_formatter.format_for_display(finance['start_date']),
            'finance_term_end': self.date_formatter.format_for_display(finance['end_date']),
        }

    def add_product_export_data(self, data: Dict[str, Any], product: Product) -> Dict[str, Any]:
        dates = self.product_meta.get_deferral_dates(product)

        return {
            **data,
            'finance_gl_code': self.product_meta.get_gl_code(product),
            'finance_deferred_required': 'yes' if self.product_meta.is_deferred_required(product) else 'no',
            'finance_term_start': self.date_formatter.format_for_display(dates['start_date']),
            'finance_term_end': self.date_formatter.format_for_display(dates['end_date']),
        }

    def build_order_rows(self, order: Order) -> List[Dict[str, Any]]:
        rows = []
        for item in order.items:
            base = {
                'order_id': order.id,
                'item_id': item.id,
                'product_id': item.effective_product_id,
                'name': item.name,
                'quantity': item.quantity,
            }
            rows.append(self.add_export_data(base, item))
        return rows

    def order_items_csv(self, order: Order) -> str:
        """CSV export of an order's line items with finance columns"""
        columns = self.add_export_columns(dict(BASE_ITEM_COLUMNS))

        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=list(columns.keys()))
        writer.writerow(columns)
        writer.writerows(self.build_order_rows(order))
        return output.getvalue()
