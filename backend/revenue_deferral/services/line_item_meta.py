"""
Line Item Meta - finance fields stored on order line items

Meta keys (per line item):
- _finance_start_date
- _finance_end_date
- _finance_gl_code

Every date write appends an audit note on the order.

Author: TM3
Date: 2025-11-20
"""
import logging
from typing import Dict, List, Optional

from revenue_deferral.core.logger import FinanceLogger
from revenue_deferral.domain.order import OrderItem, START_DATE_KEY, END_DATE_KEY, ITEM_GL_CODE_KEY
from revenue_deferral.domain.product import Product
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.product_finance_meta import (
    ProductFinanceMeta,
    NOTICE_END_BEFORE_START,
    NOTICE_END_DATE_REQUIRED,
)

DEFAULT_SOURCE = 'System'
EMPTY_LABEL = 'empty'


def _label(value: str) -> str:
    return value or EMPTY_LABEL


class LineItemMeta:
    """
    Order line item finance meta service

    Args:
        order_repository: Loads and saves orders
        product_repository: Loads products for line items
        product_meta: Product finance meta service
        date_formatter: Date validation and sanitizing
        logger: Finance logger
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        product_repository: ProductRepository,
        product_meta: ProductFinanceMeta,
        date_formatter: Optional[DateFormatter] = None,
        logger: Optional[FinanceLogger] = None
    ):
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.product_meta = product_meta
        self.date_formatter = date_formatter or DateFormatter()
        self.logger = logger or FinanceLogger(logging.getLogger(__name__))

    def populate_line_item_meta(self, item: OrderItem, product: Optional[Product]) -> None:
        """
        Copy product defaults onto a new line item

        The GL code is copied when set; static deferral dates only when
        both are set. The caller persists the item.
        """
        if product is None:
            return

        gl_code = self.product_meta.get_gl_code(product)
        if gl_code:
            item.update_meta(ITEM_GL_CODE_KEY, gl_code)

        dates = self.product_meta.get_deferral_dates(product)
        if dates['start_date'] and dates['end_date']:
            item.update_meta(START_DATE_KEY, dates['start_date'])
            item.update_meta(END_DATE_KEY, dates['end_date'])

    def populate_from_product(self, order_id: int, item_id: int) -> bool:
        """Populate and persist a line item that was just added to an order"""
        order = self.order_repository.find_by_id(order_id)
        if order is None:
            return False

        item = order.get_item(item_id)
        if item is None:
            return False

        product = self.product_repository.find_by_id(item.effective_product_id)
        if product is None:
            return False

        self.populate_line_item_meta(item, product)
        self.order_repository.save(order)
        return True

    def update_dates(
        self,
        order_id: int,
        item_id: int,
        start_date: str,
        end_date: str,
        source: str = DEFAULT_SOURCE
    ) -> bool:
        """
        Write line item dates for system/dynamic updates

        Always writes and always adds one audit note, even when the dates
        did not change.

        Returns:
            True on success, False if the order or item does not exist
        """
        order = self.order_repository.find_by_id(order_id)
        if order is None:
            return False

        item = order.get_item(item_id)
        if item is None:
            return False

        old_start = item.get_meta(START_DATE_KEY)
        old_end = item.get_meta(END_DATE_KEY)

        item.update_meta(START_DATE_KEY, start_date)
        item.update_meta(END_DATE_KEY, end_date)

        order.add_note(
            f"[{source}] changed Term Start Date: {_label(old_start)} → {start_date}, "
            f"Term End Date: {_label(old_end)} → {end_date}"
        )
        self.order_repository.save(order)

        self.logger.info('Line item dates updated automatically', {
            'order_id': order_id,
            'item_id': item_id,
            'start_date': start_date,
            'end_date': end_date,
            'source': source,
        })

        return True

    def get_line_item_data(self, item: OrderItem) -> Dict[str, str]:
        return {
            'start_date': item.get_meta(START_DATE_KEY),
            'end_date': item.get_meta(END_DATE_KEY),
            'gl_code': item.get_meta(ITEM_GL_CODE_KEY),
        }

    def save_line_item_meta(
        self,
        order_id: int,
        submitted: Dict[int, Dict[str, str]],
        user_name: Optional[str] = None
    ) -> List[str]:
        """
        Save manually edited line item dates

        Args:
            order_id: Order ID
            submitted: Item ID -> {'start_date', 'end_date'} as entered
            user_name: Who made the change, defaults to System

        Returns:
            Notices for rejected items (empty when everything was saved)
        """
        if not submitted:
            return []

        order = self.order_repository.find_by_id(order_id)
        if order is None:
            return []

        user_name = user_name or DEFAULT_SOURCE
        notices = []
        changed = False

        for item in order.items:
            if item.id not in submitted:
                continue

            values = submitted[item.id] or {}
            new_start = self.date_formatter.sanitize_date_input(values.get('start_date'))
            new_end = self.date_formatter.sanitize_date_input(values.get('end_date'))

            if new_start and new_end and not self.date_formatter.validate_date_range(new_start, new_end):
                notices.append(NOTICE_END_BEFORE_START)
                continue

            if new_start and not new_end:
                notices.append(NOTICE_END_DATE_REQUIRED)
                continue

            old_start = item.get_meta(START_DATE_KEY)
            old_end = item.get_meta(END_DATE_KEY)
            changes = []

            if old_start != new_start:
                item.update_meta(START_DATE_KEY, new_start)
                changes.append(f"Term Start Date: {_label(old_start)} → {_label(new_start)}")

            if old_end != new_end:
                item.update_meta(END_DATE_KEY, new_end)
                changes.append(f"Term End Date: {_label(old_end)} → {_label(new_end)}")

            if changes:
                order.add_note(f"[{user_name}] changed {', '.join(changes)}")
                changed = True

                self.logger.info('Line item finance meta updated', {
                    'order_id': order_id,
                    'item_id': item.id,
                    'changes': changes,
                    'user': user_name,
                })

        if changed:
            self.order_repository.save(order)

        return notices
