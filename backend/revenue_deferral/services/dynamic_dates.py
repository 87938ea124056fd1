"""
Dynamic Dates Service

Writes membership term dates to order line items automatically based on:
- Order status triggers (configured in finance settings)
- Membership product detection
- Membership creation/renewal events (authoritative dates)

Entry points never raise: every skip or failure is logged and the caller
(the host's event dispatcher) always sees normal completion.

Author: TM3
Date: 2025-11-20
"""
import logging
from typing import Any, Dict, Optional

from revenue_deferral.core.logger import FinanceLogger
from revenue_deferral.domain.membership import REQUIRED_EVENT_KEYS
from revenue_deferral.domain.order import Order, OrderItem
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.eligibility import Eligibility
from revenue_deferral.services.finance_settings import FinanceSettings
from revenue_deferral.services.line_item_meta import LineItemMeta
from revenue_deferral.services.membership_gateway import MembershipGateway

SOURCE_DYNAMIC = 'System'
SOURCE_MEMBERSHIP_CREATED = 'System (Membership Created)'


class DynamicDates:
    """
    Orchestrates dynamic date writes for order and membership events

    Handles:
    - on_order_status_changed: order entered a trigger status
    - on_order_created: order created directly in a trigger status
    - on_membership_created: membership record created or renewed
    """

    def __init__(
        self,
        settings: FinanceSettings,
        line_item_meta: LineItemMeta,
        membership_gateway: MembershipGateway,
        eligibility: Eligibility,
        order_repository: OrderRepository,
        product_repository: ProductRepository,
        date_formatter: Optional[DateFormatter] = None,
        logger: Optional[FinanceLogger] = None
    ):
        self.settings = settings
        self.line_item_meta = line_item_meta
        self.membership_gateway = membership_gateway
        self.eligibility = eligibility
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.date_formatter = date_formatter or DateFormatter()
        self.logger = logger or FinanceLogger(logging.getLogger(__name__))

    def on_order_status_changed(self, order_id: int, old_status: str, new_status: str) -> None:
        try:
            if not self.settings.is_system_enabled():
                return

            if not self.settings.is_trigger_status(new_status):
                return

            order = self.order_repository.find_by_id(order_id)
            if order is None:
                self.logger.warning('Order not found for status change', {
                    'order_id': order_id,
                    'old_status': old_status,
                    'new_status': new_status,
                })
                return

            self._write_dynamic_dates(order, new_status)

        except Exception:
            self.logger.exception('Unexpected error writing dynamic dates on status change', {
                'order_id': order_id,
                'new_status': new_status,
            })

    def on_order_created(self, order_id: int, order: Order) -> None:
        try:
            if not self.settings.is_system_enabled():
                return

            status = order.get_status()

            # Non-trigger orders return before the gateway is consulted
            if not self.settings.is_trigger_status(status):
                return

            self._write_dynamic_dates(order, status)

        except Exception:
            self.logger.exception('Unexpected error writing dynamic dates on order creation', {
                'order_id': order_id,
            })

    def on_membership_created(
        self,
        membership: Dict[str, Any],
        is_renewal: bool = False,
        is_upgrade: bool = False
    ) -> None:
        """
        Overwrite line item dates with the membership record's own dates

        Only the first line item matching the membership product is
        updated; any failure ends the call.
        """
        try:
            if not self.settings.is_system_enabled():
                return

            if not self.membership_gateway.is_available():
                return

            membership_post_id, order_id, product_id = (membership.get(key) for key in REQUIRED_EVENT_KEYS)

            if not membership_post_id or not order_id or not product_id:
                self.logger.warning('Membership created but missing required data', {
                    'membership_post_id': membership_post_id,
                    'order_id': order_id,
                    'product_id': product_id,
                })
                return

            membership_post_id, order_id, product_id = int(membership_post_id), int(order_id), int(product_id)

            dates = self.membership_gateway.get_authoritative_membership_dates(membership_post_id)
            if dates is None or not dates.is_complete:
                self.logger.warning('Membership created but no authoritative dates found', {
                    'membership_post_id': membership_post_id,
                    'order_id': order_id,
                })
                return

            start_date = self.date_formatter.from_iso_8601(dates.start_date)
            end_date = self.date_formatter.from_iso_8601(dates.end_date)

            if not start_date or not end_date:
                self.logger.error('Failed to convert authoritative dates from ISO 8601', {
                    'membership_post_id': membership_post_id,
                    'raw_dates': dates.model_dump(),
                })
                return

            order = self.order_repository.find_by_id(order_id)
            if order is None:
                self.logger.error('Order not found for membership', {
                    'order_id': order_id,
                    'membership_post_id': membership_post_id,
                })
                return

            item = next((item for item in order.items if item.matches_product(product_id)), None)
            if item is None:
                self.logger.warning('No line item matches membership product', {
                    'order_id': order_id,
                    'product_id': product_id,
                    'membership_post_id': membership_post_id,
                })
                return

            if not self.line_item_meta.update_dates(order_id, item.id, start_date, end_date, SOURCE_MEMBERSHIP_CREATED):
                self.logger.warning('Failed to write authoritative membership dates', {
                    'order_id': order_id,
                    'item_id': item.id,
                    'membership_post_id': membership_post_id,
                })
                return

            self.logger.info('Authoritative membership dates written to line item', {
                'membership_post_id': membership_post_id,
                'order_id': order_id,
                'item_id': item.id,
                'product_id': product_id,
                'start_date': start_date,
                'end_date': end_date,
                'is_renewal': is_renewal,
                'is_upgrade': is_upgrade,
            })

        except Exception:
            self.logger.exception('Unexpected error writing authoritative membership dates', {
                'membership': membership,
            })

    def _write_dynamic_dates(self, order: Order, status: str) -> None:
        """Write calculated membership dates on every eligible line item"""
        if not self.membership_gateway.is_available():
            self.logger.debug('Membership subsystem not available, skipping dynamic dates', {
                'order_id': order.id,
                'status': status,
            })
            return

        for item_id, item in order.get_items().items():
            try:
                self._write_item_dates(order, item_id, item, status)
            except Exception:
                self.logger.exception('Unexpected error writing dynamic dates for line item', {
                    'order_id': order.id,
                    'item_id': item_id,
                })

    def _write_item_dates(self, order: Order, item_id: int, item: OrderItem, status: str) -> None:
        product = self.product_repository.find_by_id(item.effective_product_id)
        if product is None:
            return

        if not self.eligibility.is_membership_product(product):
            return

        if not self.eligibility.is_deferred_revenue_required(product):
            return

        dates = self.membership_gateway.calculate_membership_dates(product.id)
        if dates is None or not dates.is_complete:
            self.logger.warning('Failed to calculate membership dates', {
                'order_id': order.id,
                'item_id': item_id,
                'product_id': product.id,
            })
            return

        start_date = self.date_formatter.from_iso_8601(dates.start_date)
        end_date = self.date_formatter.from_iso_8601(dates.end_date)

        if not start_date or not end_date:
            self.logger.error('Failed to convert dates from ISO 8601', {
                'order_id': order.id,
                'item_id': item_id,
                'raw_dates': dates.model_dump(),
            })
            return

        if not self.line_item_meta.update_dates(order.id, item_id, start_date, end_date, SOURCE_DYNAMIC):
            self.logger.warning('Failed to write dynamic dates', {
                'order_id': order.id,
                'item_id': item_id,
            })
            return

        self.logger.info('Dynamic dates written for membership product', {
            'order_id': order.id,
            'item_id': item_id,
            'product_id': product.id,
            'status': status,
            'start_date': start_date,
            'end_date': end_date,
        })
