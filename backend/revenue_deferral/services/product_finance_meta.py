"""
Product Finance Meta - finance fields stored on products

- GL code (variations use the parent's)
- Deferred revenue required flag ("yes"/"no")
- Static deferral dates (variations inherit missing values from the parent)

Author: TM3
Date: 2025-11-20
"""
import logging
from typing import Dict, List, Optional

from revenue_deferral.core.logger import FinanceLogger
from revenue_deferral.domain.product import (
    Product,
    DEFERRAL_END_DATE_KEY,
    DEFERRAL_START_DATE_KEY,
    DEFERRED_REQUIRED_KEY,
    GL_CODE_KEY,
)
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.eligibility import parse_deferred_flag

NOTICE_END_DATE_REQUIRED = 'Finance: End date is required when start date is set.'
NOTICE_END_BEFORE_START = 'Finance: End date must be greater than or equal to start date.'


class ProductFinanceMeta:
    """Reads and writes the finance meta of products"""

    def __init__(
        self,
        product_repository: ProductRepository,
        date_formatter: Optional[DateFormatter] = None,
        logger: Optional[FinanceLogger] = None
    ):
        self.product_repository = product_repository
        self.date_formatter = date_formatter or DateFormatter()
        self.logger = logger or FinanceLogger(logging.getLogger(__name__))

    def _parent(self, product: Product) -> Optional[Product]:
        if product.is_variation() and product.parent_id:
            return self.product_repository.find_by_id(product.parent_id)
        return None

    def get_gl_code(self, product: Optional[Product]) -> str:
        if product is None:
            return ''

        parent = self._parent(product)
        if parent is not None:
            return str(parent.get_meta(GL_CODE_KEY))

        return str(product.get_meta(GL_CODE_KEY))

    def get_deferral_dates(self, product: Optional[Product]) -> Dict[str, str]:
        """Static deferral dates, variations fall back to the parent per field"""
        if product is None:
            return {'start_date': '', 'end_date': ''}

        start_date = product.get_meta(DEFERRAL_START_DATE_KEY)
        end_date = product.get_meta(DEFERRAL_END_DATE_KEY)

        if product.is_variation() and (not start_date or not end_date):
            parent = self._parent(product)
            if parent is not None:
                if not start_date:
                    start_date = parent.get_meta(DEFERRAL_START_DATE_KEY)
                if not end_date:
                    end_date = parent.get_meta(DEFERRAL_END_DATE_KEY)

        return {
            'start_date': start_date,
            'end_date': end_date,
        }

    def is_deferred_required(self, product: Optional[Product]) -> bool:
        if product is None:
            return False
        return parse_deferred_flag(product.get_meta(DEFERRED_REQUIRED_KEY))

    def validate_product_dates(self, product: Product) -> List[str]:
        """Notices for an inconsistent pair of static deferral dates"""
        start_date = product.get_meta(DEFERRAL_START_DATE_KEY)
        end_date = product.get_meta(DEFERRAL_END_DATE_KEY)

        if not start_date and not end_date:
            return []

        notices = []
        if start_date and not end_date:
            notices.append(NOTICE_END_DATE_REQUIRED)

        if start_date and end_date and not self.date_formatter.validate_date_range(start_date, end_date):
            notices.append(NOTICE_END_BEFORE_START)

        return notices

    def update_product_meta(
        self,
        product_id: int,
        gl_code: Optional[str] = None,
        deferred_required: Optional[bool] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> Optional[Product]:
        """
        Update finance meta of a product

        Deferral dates are ignored for variable products (their variations
        carry them). Returns the updated product, or None if not found.
        """
        product = self.product_repository.find_by_id(product_id)
        if product is None:
            return None

        keys = []

        if gl_code is not None:
            product.update_meta(GL_CODE_KEY, gl_code.strip())
            keys.append(GL_CODE_KEY)

        if deferred_required is not None:
            product.update_meta(DEFERRED_REQUIRED_KEY, 'yes' if deferred_required else 'no')
            keys.append(DEFERRED_REQUIRED_KEY)

        if not product.is_variable():
            if start_date is not None:
                product.update_meta(DEFERRAL_START_DATE_KEY, self.date_formatter.sanitize_date_input(start_date))
                keys.append(DEFERRAL_START_DATE_KEY)
            if end_date is not None:
                product.update_meta(DEFERRAL_END_DATE_KEY, self.date_formatter.sanitize_date_input(end_date))
                keys.append(DEFERRAL_END_DATE_KEY)

        if keys:
            self.product_repository.save_meta(product, keys)
            self.logger.info('Product finance meta updated', {
                'product_id': product_id,
                'keys': keys,
            })

        return product
