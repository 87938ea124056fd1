"""
Eligibility - which products and line items take part in finance dates

Handles:
- Product category eligibility (parent categories for variations)
- Membership category detection
- Surface visibility checks
- The "deferred revenue required" product flag

Every predicate fails closed: a product that cannot be resolved is never
eligible for anything.

Author: TM3
Date: 2025-11-20
"""
from typing import Any, Callable, Iterable, Optional, Union

from revenue_deferral.domain.product import Product, DEFERRED_REQUIRED_KEY
from revenue_deferral.services.finance_settings import FinanceSettings

DEFAULT_MEMBERSHIP_CATEGORY = 'membership'

ProductLookup = Callable[[int], Optional[Product]]
ProductRef = Union[Product, int, str, None]


def parse_deferred_flag(value: Any) -> bool:
    """
    Read the stored deferred revenue flag

    Only the literal string "yes" counts. Booleans, "true" and "1" are all
    False: the product form writes "yes"/"no" and nothing else.
    """
    return value == 'yes'


def resolve_effective_product(product: Optional[Product], lookup: ProductLookup) -> Optional[Product]:
    """
    Product whose categories and flags apply to `product`

    Variations resolve to their parent; a variation whose parent cannot be
    found resolves to None. Anything else resolves to itself.
    """
    if product is None:
        return None

    if product.is_variation() and product.parent_id:
        return lookup(product.parent_id)

    return product


class Eligibility:
    """
    Eligibility checks for finance date display and processing

    Args:
        settings: Finance settings facade
        product_lookup: Callable returning a Product by ID (or None)
        membership_categories: Category slugs that mark membership products
    """

    def __init__(
        self,
        settings: FinanceSettings,
        product_lookup: ProductLookup,
        membership_categories: Optional[Iterable[str]] = None
    ):
        self.settings = settings
        self.product_lookup = product_lookup
        self.membership_categories = frozenset(membership_categories or [DEFAULT_MEMBERSHIP_CATEGORY])

    def _load(self, product: ProductRef) -> Optional[Product]:
        if isinstance(product, Product):
            return product
        if isinstance(product, str) and product.strip().isdigit():
            product = int(product)
        if isinstance(product, int) and product:
            return self.product_lookup(product)
        return None

    def _effective(self, product: ProductRef) -> Optional[Product]:
        return resolve_effective_product(self._load(product), self.product_lookup)

    def is_eligible_for_display(self, product: ProductRef, surface: str, start_date: str, end_date: str) -> bool:
        """
        Check if a line item's dates may be shown to the customer on a surface

        Requirements:
        - Both dates set
        - Surface enabled in settings
        - Product (or parent for variations) in an eligible category
        """
        if not start_date or not end_date:
            return False

        if not self.is_surface_enabled(surface):
            return False

        product = self._load(product)
        if product is None:
            return False

        return self.is_product_in_eligible_categories(product)

    def is_product_in_eligible_categories(self, product: ProductRef) -> bool:
        eligible_category_ids = set(self.settings.get_eligible_categories())
        if not eligible_category_ids:
            return False

        check_product = self._effective(product)
        if check_product is None:
            return False

        product_category_ids = set(check_product.category_ids)
        if not product_category_ids:
            return False

        return bool(eligible_category_ids & product_category_ids)

    def is_surface_enabled(self, surface: str) -> bool:
        return self.settings.is_surface_enabled(surface)

    def is_membership_product(self, product: ProductRef) -> bool:
        """Check if the product sits in one of the membership categories"""
        check_product = self._effective(product)
        if check_product is None:
            return False

        return any(slug in self.membership_categories for slug in check_product.category_slugs)

    def is_deferred_revenue_required(self, product: ProductRef) -> bool:
        check_product = self._effective(product)
        if check_product is None:
            return False

        return parse_deferred_flag(check_product.get_meta(DEFERRED_REQUIRED_KEY))
