"""
Domain models - orders, products and membership dates

Pydantic models for the records the finance dates feature reads and
writes. Meta key constants live next to the model that carries them.

Author: TM3
Date: 2025-11-20
"""
from revenue_deferral.domain.product import Product, ProductCategory
from revenue_deferral.domain.order import Order, OrderItem, OrderNote
from revenue_deferral.domain.membership import MembershipDates

__all__ = ['Product', 'ProductCategory', 'Order', 'OrderItem', 'OrderNote', 'MembershipDates']
