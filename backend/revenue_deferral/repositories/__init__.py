"""
Repositories - PostgreSQL access for orders, products and options

Each repository opens a connection per call and returns domain models.
MembershipRepository is imported directly by hosts that wire the
membership subsystem.

Author: TM3
Date: 2025-11-20
"""
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.repositories.option_repository import OptionRepository, OptionStore, InMemoryOptionStore

__all__ = [
    'ProductRepository',
    'OrderRepository',
    'OptionRepository',
    'OptionStore',
    'InMemoryOptionStore',
]
