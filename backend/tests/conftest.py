"""
Pytest fixtures and configuration for Revenue Deferral tests

Services are tested against in-memory repositories; repository tests mock
the database connection instead.

Author: TM3
Date: 2025-11-20
"""
import pytest
from unittest.mock import Mock

from revenue_deferral.core.logger import FinanceLogger
from revenue_deferral.domain.order import Order, OrderItem, START_DATE_KEY, END_DATE_KEY, ITEM_GL_CODE_KEY
from revenue_deferral.domain.product import (
    Product,
    ProductCategory,
    DEFERRED_REQUIRED_KEY,
    GL_CODE_KEY,
    PRODUCT_TYPE_VARIABLE,
    PRODUCT_TYPE_VARIATION,
)
from revenue_deferral.repositories.option_repository import InMemoryOptionStore
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.eligibility import Eligibility
from revenue_deferral.services.finance_settings import FinanceSettings
from revenue_deferral.services.line_item_meta import LineItemMeta
from revenue_deferral.services.product_finance_meta import ProductFinanceMeta

MEMBERSHIP_CATEGORY = ProductCategory(id=10, slug='membership', name='Membership')
EVENTS_CATEGORY = ProductCategory(id=20, slug='events', name='Events')


class FakeOrderRepository:
    """OrderRepository stand-in that keeps orders in a dict"""

    def __init__(self, orders=None):
        self.orders = {order.id: order for order in (orders or [])}
        self.saved = []
        self._next_note_id = 1

    def find_by_id(self, order_id):
        return self.orders.get(order_id)

    def save(self, order):
        for note in order.pending_notes:
            note.id = self._next_note_id
            self._next_note_id += 1
        self.orders[order.id] = order
        self.saved.append(order.id)


class FakeProductRepository:
    """ProductRepository stand-in that keeps products in a dict"""

    def __init__(self, products=None):
        self.products = {product.id: product for product in (products or [])}
        self.saved_meta = []

    def find_by_id(self, product_id):
        return self.products.get(product_id)

    def save_meta(self, product, keys=None):
        self.products[product.id] = product
        self.saved_meta.append((product.id, keys))


@pytest.fixture
def logger():
    """FinanceLogger mock, assert on .info/.warning/.error calls"""
    return Mock(spec=FinanceLogger)


@pytest.fixture
def date_formatter():
    return DateFormatter('%B %d, %Y')


@pytest.fixture
def option_store():
    """Finance dates enabled, only the default triggers"""
    return InMemoryOptionStore({
        'finance_enable_system': '1',
        'finance_customer_visible_categories': [MEMBERSHIP_CATEGORY.id],
        'finance_visibility_surfaces': ['order_confirmation', 'emails', 'pdf_invoice'],
    })


@pytest.fixture
def finance_settings(option_store):
    return FinanceSettings(option_store)


@pytest.fixture
def membership_product():
    """Product 100: membership category, deferred revenue required"""
    return Product(
        id=100,
        name='Annual Membership',
        categories=[MEMBERSHIP_CATEGORY],
        meta={
            DEFERRED_REQUIRED_KEY: 'yes',
            GL_CODE_KEY: '4000-MEM',
        }
    )


@pytest.fixture
def event_product():
    """Product 200: events category, no deferred revenue"""
    return Product(
        id=200,
        name='Conference Ticket',
        categories=[EVENTS_CATEGORY],
        meta={GL_CODE_KEY: '4100-EVT'}
    )


@pytest.fixture
def variable_product():
    """Product 300: variable membership product, variations 301 and 302"""
    return Product(
        id=300,
        name='Membership Levels',
        type=PRODUCT_TYPE_VARIABLE,
        categories=[MEMBERSHIP_CATEGORY],
        meta={
            DEFERRED_REQUIRED_KEY: 'yes',
            GL_CODE_KEY: '4000-LVL',
        }
    )


@pytest.fixture
def variation_product():
    """Variation 301 of product 300 (no categories of its own)"""
    return Product(id=301, name='Membership Levels - Gold', type=PRODUCT_TYPE_VARIATION, parent_id=300)


@pytest.fixture
def product_repository(membership_product, event_product, variable_product, variation_product):
    return FakeProductRepository([membership_product, event_product, variable_product, variation_product])


@pytest.fixture
def sample_order():
    """Order 999 (draft): item 1 is product 100, item 2 is product 200"""
    return Order(
        id=999,
        status='draft',
        items=[
            OrderItem(id=1, order_id=999, product_id=100, name='Annual Membership'),
            OrderItem(id=2, order_id=999, product_id=200, name='Conference Ticket'),
        ]
    )


@pytest.fixture
def dated_order():
    """Order 1000 (completed) with finance meta on both items"""
    return Order(
        id=1000,
        status='completed',
        items=[
            OrderItem(id=11, order_id=1000, product_id=100, name='Annual Membership', meta={
                START_DATE_KEY: '2024-01-01',
                END_DATE_KEY: '2024-12-31',
                ITEM_GL_CODE_KEY: '4000-MEM',
            }),
            OrderItem(id=12, order_id=1000, product_id=200, name='Conference Ticket', quantity=2, meta={
                START_DATE_KEY: '2024-06-01',
                END_DATE_KEY: '2024-06-03',
                ITEM_GL_CODE_KEY: '4100-EVT',
            }),
        ]
    )


@pytest.fixture
def order_repository(sample_order, dated_order):
    return FakeOrderRepository([sample_order, dated_order])


@pytest.fixture
def eligibility(finance_settings, product_repository):
    return Eligibility(finance_settings, product_repository.find_by_id, ['membership'])


@pytest.fixture
def product_meta(product_repository, date_formatter, logger):
    return ProductFinanceMeta(product_repository, date_formatter, logger)


@pytest.fixture
def line_item_meta(order_repository, product_repository, product_meta, date_formatter, logger):
    return LineItemMeta(order_repository, product_repository, product_meta, date_formatter, logger)
