"""
FastAPI dependencies - builds the finance dates services per request

Repositories are the seams tests override (app.dependency_overrides).
The membership subsystem is optional: main.py registers it at startup
from MEMBERSHIP_DATE_CALCULATOR (configure_membership_provider()),
otherwise every request gets the unavailable gateway.

Author: TM3
Date: 2025-11-20
"""
import logging
from typing import Optional
from fastapi import Depends

from revenue_deferral.core.config import Settings, settings as app_settings
from revenue_deferral.repositories.membership_repository import MembershipRepository, load_date_calculator
from revenue_deferral.repositories.option_repository import OptionRepository, OptionStore
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.services.customer_display import CustomerDisplay
from revenue_deferral.services.date_formatter import DateFormatter
from revenue_deferral.services.dynamic_dates import DynamicDates
from revenue_deferral.services.eligibility import Eligibility
from revenue_deferral.services.export_adapter import ExportAdapter
from revenue_deferral.services.finance_settings import FinanceSettings
from revenue_deferral.services.line_item_meta import LineItemMeta
from revenue_deferral.services.membership_gateway import (
    MembershipGateway,
    MembershipProvider,
    build_membership_gateway,
)
from revenue_deferral.services.product_finance_meta import ProductFinanceMeta

logger = logging.getLogger(__name__)

_membership_provider: Optional[MembershipProvider] = None


def register_membership_provider(provider: Optional[MembershipProvider]) -> None:
    global _membership_provider
    _membership_provider = provider


def configure_membership_provider(config: Settings = app_settings) -> Optional[MembershipProvider]:
    """
    Register the membership subsystem named by MEMBERSHIP_DATE_CALCULATOR

    Called once at startup. Without the setting the provider is cleared and
    every request gets the unavailable gateway.
    """
    if not config.MEMBERSHIP_DATE_CALCULATOR:
        register_membership_provider(None)
        logger.info("Membership subsystem not configured, membership dates disabled")
        return None

    provider = MembershipRepository(load_date_calculator(config.MEMBERSHIP_DATE_CALCULATOR))
    register_membership_provider(provider)
    logger.info("Membership subsystem registered (%s)", config.MEMBERSHIP_DATE_CALCULATOR)
    return provider


def get_option_store() -> OptionStore:
    return OptionRepository()


def get_order_repository() -> OrderRepository:
    return OrderRepository()


def get_product_repository() -> ProductRepository:
    return ProductRepository()


def get_membership_gateway() -> MembershipGateway:
    return build_membership_gateway(_membership_provider)


def get_date_formatter() -> DateFormatter:
    return DateFormatter(app_settings.DISPLAY_DATE_FORMAT)


def get_finance_settings(store: OptionStore = Depends(get_option_store)) -> FinanceSettings:
    return FinanceSettings(store)


def get_eligibility(
    settings: FinanceSettings = Depends(get_finance_settings),
    product_repository: ProductRepository = Depends(get_product_repository)
) -> Eligibility:
    return Eligibility(settings, product_repository.find_by_id, app_settings.get_membership_categories())


def get_product_finance_meta(
    product_repository: ProductRepository = Depends(get_product_repository),
    date_formatter: DateFormatter = Depends(get_date_formatter)
) -> ProductFinanceMeta:
    return ProductFinanceMeta(product_repository, date_formatter)


def get_line_item_meta(
    order_repository: OrderRepository = Depends(get_order_repository),
    product_repository: ProductRepository = Depends(get_product_repository),
    product_meta: ProductFinanceMeta = Depends(get_product_finance_meta),
    date_formatter: DateFormatter = Depends(get_date_formatter)
) -> LineItemMeta:
    return LineItemMeta(order_repository, product_repository, product_meta, date_formatter)


def get_dynamic_dates(
    settings: FinanceSettings = Depends(get_finance_settings),
    line_item_meta: LineItemMeta = Depends(get_line_item_meta),
    membership_gateway: MembershipGateway = Depends(get_membership_gateway),
    eligibility: Eligibility = Depends(get_eligibility),
    order_repository: OrderRepository = Depends(get_order_repository),
    product_repository: ProductRepository = Depends(get_product_repository),
    date_formatter: DateFormatter = Depends(get_date_formatter)
) -> DynamicDates:
    return DynamicDates(
        settings,
        line_item_meta,
        membership_gateway,
        eligibility,
        order_repository,
        product_repository,
        date_formatter
    )


def get_customer_display(
    eligibility: Eligibility = Depends(get_eligibility),
    line_item_meta: LineItemMeta = Depends(get_line_item_meta),
    order_repository: OrderRepository = Depends(get_order_repository),
    product_repository: ProductRepository = Depends(get_product_repository),
    date_formatter: DateFormatter = Depends(get_date_formatter)
) -> CustomerDisplay:
    return CustomerDisplay(eligibility, line_item_meta, order_repository, product_repository, date_formatter)


def get_export_adapter(
    line_item_meta: LineItemMeta = Depends(get_line_item_meta),
    product_meta: ProductFinanceMeta = Depends(get_product_finance_meta),
    date_formatter: DateFormatter = Depends(get_date_formatter)
) -> ExportAdapter:
    return ExportAdapter(line_item_meta, product_meta, date_formatter)
