"""
Membership Repository - reads membership subsystem data

Implements the lookup half of MembershipProvider against the membership
subsystem's tables (post_meta, memberships). Term date arithmetic belongs
to the membership subsystem and is injected as a calculator callable.

Author: TM3
Date: 2025-11-20
"""
import importlib
from typing import Any, Callable, Dict, Optional

from revenue_deferral.core.database import get_db_connection_dict
from revenue_deferral.services.membership_gateway import MembershipProvider

# (config_id, existing_membership) -> {'start_date', 'end_date', 'early_renew_at', 'expires_at'}
DateCalculator = Callable[[int, Optional[Dict[str, Any]]], Dict[str, Any]]


def load_date_calculator(path: str) -> DateCalculator:
    """
    Import the membership subsystem date calculator

    Args:
        path: "package.module:function" (or "package.module.function")

    Raises:
        ImportError, AttributeError, ValueError: path does not resolve
        TypeError: path resolves to something that is not callable
    """
    module_name, _, attribute = path.strip().partition(":")
    if not attribute:
        module_name, _, attribute = module_name.rpartition(".")

    calculator = getattr(importlib.import_module(module_name), attribute)
    if not callable(calculator):
        raise TypeError(f"Membership date calculator {path} is not callable")
    return calculator


class MembershipRepository(MembershipProvider):
    """
    Repository for membership posts and their meta

    Args:
        date_calculator: Membership subsystem entry point that computes the
            term dates for a membership config
    """

    def __init__(self, date_calculator: DateCalculator):
        self.date_calculator = date_calculator

    def get_post_meta(self, post_id: int, key: str) -> Any:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT meta_value
                FROM post_meta
                WHERE post_id = %s AND meta_key = %s
                LIMIT 1
            """, (post_id, key))

            row = cursor.fetchone()
            return row['meta_value'] if row else ''

        finally:
            cursor.close()
            conn.close()

    def get_membership_dates(self, config_id: int, existing_membership: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.date_calculator(config_id, existing_membership)

    def get_membership_from_order(self, order_id: int, product_id: int) -> Optional[Dict[str, Any]]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    id AS membership_post_id,
                    parent_order_id AS membership_parent_order_id,
                    product_id AS membership_product_id,
                    starts_at AS membership_starts_at,
                    ends_at AS membership_ends_at,
                    status AS membership_status
                FROM memberships
                WHERE parent_order_id = %s AND product_id = %s
                ORDER BY id DESC
                LIMIT 1
            """, (order_id, product_id))

            row = cursor.fetchone()
            return dict(row) if row else None

        finally:
            cursor.close()
            conn.close()
