"""
Membership Gateway - facade over the optional membership subsystem

The membership subsystem may not be installed. build_membership_gateway()
returns either an AvailableMembershipGateway wrapping a MembershipProvider
or an UnavailableMembershipGateway whose lookups all come back empty.

Every call through the available gateway is fallible: missing config,
incomplete dates and provider exceptions are logged here and returned as
None, never raised.

Author: TM3
Date: 2025-11-20
"""
import logging
import traceback
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from revenue_deferral.core.logger import FinanceLogger
from revenue_deferral.domain.membership import (
    MembershipDates,
    MEMBERSHIP_CONFIG_KEY,
    MEMBERSHIP_ENDS_AT_KEY,
    MEMBERSHIP_STARTS_AT_KEY,
    MEMBERSHIP_TIER_KEY,
)


class MembershipProvider(ABC):
    """Contract the membership subsystem implements"""

    @abstractmethod
    def get_post_meta(self, post_id: int, key: str) -> Any:
        """Meta value of a membership/tier/config/product post, '' if absent"""

    @abstractmethod
    def get_membership_dates(self, config_id: int, existing_membership: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Term dates (ISO 8601) for a membership config, renewal-aware"""

    @abstractmethod
    def get_membership_from_order(self, order_id: int, product_id: int) -> Optional[Dict[str, Any]]:
        """Membership data created from an order line, None if there is none"""


class MembershipGateway(ABC):
    """Common interface of the available and unavailable gateways"""

    def __init__(self, logger: Optional[FinanceLogger] = None):
        self.logger = logger or FinanceLogger(logging.getLogger(__name__))

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def calculate_membership_dates(
        self,
        product_id: int,
        existing_membership: Optional[Dict[str, Any]] = None
    ) -> Optional[MembershipDates]:
        pass

    @abstractmethod
    def get_membership_from_order(self, order_id: int, product_id: int) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def get_authoritative_membership_dates(self, membership_post_id: int) -> Optional[MembershipDates]:
        pass


class UnavailableMembershipGateway(MembershipGateway):
    """Gateway used when the membership subsystem is not installed"""

    def is_available(self) -> bool:
        return False

    def calculate_membership_dates(self, product_id, existing_membership=None):
        self.logger.warning('Membership subsystem not available for date calculation', {
            'product_id': product_id,
        })
        return None

    def get_membership_from_order(self, order_id, product_id):
        return None

    def get_authoritative_membership_dates(self, membership_post_id):
        return None


class AvailableMembershipGateway(MembershipGateway):

    def __init__(self, provider: MembershipProvider, logger: Optional[FinanceLogger] = None):
        super().__init__(logger)
        self.provider = provider

    def is_available(self) -> bool:
        return True

    def calculate_membership_dates(
        self,
        product_id: int,
        existing_membership: Optional[Dict[str, Any]] = None
    ) -> Optional[MembershipDates]:
        """
        Calculate membership term dates for a product

        The product points at a membership tier, the tier at a membership
        config, and the config computes the dates (anniversary or calendar
        cycle, new or renewal).

        Returns:
            MembershipDates in ISO 8601, or None on failure
        """
        try:
            tier_id = self.provider.get_post_meta(product_id, MEMBERSHIP_TIER_KEY)
            if not tier_id:
                self.logger.warning('No membership tier found for product', {
                    'product_id': product_id,
                })
                return None

            config_id = self.provider.get_post_meta(int(tier_id), MEMBERSHIP_CONFIG_KEY)
            if not config_id:
                self.logger.warning('No membership config found for product', {
                    'product_id': product_id,
                    'tier_id': tier_id,
                })
                return None

            config_id = int(config_id)
            dates = self.provider.get_membership_dates(config_id, existing_membership) or {}

            if not dates.get('start_date') or not dates.get('end_date'):
                self.logger.error('Invalid dates returned from membership config', {
                    'product_id': product_id,
                    'config_id': config_id,
                    'dates': dates,
                })
                return None

            self.logger.debug('Calculated membership dates', {
                'product_id': product_id,
                'config_id': config_id,
                'is_renewal': bool(existing_membership),
                'start_date': dates['start_date'],
                'end_date': dates['end_date'],
            })

            return MembershipDates(
                start_date=dates['start_date'],
                end_date=dates['end_date'],
                early_renew_at=dates.get('early_renew_at') or '',
                expires_at=dates.get('expires_at') or '',
            )

        except Exception as e:
            self.logger.error('Exception calculating membership dates', {
                'product_id': product_id,
                'error': str(e),
                'trace': traceback.format_exc(),
            })
            return None

    def get_membership_from_order(self, order_id: int, product_id: int) -> Optional[Dict[str, Any]]:
        """Existing membership data for an order line, used for renewal dates"""
        try:
            membership = self.provider.get_membership_from_order(order_id, product_id)
            if not membership:
                return None

            return membership

        except Exception as e:
            self.logger.error('Exception getting membership from order', {
                'order_id': order_id,
                'product_id': product_id,
                'error': str(e),
                'trace': traceback.format_exc(),
            })
            return None

    def get_authoritative_membership_dates(self, membership_post_id: int) -> Optional[MembershipDates]:
        """
        Term dates stored on a persisted membership record

        These supersede anything calculated before the membership existed.
        """
        try:
            starts_at = self.provider.get_post_meta(membership_post_id, MEMBERSHIP_STARTS_AT_KEY)
            ends_at = self.provider.get_post_meta(membership_post_id, MEMBERSHIP_ENDS_AT_KEY)

            if not starts_at or not ends_at:
                self.logger.warning('Membership post missing date meta', {
                    'membership_post_id': membership_post_id,
                })
                return None

            return MembershipDates(start_date=str(starts_at), end_date=str(ends_at))

        except Exception as e:
            self.logger.error('Exception getting authoritative membership dates', {
                'membership_post_id': membership_post_id,
                'error': str(e),
                'trace': traceback.format_exc(),
            })
            return None


def build_membership_gateway(
    provider: Optional[MembershipProvider] = None,
    logger: Optional[FinanceLogger] = None
) -> MembershipGateway:
    if provider is None:
        return UnavailableMembershipGateway(logger)
    return AvailableMembershipGateway(provider, logger)
