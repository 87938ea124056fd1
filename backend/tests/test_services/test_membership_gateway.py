"""
Unit tests for the membership gateways

Author: TM3
Date: 2025-11-20
"""
import pytest
from unittest.mock import Mock

from revenue_deferral.domain.membership import MembershipDates
from revenue_deferral.services.membership_gateway import (
    AvailableMembershipGateway,
    MembershipProvider,
    UnavailableMembershipGateway,
    build_membership_gateway,
)

POST_META = {
    (100, 'membership_tier_post_id'): '50',
    (50, 'membership_config_post_id'): '40',
    (700, 'membership_starts_at'): '2024-01-01T00:00:00+00:00',
    (700, 'membership_ends_at'): '2024-12-31T23:59:59+00:00',
}


@pytest.fixture
def provider():
    provider = Mock(spec=MembershipProvider)
    provider.get_post_meta.side_effect = lambda post_id, key: POST_META.get((post_id, key), '')
    provider.get_membership_dates.return_value = {
        'start_date': '2024-01-01T00:00:00+00:00',
        'end_date': '2024-12-31T23:59:59+00:00',
        'early_renew_at': '2024-12-01T00:00:00+00:00',
        'expires_at': '2025-01-31T23:59:59+00:00',
    }
    provider.get_membership_from_order.return_value = {'membership_post_id': 700}
    return provider


@pytest.fixture
def gateway(provider, logger):
    return AvailableMembershipGateway(provider, logger)


class TestBuildMembershipGateway:

    def test_without_provider(self, logger):
        gateway = build_membership_gateway(None, logger)

        assert isinstance(gateway, UnavailableMembershipGateway)
        assert gateway.is_available() is False

    def test_with_provider(self, provider, logger):
        gateway = build_membership_gateway(provider, logger)

        assert isinstance(gateway, AvailableMembershipGateway)
        assert gateway.is_available() is True


class TestUnavailableGateway:

    def test_lookups_return_none(self, logger):
        gateway = UnavailableMembershipGateway(logger)

        assert gateway.calculate_membership_dates(100) is None
        assert gateway.get_membership_from_order(999, 100) is None
        assert gateway.get_authoritative_membership_dates(700) is None
        logger.warning.assert_called_once()


class TestCalculateMembershipDates:
    """Test product -> tier -> config -> dates resolution"""

    def test_resolves_through_tier_and_config(self, gateway, provider, logger):
        dates = gateway.calculate_membership_dates(100)

        assert dates == MembershipDates(
            start_date='2024-01-01T00:00:00+00:00',
            end_date='2024-12-31T23:59:59+00:00',
            early_renew_at='2024-12-01T00:00:00+00:00',
            expires_at='2025-01-31T23:59:59+00:00',
        )
        provider.get_membership_dates.assert_called_once_with(40, None)
        logger.debug.assert_called_once()

    def test_renewal_passes_existing_membership(self, gateway, provider, logger):
        existing = {'membership_post_id': 700}

        gateway.calculate_membership_dates(100, existing)

        provider.get_membership_dates.assert_called_once_with(40, existing)
        assert logger.debug.call_args[0][1]['is_renewal'] is True

    def test_no_tier(self, gateway, provider, logger):
        assert gateway.calculate_membership_dates(200) is None

        logger.warning.assert_called_once()
        provider.get_membership_dates.assert_not_called()

    def test_no_config(self, gateway, provider, logger):
        provider.get_post_meta.side_effect = lambda post_id, key: '50' if key == 'membership_tier_post_id' else ''

        assert gateway.calculate_membership_dates(100) is None

        logger.warning.assert_called_once()
        assert logger.warning.call_args[0][1]['tier_id'] == '50'

    def test_incomplete_dates(self, gateway, provider, logger):
        provider.get_membership_dates.return_value = {'start_date': '2024-01-01T00:00:00+00:00'}

        assert gateway.calculate_membership_dates(100) is None

        logger.error.assert_called_once()
        assert logger.error.call_args[0][1]['config_id'] == 40

    def test_provider_exception(self, gateway, provider, logger):
        provider.get_membership_dates.side_effect = RuntimeError('config post deleted')

        assert gateway.calculate_membership_dates(100) is None

        context = logger.error.call_args[0][1]
        assert context['error'] == 'config post deleted'
        assert 'RuntimeError' in context['trace']


class TestAuthoritativeDates:

    def test_reads_membership_record(self, gateway):
        dates = gateway.get_authoritative_membership_dates(700)

        assert dates.start_date == '2024-01-01T00:00:00+00:00'
        assert dates.end_date == '2024-12-31T23:59:59+00:00'

    def test_missing_meta(self, gateway, logger):
        assert gateway.get_authoritative_membership_dates(701) is None

        logger.warning.assert_called_once()

    def test_provider_exception(self, gateway, provider, logger):
        provider.get_post_meta.side_effect = RuntimeError('boom')

        assert gateway.get_authoritative_membership_dates(700) is None

        logger.error.assert_called_once()


class TestMembershipFromOrder:

    def test_found(self, gateway, provider):
        assert gateway.get_membership_from_order(999, 100) == {'membership_post_id': 700}
        provider.get_membership_from_order.assert_called_once_with(999, 100)

    def test_not_found(self, gateway, provider):
        provider.get_membership_from_order.return_value = None

        assert gateway.get_membership_from_order(999, 100) is None

    def test_provider_exception(self, gateway, provider, logger):
        provider.get_membership_from_order.side_effect = RuntimeError('boom')

        assert gateway.get_membership_from_order(999, 100) is None

        logger.error.assert_called_once()
