"""
Unit tests for MembershipRepository

Author: TM3
Date: 2025-11-20
"""
import os

import pytest
from unittest.mock import MagicMock, Mock, patch

from revenue_deferral.repositories.membership_repository import MembershipRepository, load_date_calculator
from revenue_deferral.services.membership_gateway import AvailableMembershipGateway


def _mock_connection(mock_get_conn, row):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    mock_cursor.fetchone.return_value = row
    return mock_conn, mock_cursor


class TestMembershipRepository:

    @patch('revenue_deferral.repositories.membership_repository.get_db_connection_dict')
    def test_get_post_meta(self, mock_get_conn):
        mock_conn, mock_cursor = _mock_connection(mock_get_conn, {'meta_value': '50'})

        assert MembershipRepository(Mock()).get_post_meta(100, 'membership_tier_post_id') == '50'
        assert mock_cursor.execute.call_args[0][1] == (100, 'membership_tier_post_id')
        mock_conn.close.assert_called_once()

    @patch('revenue_deferral.repositories.membership_repository.get_db_connection_dict')
    def test_get_post_meta_missing(self, mock_get_conn):
        _mock_connection(mock_get_conn, None)

        assert MembershipRepository(Mock()).get_post_meta(100, 'membership_tier_post_id') == ''

    @patch('revenue_deferral.repositories.membership_repository.get_db_connection_dict')
    def test_get_membership_from_order(self, mock_get_conn):
        _mock_connection(mock_get_conn, {'membership_post_id': 700, 'membership_status': 'active'})

        membership = MembershipRepository(Mock()).get_membership_from_order(999, 100)

        assert membership == {'membership_post_id': 700, 'membership_status': 'active'}

    def test_dates_come_from_calculator(self):
        calculator = Mock(return_value={'start_date': '2024-01-01T00:00:00+00:00'})

        dates = MembershipRepository(calculator).get_membership_dates(40, {'membership_post_id': 700})

        calculator.assert_called_once_with(40, {'membership_post_id': 700})
        assert dates == {'start_date': '2024-01-01T00:00:00+00:00'}

    @patch('revenue_deferral.repositories.membership_repository.get_db_connection_dict')
    def test_backs_available_gateway(self, mock_get_conn, logger):
        """Test the gateway reads authoritative dates through the repository"""
        mock_conn, mock_cursor = _mock_connection(mock_get_conn, None)
        mock_cursor.fetchone.side_effect = [
            {'meta_value': '2024-01-01T00:00:00+00:00'},
            {'meta_value': '2024-12-31T23:59:59+00:00'},
        ]
        gateway = AvailableMembershipGateway(MembershipRepository(Mock()), logger)

        dates = gateway.get_authoritative_membership_dates(700)

        assert dates.start_date == '2024-01-01T00:00:00+00:00'
        assert dates.end_date == '2024-12-31T23:59:59+00:00'
        assert mock_conn.close.call_count == 2


class TestLoadDateCalculator:
    """Test resolving the MEMBERSHIP_DATE_CALCULATOR setting"""

    def test_colon_path(self):
        assert load_date_calculator('os.path:join') is os.path.join

    def test_dotted_path(self):
        assert load_date_calculator(' os.path.join ') is os.path.join

    def test_not_callable(self):
        with pytest.raises(TypeError):
            load_date_calculator('os.path:sep')

    def test_missing_function(self):
        with pytest.raises(AttributeError):
            load_date_calculator('os.path:calculate_membership_dates')
