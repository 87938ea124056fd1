"""
Unit tests for the option stores

Author: TM3
Date: 2025-11-20
"""
from unittest.mock import MagicMock, patch

from revenue_deferral.repositories.option_repository import InMemoryOptionStore, OptionRepository


class TestInMemoryOptionStore:

    def test_get_and_update(self):
        store = InMemoryOptionStore({'finance_enable_system': '1'})

        assert store.get('finance_enable_system') == '1'
        assert store.get('finance_trigger_completed', '0') == '0'
        assert store.update('finance_trigger_completed', '1') is True
        assert store.get('finance_trigger_completed') == '1'

    def test_initial_options_are_copied(self):
        options = {'finance_enable_system': '1'}
        store = InMemoryOptionStore(options)
        store.update('finance_enable_system', '0')

        assert options['finance_enable_system'] == '1'


class TestOptionRepository:

    @patch('revenue_deferral.repositories.option_repository.get_db_connection_dict')
    def test_get_returns_stored_value(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {'option_value': [10, 20]}

        assert OptionRepository().get('finance_customer_visible_categories') == [10, 20]
        assert mock_cursor.execute.call_args[0][1] == ('finance_customer_visible_categories',)
        mock_conn.close.assert_called_once()

    @patch('revenue_deferral.repositories.option_repository.get_db_connection_dict')
    def test_get_returns_default_when_missing(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        assert OptionRepository().get('finance_enable_system', '0') == '0'

    @patch('revenue_deferral.repositories.option_repository.get_db_connection_dict')
    def test_update_commits(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor

        assert OptionRepository().update('finance_enable_system', '1') is True

        mock_conn.commit.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()
