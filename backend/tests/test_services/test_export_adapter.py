"""
Unit tests for ExportAdapter

Author: TM3
Date: 2025-11-20
"""
import csv
import io

import pytest

from revenue_deferral.services.export_adapter import ExportAdapter, ITEM_COLUMNS


@pytest.fixture
def export_adapter(line_item_meta, product_meta, date_formatter):
    return ExportAdapter(line_item_meta, product_meta, date_formatter)


class TestExportAdapter:

    def test_columns_are_appended(self, export_adapter):
        columns = export_adapter.add_export_columns({'order_id': 'Order ID'})

        assert list(columns) == ['order_id', 'finance_gl_code', 'finance_term_start', 'finance_term_end']

    def test_item_export_data(self, export_adapter, dated_order):
        data = export_adapter.add_export_data({'item_id': 12}, dated_order.get_item(12))

        assert data == {
            'item_id': 12,
            'finance_gl_code': '4100-EVT',
            'finance_term_start': 'June 01, 2024',
            'finance_term_end': 'June 03, 2024',
        }

    def test_product_export_data(self, export_adapter, variation_product):
        data = export_adapter.add_product_export_data({}, variation_product)

        assert data['finance_gl_code'] == '4000-LVL'
        assert data['finance_deferred_required'] == 'no'
        assert data['finance_term_start'] == ''

    def test_order_items_csv(self, export_adapter, dated_order):
        rows = list(csv.reader(io.StringIO(export_adapter.order_items_csv(dated_order))))

        assert rows[0][-3:] == list(ITEM_COLUMNS.values())
        assert rows[1] == ['1000', '11', '100', 'Annual Membership', '1', '4000-MEM', 'January 01, 2024', 'December 31, 2024']
        assert rows[2][4] == '2'
        assert len(rows) == 3
