"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models
with their line items, line item meta and notes.

Author: TM3
Date: 2025-10-17
Updated: 2025-11-20 (line item meta and order notes)
"""
from collections import defaultdict
from typing import Optional
from psycopg2.extras import Json
from revenue_deferral.domain.order import Order, OrderItem, OrderNote
from revenue_deferral.core.database import get_db_connection_dict


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with items and notes.
    """

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID with items, item meta and notes

        Args:
            order_id: Internal order ID

        Returns:
            Order with all related data or None if not found
        """
        if not order_id:
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, status, created_at
                FROM orders
                WHERE id = %s
            """, (order_id,))

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute("""
                SELECT id, order_id, product_id, variation_id, name, quantity
                FROM order_items
                WHERE order_id = %s
                ORDER BY id
            """, (order_id,))
            item_rows = cursor.fetchall()

            # Meta for all items in one query
            cursor.execute("""
                SELECT m.item_id, m.meta_key, m.meta_value
                FROM order_item_meta m
                JOIN order_items oi ON m.item_id = oi.id
                WHERE oi.order_id = %s
            """, (order_id,))
            meta_by_item = defaultdict(dict)
            for meta in cursor.fetchall():
                meta_by_item[meta['item_id']][meta['meta_key']] = meta['meta_value']

            cursor.execute("""
                SELECT id, order_id, content, created_at
                FROM order_notes
                WHERE order_id = %s
                ORDER BY created_at, id
            """, (order_id,))
            note_rows = cursor.fetchall()

            items = []
            for item in item_rows:
                item_dict = dict(item)
                item_dict['meta'] = meta_by_item.get(item['id'], {})
                items.append(OrderItem(**item_dict))

            return Order(
                id=row['id'],
                status=row['status'],
                created_at=row.get('created_at'),
                items=items,
                notes=[OrderNote(**dict(note)) for note in note_rows]
            )

        finally:
            cursor.close()
            conn.close()

    def save(self, order: Order) -> None:
        """
        Persist line item meta and pending notes in one transaction

        Notes are append-only: only notes without an ID are inserted, and
        they get their ID and timestamp back from the database.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            for item in order.items:
                for meta_key, meta_value in item.meta.items():
                    cursor.execute("""
                        INSERT INTO order_item_meta (item_id, meta_key, meta_value)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (item_id, meta_key)
                        DO UPDATE SET meta_value = EXCLUDED.meta_value
                    """, (item.id, meta_key, Json(meta_value)))

            for note in order.pending_notes:
                cursor.execute("""
                    INSERT INTO order_notes (order_id, content)
                    VALUES (%s, %s)
                    RETURNING id, created_at
                """, (order.id, note.content))
                inserted = cursor.fetchone()
                note.id = inserted['id']
                note.created_at = inserted['created_at']

            conn.commit()

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
