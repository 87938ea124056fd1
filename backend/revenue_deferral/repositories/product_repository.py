"""
Product Repository - Data Access Layer for Products

Handles database queries for products, their categories and meta, and
returns Product domain models.

Author: TM3
Date: 2025-10-17
Updated: 2025-11-20 (categories and finance meta)
"""
from typing import Dict, List, Optional
from psycopg2.extras import Json
from revenue_deferral.domain.product import Product, ProductCategory
from revenue_deferral.core.database import get_db_connection_dict


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_rows_to_product(row: dict, category_rows: List[dict], meta_rows: List[dict]) -> Product:
        """Helper method to build a Product from its row, category rows and meta rows"""
        return Product(
            id=row['id'],
            name=row.get('name') or '',
            type=row.get('type') or 'simple',
            parent_id=row.get('parent_id'),
            categories=[
                ProductCategory(id=cat['id'], slug=cat['slug'], name=cat.get('name'))
                for cat in category_rows
            ],
            meta={meta['meta_key']: meta['meta_value'] for meta in meta_rows}
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID with categories and meta

        Args:
            product_id: Internal product ID

        Returns:
            Product or None if not found
        """
        if not product_id:
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, type, parent_id
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute("""
                SELECT c.id, c.slug, c.name
                FROM product_categories pc
                JOIN categories c ON pc.category_id = c.id
                WHERE pc.product_id = %s
                ORDER BY c.id
            """, (product_id,))
            category_rows = cursor.fetchall()

            cursor.execute("""
                SELECT meta_key, meta_value
                FROM product_meta
                WHERE product_id = %s
            """, (product_id,))
            meta_rows = cursor.fetchall()

            return self._map_rows_to_product(row, category_rows, meta_rows)

        finally:
            cursor.close()
            conn.close()

    def save_meta(self, product: Product, keys: Optional[List[str]] = None) -> None:
        """
        Upsert product meta

        Args:
            product: Product whose meta should be written
            keys: Only write these meta keys (default: all)
        """
        meta: Dict = product.meta if keys is None else {k: product.meta.get(k, '') for k in keys}

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            for meta_key, meta_value in meta.items():
                cursor.execute("""
                    INSERT INTO product_meta (product_id, meta_key, meta_value)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (product_id, meta_key)
                    DO UPDATE SET meta_value = EXCLUDED.meta_value
                """, (product.id, meta_key, Json(meta_value)))

            conn.commit()

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
