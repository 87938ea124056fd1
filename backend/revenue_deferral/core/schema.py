"""
Database schema for the finance dates tables

Orders, products and memberships are owned by the host; these statements
create the columns this service reads plus the tables it writes
(order_item_meta, order_notes, product_meta, finance_options).

Author: TM3
Date: 2025-11-20
"""
import logging
from typing import List

from .database import get_db_connection

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS categories (
        id SERIAL PRIMARY KEY,
        slug VARCHAR(200) NOT NULL UNIQUE,
        name VARCHAR(200)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        id SERIAL PRIMARY KEY,
        name VARCHAR(500) NOT NULL DEFAULT '',
        type VARCHAR(50) NOT NULL DEFAULT 'simple',
        parent_id INTEGER REFERENCES products(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_categories (
        product_id INTEGER NOT NULL REFERENCES products(id) ON DELETE CASCADE,
        category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
        PRIMARY KEY (product_id, category_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_meta (
        id SERIAL PRIMARY KEY,
        product_id INTEGER NOT NULL REFERENCES products(id) ON DELETE CASCADE,
        meta_key VARCHAR(255) NOT NULL,
        meta_value JSONB,
        UNIQUE (product_id, meta_key)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        id SERIAL PRIMARY KEY,
        status VARCHAR(50) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_items (
        id SERIAL PRIMARY KEY,
        order_id INTEGER NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
        product_id INTEGER,
        variation_id INTEGER,
        name VARCHAR(500) NOT NULL DEFAULT '',
        quantity INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_item_meta (
        id SERIAL PRIMARY KEY,
        item_id INTEGER NOT NULL REFERENCES order_items(id) ON DELETE CASCADE,
        meta_key VARCHAR(255) NOT NULL,
        meta_value JSONB,
        UNIQUE (item_id, meta_key)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_notes (
        id SERIAL PRIMARY KEY,
        order_id INTEGER NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
        content TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS finance_options (
        option_name VARCHAR(255) PRIMARY KEY,
        option_value JSONB
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS post_meta (
        id SERIAL PRIMARY KEY,
        post_id INTEGER NOT NULL,
        meta_key VARCHAR(255) NOT NULL,
        meta_value TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS memberships (
        id SERIAL PRIMARY KEY,
        parent_order_id INTEGER REFERENCES orders(id),
        product_id INTEGER,
        starts_at VARCHAR(40),
        ends_at VARCHAR(40),
        status VARCHAR(50)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_order_items_order_id ON order_items(order_id)",
    "CREATE INDEX IF NOT EXISTS idx_order_notes_order_id ON order_notes(order_id)",
    "CREATE INDEX IF NOT EXISTS idx_post_meta_post_key ON post_meta(post_id, meta_key)",
    "CREATE INDEX IF NOT EXISTS idx_memberships_order_product ON memberships(parent_order_id, product_id)",
]


def create_schema(dry_run: bool = False) -> int:
    """
    Create the tables in one transaction

    Returns:
        Number of statements executed (or that would be, with dry_run)
    """
    if dry_run:
        for statement in SCHEMA_STATEMENTS:
            logger.info("[DRY RUN] %s", " ".join(statement.split()))
        return len(SCHEMA_STATEMENTS)

    conn = get_db_connection()
    cursor = conn.cursor()

    try:
        for statement in SCHEMA_STATEMENTS:
            cursor.execute(statement)
        conn.commit()
        logger.info("Finance schema created (%d statements)", len(SCHEMA_STATEMENTS))
        return len(SCHEMA_STATEMENTS)

    except Exception:
        conn.rollback()
        raise

    finally:
        cursor.close()
        conn.close()
