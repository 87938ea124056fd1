#!/usr/bin/env python3
"""
Script: run_001_create_finance_tables.py
Purpose: Create the tables used by the revenue deferral service

Usage:
    cd backend && source venv/bin/activate
    python scripts/migrations/run_001_create_finance_tables.py [--dry-run]

Options:
    --dry-run    Log the statements without touching the database
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).parent.parent.parent

env_path = BACKEND_DIR / '.env.development'
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv(BACKEND_DIR / '.env')

from revenue_deferral.core.config import settings
from revenue_deferral.core.logger import setup_logging
from revenue_deferral.core.schema import create_schema

logger = logging.getLogger("revenue_deferral.migrations")


def main():
    parser = argparse.ArgumentParser(description='Create revenue deferral tables')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be done without making changes')
    args = parser.parse_args()

    setup_logging(settings)

    logger.info("Migration 001: create finance tables (%s, %s)",
                datetime.now().isoformat(), 'DRY RUN' if args.dry_run else 'EXECUTE')

    if not args.dry_run and not settings.DATABASE_URL:
        logger.error("DATABASE_URL not set")
        sys.exit(1)

    try:
        count = create_schema(dry_run=args.dry_run)
    except Exception as e:
        logger.error("Migration rolled back: %s", e)
        sys.exit(1)

    logger.info("Done: %d statements%s", count, " (dry run, nothing executed)" if args.dry_run else "")


if __name__ == '__main__':
    main()
