#!/usr/bin/env python3
"""
Initialize the School Library database.

This script:
1. Creates all database tables
2. Optionally loads sample data
3. Verifies the database is ready for MCP server use

Usage:
    python scripts/init_database.py [--drop-existing] [--sample-data]
"""

import argparse
import logging
import sys
from datetime import UTC, datetime

from school_library.database.seed import seed_library
from school_library.database.session import DatabaseManager
from school_library.database.store import LibraryStore

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

EXPECTED_TABLES = {"books", "students", "loans"}


def main():
    """Main entry point for database initialization."""
    parser = argparse.ArgumentParser(description="Initialize the School Library database")
    parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating new ones",
    )
    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Load sample data after creating tables",
    )
    parser.add_argument(
        "--database-url",
        help="Override default database URL",
    )

    args = parser.parse_args()

    logger.info("Initializing database manager...")
    db_manager = DatabaseManager(args.database_url)

    if not db_manager.verify_connection():
        logger.error("Failed to connect to database")
        sys.exit(1)

    try:
        logger.info("Creating database schema...")
        tables = set(db_manager.init_database(drop_existing=args.drop_existing))

        if args.sample_data:
            logger.info("Loading sample data...")
            counts = seed_library(LibraryStore(db_manager), datetime.now(UTC))
            logger.info(
                "Created %(books)d books, %(students)d students, %(loans)d loans", counts
            )

        missing_tables = EXPECTED_TABLES - tables
        if missing_tables:
            logger.error("Missing expected tables: %s", missing_tables)
            sys.exit(1)

        logger.info("Database initialization complete")

    except Exception:
        logger.exception("Database initialization failed")
        sys.exit(1)
    finally:
        db_manager.close()


if __name__ == "__main__":
    main()
