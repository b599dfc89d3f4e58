#!/usr/bin/env python3
"""
Materials Exchange Database Initialization Script
Creates the inventory tables on the configured database
"""
import sys
from pathlib import Path

# Add parent directory to path to import the package
sys.path.append(str(Path(__file__).parent.parent))

from materials_exchange.core.config import settings
from materials_exchange.core.database import check_db_connection, init_db
from materials_exchange.core.logging import get_logger, setup_logging

logger = get_logger("scripts.init_db")


def main() -> int:
    setup_logging(log_to_file=False)
    logger.info(f"Initializing database at {settings.DATABASE_URL.rsplit('@', 1)[-1]}")

    if not check_db_connection():
        logger.error("Database is not reachable")
        return 1

    init_db()
    logger.info("Database initialization completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
