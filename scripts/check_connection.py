#!/usr/bin/env python3
"""
Connection Check Script

Pings MongoDB and (re)creates the indexes the API relies on.
Run: python scripts/check_connection.py
"""
import logging
import sys

from placement_portal.core.config import get_settings
from placement_portal.core.logging import setup_logging
from placement_portal.db.mongodb import init_mongo_indexes, test_mongo_connection

logger = logging.getLogger("check_connection")


def main() -> int:
    settings = get_settings()
    logger.info("Checking MongoDB at %s (db=%s)", settings.mongodb_uri, settings.mongodb_db)

    if not test_mongo_connection():
        logger.error("MongoDB is not reachable")
        return 1

    init_mongo_indexes()
    logger.info("MongoDB OK")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
