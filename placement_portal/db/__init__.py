"""
Database module - MongoDB connection and collection access.
"""
from placement_portal.db.mongodb import (
    COLLECTIONS,
    get_collection,
    get_mongo_db,
    has_required_indexes,
    init_mongo_indexes,
    test_mongo_connection
)

__all__ = [
    "COLLECTIONS",
    "get_collection",
    "get_mongo_db",
    "has_required_indexes",
    "init_mongo_indexes",
    "test_mongo_connection"
]
