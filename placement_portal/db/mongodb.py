"""
MongoDB Connection Utility

MongoDB stores every record of the portal:
- users: accounts for students, companies and admins
- student_profiles: academic details, skills, projects (1:1 with a student)
- jobs: postings owned by a company user
- applications: one per (job, student), with stage history and reviews

WHY the unique compound index on applications?
- Two simultaneous submissions for the same pair would both pass an
  existence check; the index makes the second insert fail atomically.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from placement_portal.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection (use the COLLECTIONS names)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "profiles": "student_profiles",
    "jobs": "jobs",
    "applications": "applications"
}


def init_mongo_indexes():
    """
    Create indexes for the group-by keys and lookups the API uses.
    Call this once during app startup.
    """
    db = get_mongo_db()

    users = db[COLLECTIONS["users"]]
    users.create_index("email", unique=True)
    users.create_index("role")

    profiles = db[COLLECTIONS["profiles"]]
    profiles.create_index("user_id", unique=True)
    profiles.create_index("graduation_year")
    profiles.create_index("skills")

    jobs = db[COLLECTIONS["jobs"]]
    jobs.create_index([("status", ASCENDING), ("created_at", DESCENDING)])
    jobs.create_index("skills")
    jobs.create_index("company_id")
    jobs.create_index("deadline")
    jobs.create_index("eligibility.graduation_year")

    applications = db[COLLECTIONS["applications"]]
    # One application per student per job
    applications.create_index(
        [("job_id", ASCENDING), ("student_id", ASCENDING)],
        unique=True
    )
    applications.create_index([("student_id", ASCENDING), ("created_at", DESCENDING)])
    applications.create_index([("job_id", ASCENDING), ("stage", ASCENDING)])
    applications.create_index([("stage", ASCENDING), ("created_at", DESCENDING)])

    logger.info("MongoDB indexes created successfully")


def has_required_indexes() -> bool:
    """True when the unique (job_id, student_id) index exists on applications."""
    try:
        indexes = get_collection(COLLECTIONS["applications"]).index_information()
    except PyMongoError as e:
        logger.warning("Could not read application indexes: %s", e)
        return False
    return any(
        info.get("unique") and [k for k, _ in info["key"]] == ["job_id", "student_id"]
        for info in indexes.values()
    )
