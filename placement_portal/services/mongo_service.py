"""
MongoDB Service helpers shared by the domain services.

Every service owns one collection and works on raw documents; these helpers
turn documents into JSON-friendly dicts, parse ids coming from the API, and
keep timestamps in one convention (naive UTC, which is what pymongo returns).
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

from placement_portal.core.exceptions import ForbiddenError, ValidationFailed
from placement_portal.schemas.schemas import CurrentUser


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def _stringify(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _stringify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify(v) for v in value]
    return value


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict (``_id`` -> ``id``)."""
    if doc is None:
        return None
    doc = _stringify(doc)
    if "_id" in doc:
        doc["id"] = doc.pop("_id")
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: Any, label: str = "id") -> ObjectId:
    """Parse an id from the API; malformed ids are a validation failure."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationFailed(f"Invalid {label}")


# ============================================================
# TIME
# ============================================================

def utcnow() -> datetime:
    """Current time as naive UTC (BSON dates carry no timezone)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Normalize an incoming datetime to naive UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================
# PAGINATION / ACCESS
# ============================================================

def pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "current": page,
        "pages": math.ceil(total / limit) if limit else 0,
        "total": total
    }


def ensure_role(actor: CurrentUser, *roles: str) -> None:
    """Reject actors whose role is not in ``roles``."""
    if actor.role.value not in roles:
        raise ForbiddenError(f"Only {' or '.join(roles)} accounts can do this")
