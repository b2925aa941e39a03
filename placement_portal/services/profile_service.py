"""
Student Profile Service

One profile per student user. Only the owning student edits it; admins can
browse. ``is_profile_complete`` is derived on every save and is what the
eligibility check relies on.
"""

import logging
from typing import List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from placement_portal.core.exceptions import NotFoundError, ValidationFailed
from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.schemas.schemas import MAX_GRADUATION_YEAR, CurrentUser, ProfileUpdate
from placement_portal.services.mongo_service import (
    ensure_role, pagination, serialize_doc, to_object_id, utcnow
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PROGRAM = "Not specified"

# Fields a student may change on their own profile
UPDATABLE_FIELDS = (
    "program", "graduation_year", "cgpa", "skills", "projects",
    "resume_url", "linkedin_url", "github_url", "portfolio_url"
)

# Always present on a stored profile
REQUIRED_FIELDS = ("program", "graduation_year", "skills", "projects")

_OWNER_FIELDS = {"name": 1, "email": 1, "department": 1}


def is_profile_complete(profile: dict) -> bool:
    """A profile is complete once program, year, CGPA, a skill and a resume are set."""
    program = profile.get("program")
    return bool(
        program and program != PLACEHOLDER_PROGRAM
        and profile.get("graduation_year")
        and profile.get("cgpa") is not None
        and profile.get("skills")
        and profile.get("resume_url")
    )


class StudentProfileService:
    """Handles the student_profiles collection."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["profiles"])
        self.users: Collection = get_collection(COLLECTIONS["users"])

    def _stub(self, user_id: ObjectId) -> dict:
        now = utcnow()
        return {
            "user_id": user_id,
            "program": PLACEHOLDER_PROGRAM,
            "graduation_year": min(now.year + 4, MAX_GRADUATION_YEAR),
            "cgpa": None,
            "skills": [],
            "projects": [],
            "resume_url": None,
            "linkedin_url": None,
            "github_url": None,
            "portfolio_url": None,
            "is_profile_complete": False,
            "created_at": now,
            "updated_at": now
        }

    def create_stub(self, user_id: ObjectId) -> dict:
        """Insert the placeholder profile created at registration."""
        doc = self._stub(user_id)
        self.collection.insert_one(doc)
        return doc

    def find_by_user(self, user_id) -> Optional[dict]:
        """Raw profile document for a student user (None if missing)."""
        return self.collection.find_one({"user_id": to_object_id(user_id, "user id")})

    def _with_owner(self, profile: dict) -> dict:
        owner = self.users.find_one({"_id": profile["user_id"]}, _OWNER_FIELDS)
        result = serialize_doc(profile)
        result["user"] = serialize_doc(owner)
        return result

    def get_my_profile(self, actor: CurrentUser) -> dict:
        ensure_role(actor, "student")
        profile = self.find_by_user(actor.user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return self._with_owner(profile)

    def update_my_profile(self, actor: CurrentUser, update: ProfileUpdate) -> dict:
        """
        Apply the allow-listed fields to the caller's profile, creating the
        stub first if the student has none yet.
        """
        ensure_role(actor, "student")
        user_oid = to_object_id(actor.user_id, "user id")

        changes = update.model_dump(include=set(UPDATABLE_FIELDS), exclude_unset=True)
        for field, value in changes.items():
            if value is None and field in REQUIRED_FIELDS:
                raise ValidationFailed(f"{field} cannot be empty")

        profile = self.find_by_user(user_oid) or self.create_stub(user_oid)
        profile.update(changes)
        changes["is_profile_complete"] = is_profile_complete(profile)
        changes["updated_at"] = utcnow()

        updated = self.collection.find_one_and_update(
            {"_id": profile["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER
        )
        logger.info("Profile %s updated (complete=%s)", updated["_id"], updated["is_profile_complete"])
        return self._with_owner(updated)

    def list_profiles(
        self,
        actor: CurrentUser,
        page: int = 1,
        limit: int = 20,
        department: Optional[str] = None,
        graduation_year: Optional[int] = None,
        skills: Optional[List[str]] = None
    ) -> dict:
        """Admin browse with department / graduation year / skill filters."""
        ensure_role(actor, "admin")

        query = {}
        if department:
            user_ids = [u["_id"] for u in self.users.find({"department": department}, {"_id": 1})]
            query["user_id"] = {"$in": user_ids}
        if graduation_year:
            query["graduation_year"] = graduation_year
        if skills:
            query["skills"] = {"$in": skills}

        cursor = (
            self.collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        total = self.collection.count_documents(query)
        return {
            "profiles": [self._with_owner(p) for p in cursor],
            "pagination": pagination(page, limit, total)
        }

    def get_profile(self, actor: CurrentUser, profile_id: str) -> dict:
        ensure_role(actor, "admin")
        profile = self.collection.find_one({"_id": to_object_id(profile_id, "profile id")})
        if not profile:
            raise NotFoundError("Profile not found")
        return self._with_owner(profile)
