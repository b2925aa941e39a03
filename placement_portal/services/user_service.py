"""
User Service - registration, login and admin user management.

Users are never hard-deleted; admins deactivate them instead.
"""

import logging
import re
from typing import Optional

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from placement_portal.core.auth import hash_password, verify_password
from placement_portal.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.schemas.schemas import CurrentUser, RegisterRequest
from placement_portal.services.mongo_service import (
    ensure_role, pagination, serialize_doc, serialize_docs, to_object_id, utcnow
)
from placement_portal.services.profile_service import StudentProfileService

logger = logging.getLogger(__name__)

# Never sent back to clients
_PUBLIC_PROJECTION = {"password_hash": 0}


class UserService:
    """Handles the users collection."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def register(self, request: RegisterRequest) -> dict:
        """
        Create a user account. Students also get a stub profile.

        Raises:
            ConflictError: email already registered
        """
        email = request.email.lower()
        if self.collection.find_one({"email": email}):
            raise ConflictError("User already exists with this email")

        now = utcnow()
        role = request.role.value
        doc = {
            "name": request.name.strip(),
            "email": email,
            "password_hash": hash_password(request.password),
            "role": role,
            "department": request.department if role == "student" else None,
            "company_name": request.company_name if role == "company" else None,
            "is_active": True,
            "created_at": now,
            "updated_at": now
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("User already exists with this email")

        if role == "student":
            StudentProfileService().create_stub(result.inserted_id)

        logger.info("Registered %s account %s", role, result.inserted_id)
        doc.pop("password_hash")
        return serialize_doc(doc)

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """
        Return the user document when the credentials match, else None.
        Inactive accounts are returned as-is; the caller decides.
        """
        user = self.collection.find_one({"email": email.lower()})
        if not user or not verify_password(password, user["password_hash"]):
            return None
        return user

    def get(self, user_id) -> dict:
        user = self.collection.find_one({"_id": to_object_id(user_id, "user id")}, _PUBLIC_PROJECTION)
        if not user:
            raise NotFoundError("User not found")
        return serialize_doc(user)

    def list_users(
        self,
        actor: CurrentUser,
        page: int = 1,
        limit: int = 20,
        role: Optional[str] = None,
        department: Optional[str] = None,
        search: Optional[str] = None
    ) -> dict:
        """Admin listing with role/department filters and name/email search."""
        ensure_role(actor, "admin")

        query = {}
        if role:
            query["role"] = role
        if department:
            query["department"] = department
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"email": {"$regex": pattern, "$options": "i"}}
            ]

        cursor = (
            self.collection.find(query, _PUBLIC_PROJECTION)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        total = self.collection.count_documents(query)
        return {"users": serialize_docs(list(cursor)), "pagination": pagination(page, limit, total)}

    def set_active(self, actor: CurrentUser, user_id: str, is_active: bool) -> dict:
        """Activate or deactivate an account. Admins cannot change their own status."""
        ensure_role(actor, "admin")
        oid = to_object_id(user_id, "user id")

        if not self.collection.find_one({"_id": oid}, {"_id": 1}):
            raise NotFoundError("User not found")
        if str(oid) == actor.user_id:
            raise ForbiddenError("Cannot modify your own status")

        self.collection.update_one(
            {"_id": oid},
            {"$set": {"is_active": is_active, "updated_at": utcnow()}}
        )
        logger.info("User %s %s by %s", oid, "activated" if is_active else "deactivated", actor.user_id)
        return self.get(oid)
