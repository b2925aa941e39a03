"""
Job Service - job posting lifecycle.

Statuses: draft -> open -> closed (any order via update).
A job accepts applications only while it is open AND before its deadline;
both are re-checked at submission time by the application service.
A job with applications can't be deleted - it has to be closed instead.
"""

import logging
import re
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection

from placement_portal.core.exceptions import (
    ConflictError, ForbiddenError, NotFoundError, ValidationFailed
)
from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.schemas.schemas import CurrentUser, JobCreate, JobUpdate
from placement_portal.services.mongo_service import (
    ensure_role, pagination, serialize_doc, serialize_docs,
    to_object_id, to_utc_naive, utcnow
)

logger = logging.getLogger(__name__)

# Fields a company may change with a partial update
UPDATABLE_FIELDS = (
    "title", "description", "company", "skills", "eligibility", "location",
    "is_remote", "job_type", "stipend", "salary", "deadline", "status",
    "max_applications", "screening_questions"
)

# Fields that can be changed but never cleared
REQUIRED_FIELDS = (
    "title", "description", "company", "skills", "eligibility", "location",
    "is_remote", "job_type", "deadline", "status", "screening_questions"
)


def _require_future_deadline(deadline):
    deadline = to_utc_naive(deadline)
    if deadline <= utcnow():
        raise ValidationFailed("Deadline must be in the future")
    return deadline


class JobService:
    """Handles the jobs collection."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])
        self.applications: Collection = get_collection(COLLECTIONS["applications"])

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------

    def find(self, job_id) -> Optional[dict]:
        """Raw job document (None if missing)."""
        return self.collection.find_one({"_id": to_object_id(job_id, "job id")})

    def get(self, job_id: str) -> dict:
        job = self.find(job_id)
        if not job:
            raise NotFoundError("Job not found")
        return serialize_doc(job)

    def get_owned(self, actor: CurrentUser, job_id) -> dict:
        """Raw job document owned by the calling company."""
        ensure_role(actor, "company")
        job = self.find(job_id)
        if not job:
            raise NotFoundError("Job not found")
        if str(job["company_id"]) != actor.user_id:
            raise ForbiddenError("You do not own this job")
        return job

    # --------------------------------------------------------
    # Create / list
    # --------------------------------------------------------

    def create(self, actor: CurrentUser, job: JobCreate) -> dict:
        ensure_role(actor, "company")
        deadline = _require_future_deadline(job.deadline)

        now = utcnow()
        doc = job.model_dump(mode="python")
        doc.update({
            "company_id": to_object_id(actor.user_id, "company id"),
            "title": job.title.strip(),
            "company": job.company.strip(),
            "skills": [s.strip() for s in job.skills],
            "job_type": job.job_type.value,
            "status": job.status.value,
            "deadline": deadline,
            "created_at": now,
            "updated_at": now
        })
        self.collection.insert_one(doc)
        logger.info("Job %s created by company %s", doc["_id"], actor.user_id)
        return serialize_doc(doc)

    def list_open(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        skills: Optional[List[str]] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None
    ) -> dict:
        """Public listing: open jobs whose deadline hasn't passed, newest first."""
        query = {"status": "open", "deadline": {"$gte": utcnow()}}

        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"company": {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}}
            ]
        if skills:
            query["skills"] = {"$in": skills}
        if location:
            query["location"] = {"$regex": re.escape(location), "$options": "i"}
        if job_type:
            query["job_type"] = job_type

        cursor = (
            self.collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        total = self.collection.count_documents(query)
        return {"jobs": serialize_docs(list(cursor)), "pagination": pagination(page, limit, total)}

    def list_for_company(
        self,
        actor: CurrentUser,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None
    ) -> dict:
        """The calling company's own jobs, each with its application count."""
        ensure_role(actor, "company")
        query = {"company_id": to_object_id(actor.user_id, "company id")}
        if status:
            query["status"] = status

        cursor = (
            self.collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        jobs = []
        for job in cursor:
            job["application_count"] = self.applications.count_documents({"job_id": job["_id"]})
            jobs.append(serialize_doc(job))

        total = self.collection.count_documents(query)
        return {"jobs": jobs, "pagination": pagination(page, limit, total)}

    # --------------------------------------------------------
    # Update / close / delete
    # --------------------------------------------------------

    def update(self, actor: CurrentUser, job_id: str, update: JobUpdate) -> dict:
        """Partial update of the allow-listed fields. A new deadline must be in the future."""
        job = self.get_owned(actor, job_id)

        changes = update.model_dump(include=set(UPDATABLE_FIELDS), exclude_unset=True)
        for field, value in list(changes.items()):
            if value is None and field in REQUIRED_FIELDS:
                raise ValidationFailed(f"{field} cannot be empty")

        if "deadline" in changes:
            changes["deadline"] = _require_future_deadline(update.deadline)
        if "job_type" in changes:
            changes["job_type"] = update.job_type.value
        if "status" in changes:
            changes["status"] = update.status.value
        changes["updated_at"] = utcnow()

        updated = self.collection.find_one_and_update(
            {"_id": job["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER
        )
        logger.info("Job %s updated (%s)", job["_id"], ", ".join(sorted(changes)))
        return serialize_doc(updated)

    def close(self, actor: CurrentUser, job_id: str) -> dict:
        job = self.get_owned(actor, job_id)
        updated = self.collection.find_one_and_update(
            {"_id": job["_id"]},
            {"$set": {"status": "closed", "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        logger.info("Job %s closed", job["_id"])
        return serialize_doc(updated)

    def delete(self, actor: CurrentUser, job_id: str) -> None:
        """
        Hard-delete a job that nobody has applied to.

        Raises:
            ConflictError: the job has applications (close it instead)
        """
        job = self.get_owned(actor, job_id)

        if self.applications.count_documents({"job_id": job["_id"]}) > 0:
            logger.warning("Refusing to delete job %s with applications", job["_id"])
            raise ConflictError("Cannot delete job with existing applications. Close the job instead.")

        self.collection.delete_one({"_id": job["_id"]})
        logger.info("Job %s deleted", job["_id"])
