"""
Application Service - submission and the review pipeline.

Stages:
    applied -> shortlisted -> interview -> offered / rejected
    (any stage) -> withdrawn   (student only)

Company-driven transitions are permissive: any of applied, shortlisted,
interview, offered, rejected can be set from any current stage (a rejected
candidate can be reopened, an offer can go back to shortlisted). Every call
appends one entry to ``stage_history``, even when the stage doesn't change.
Notes and history are append-only; they are only ever ``$push``-ed.

Submission guards, checked in this order:
    job exists -> job open -> deadline not passed -> not applied yet -> eligible
The unique (job_id, student_id) index is the final word on duplicates.
"""

import logging
from typing import Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from placement_portal.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.schemas.schemas import (
    ApplicationCreate, CurrentUser, InterviewSchedule, ReviewRequest, TransitionStage
)
from placement_portal.services.eligibility_service import evaluate_eligibility
from placement_portal.services.job_service import JobService
from placement_portal.services.mongo_service import (
    ensure_role, pagination, serialize_doc, to_object_id, to_utc_naive, utcnow
)
from placement_portal.services.profile_service import StudentProfileService

logger = logging.getLogger(__name__)

INITIAL_STAGE = "applied"
WITHDRAWN_STAGE = "withdrawn"

ALREADY_APPLIED = "You have already applied for this job"

_JOB_SUMMARY_FIELDS = {"title": 1, "company": 1, "location": 1, "job_type": 1, "deadline": 1}
_STUDENT_SUMMARY_FIELDS = {"name": 1, "email": 1, "department": 1}


def history_entry(stage: str, actor: CurrentUser, reason: Optional[str] = None) -> dict:
    return {
        "stage": stage,
        "changed_by": to_object_id(actor.user_id, "user id"),
        "changed_at": utcnow(),
        "reason": reason
    }


class ApplicationService:
    """Handles the applications collection."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])
        self.jobs = JobService()
        self.profiles = StudentProfileService()
        self.users: Collection = get_collection(COLLECTIONS["users"])

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _find(self, application_id: str) -> dict:
        application = self.collection.find_one({"_id": to_object_id(application_id, "application id")})
        if not application:
            raise NotFoundError("Application not found")
        return application

    def _find_for_company(self, actor: CurrentUser, application_id: str) -> dict:
        """Application whose job belongs to the calling company."""
        ensure_role(actor, "company")
        application = self._find(application_id)
        job = self.jobs.find(application["job_id"])
        if not job or str(job["company_id"]) != actor.user_id:
            raise ForbiddenError("Unauthorized")
        return application

    def _attach_summaries(self, applications: list, job: bool = False, student: bool = False) -> list:
        """Add job / student summaries the way list views show them."""
        jobs, students = {}, {}
        if job:
            ids = list({a["job_id"] for a in applications})
            jobs = {j["_id"]: j for j in self.jobs.collection.find({"_id": {"$in": ids}}, _JOB_SUMMARY_FIELDS)}
        if student:
            ids = list({a["student_id"] for a in applications})
            students = {u["_id"]: u for u in self.users.find({"_id": {"$in": ids}}, _STUDENT_SUMMARY_FIELDS)}

        results = []
        for application in applications:
            item = serialize_doc(application)
            if job:
                item["job"] = serialize_doc(jobs.get(application["job_id"]))
            if student:
                item["student"] = serialize_doc(students.get(application["student_id"]))
            results.append(item)
        return results

    # --------------------------------------------------------
    # Eligibility / submission
    # --------------------------------------------------------

    def check_eligibility(self, actor: CurrentUser, job_id: str) -> dict:
        """Read-only eligibility verdict for the calling student."""
        ensure_role(actor, "student")
        job = self.jobs.find(job_id)
        if not job:
            raise NotFoundError("Job not found")
        result = evaluate_eligibility(job.get("eligibility"), self.profiles.find_by_user(actor.user_id))
        return {"job_id": str(job["_id"]), "eligible": result.eligible, "reason": result.reason}

    def submit(self, actor: CurrentUser, request: ApplicationCreate) -> dict:
        """
        Create an application in stage ``applied`` with a one-entry history.

        Raises:
            NotFoundError: job doesn't exist
            ConflictError: job not open, deadline passed, duplicate, or not eligible
        """
        ensure_role(actor, "student")
        student_id = to_object_id(actor.user_id, "user id")

        job = self.jobs.find(request.job_id)
        if not job:
            raise NotFoundError("Job not found")

        if job["status"] != "open":
            raise ConflictError("Job is not accepting applications")

        if to_utc_naive(job["deadline"]) <= utcnow():
            raise ConflictError("Application deadline has passed")

        if self.collection.find_one({"job_id": job["_id"], "student_id": student_id}, {"_id": 1}):
            raise ConflictError(ALREADY_APPLIED)

        result = evaluate_eligibility(job.get("eligibility"), self.profiles.find_by_user(student_id))
        if not result.eligible:
            logger.info("Student %s not eligible for job %s: %s", student_id, job["_id"], result.reason)
            raise ConflictError(result.reason)

        now = utcnow()
        doc = {
            "job_id": job["_id"],
            "student_id": student_id,
            "cover_letter": request.cover_letter.strip(),
            "resume_url": request.resume_url,
            "screening_answers": [a.model_dump() for a in request.screening_answers],
            "stage": INITIAL_STAGE,
            "scores": {},
            "reviewer_notes": [],
            "stage_history": [history_entry(INITIAL_STAGE, actor)],
            "interview_schedule": None,
            "created_at": now,
            "updated_at": now
        }
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent submission for the same pair
            raise ConflictError(ALREADY_APPLIED)

        logger.info("Application %s submitted for job %s", doc["_id"], job["_id"])
        return self._attach_summaries([doc], job=True, student=True)[0]

    # --------------------------------------------------------
    # Reads
    # --------------------------------------------------------

    def get(self, actor: CurrentUser, application_id: str) -> dict:
        """Visible to the applicant, the company that owns the job, and admins."""
        application = self._find(application_id)
        if actor.role.value == "student":
            if str(application["student_id"]) != actor.user_id:
                raise ForbiddenError("Unauthorized")
        elif actor.role.value == "company":
            job = self.jobs.find(application["job_id"])
            if not job or str(job["company_id"]) != actor.user_id:
                raise ForbiddenError("Unauthorized")
        return self._attach_summaries([application], job=True, student=True)[0]

    def list_for_student(
        self,
        actor: CurrentUser,
        page: int = 1,
        limit: int = 10,
        stage: Optional[str] = None
    ) -> dict:
        ensure_role(actor, "student")
        query = {"student_id": to_object_id(actor.user_id, "user id")}
        if stage:
            query["stage"] = stage

        cursor = (
            self.collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        total = self.collection.count_documents(query)
        return {
            "applications": self._attach_summaries(list(cursor), job=True),
            "pagination": pagination(page, limit, total)
        }

    def list_for_job(
        self,
        actor: CurrentUser,
        job_id: str,
        page: int = 1,
        limit: int = 20,
        stage: Optional[str] = None
    ) -> dict:
        """Applications for one of the company's jobs, with per-stage counts."""
        job = self.jobs.get_owned(actor, job_id)

        query = {"job_id": job["_id"]}
        if stage:
            query["stage"] = stage

        cursor = (
            self.collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        total = self.collection.count_documents(query)

        stage_counts = self.collection.aggregate([
            {"$match": {"job_id": job["_id"]}},
            {"$group": {"_id": "$stage", "count": {"$sum": 1}}}
        ])

        return {
            "applications": self._attach_summaries(list(cursor), student=True),
            "pagination": pagination(page, limit, total),
            "stage_stats": {item["_id"]: item["count"] for item in stage_counts}
        }

    # --------------------------------------------------------
    # Pipeline updates
    # --------------------------------------------------------

    def transition_stage(
        self,
        actor: CurrentUser,
        application_id: str,
        stage: TransitionStage,
        reason: Optional[str] = None
    ) -> dict:
        """Move an application to ``stage`` and record it in the history."""
        application = self._find_for_company(actor, application_id)
        target = TransitionStage(stage).value

        updated = self.collection.find_one_and_update(
            {"_id": application["_id"]},
            {
                "$set": {"stage": target, "updated_at": utcnow()},
                "$push": {"stage_history": history_entry(target, actor, reason)}
            },
            return_document=ReturnDocument.AFTER
        )
        logger.info(
            "Application %s stage %s -> %s by %s",
            application["_id"], application["stage"], target, actor.user_id
        )
        return serialize_doc(updated)

    def withdraw(self, actor: CurrentUser, application_id: str, reason: Optional[str] = None) -> dict:
        """Student withdraws their own application."""
        ensure_role(actor, "student")
        application = self._find(application_id)
        if str(application["student_id"]) != actor.user_id:
            raise ForbiddenError("Unauthorized")
        if application["stage"] == WITHDRAWN_STAGE:
            raise ConflictError("Application already withdrawn")

        updated = self.collection.find_one_and_update(
            {"_id": application["_id"]},
            {
                "$set": {"stage": WITHDRAWN_STAGE, "updated_at": utcnow()},
                "$push": {"stage_history": history_entry(WITHDRAWN_STAGE, actor, reason)}
            },
            return_document=ReturnDocument.AFTER
        )
        logger.info("Application %s withdrawn", application["_id"])
        return serialize_doc(updated)

    def add_review(self, actor: CurrentUser, application_id: str, review: ReviewRequest) -> dict:
        """Append a reviewer note and/or merge scores."""
        application = self._find_for_company(actor, application_id)

        operations = {"$set": {"updated_at": utcnow()}}
        if review.note and review.note.strip():
            operations["$push"] = {"reviewer_notes": {
                "note": review.note.strip(),
                "reviewer": to_object_id(actor.user_id, "user id"),
                "created_at": utcnow()
            }}
        if review.scores:
            for name, value in review.scores.model_dump(exclude_none=True).items():
                operations["$set"][f"scores.{name}"] = value

        updated = self.collection.find_one_and_update(
            {"_id": application["_id"]},
            operations,
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(updated)

    def schedule_interview(
        self,
        actor: CurrentUser,
        application_id: str,
        schedule: InterviewSchedule
    ) -> dict:
        application = self._find_for_company(actor, application_id)
        data = schedule.model_dump()
        data["date"] = to_utc_naive(schedule.date)

        updated = self.collection.find_one_and_update(
            {"_id": application["_id"]},
            {"$set": {"interview_schedule": data, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        logger.info("Interview scheduled for application %s", application["_id"])
        return serialize_doc(updated)
