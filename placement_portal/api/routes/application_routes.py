"""
Application Routes

POST /applications - Apply to a job (student only)
GET /applications/me - Get my applications (student only)
GET /applications/job/{job_id} - Applications for a job + stage counts (owning company)
GET /applications/{id} - Get one application
PATCH /applications/{id}/stage - Move to another stage (owning company)
PATCH /applications/{id}/withdraw - Withdraw (applicant)
POST /applications/{id}/review - Add note / scores (owning company)
PUT /applications/{id}/interview - Set interview schedule (owning company)
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from placement_portal.core.auth import get_current_company, get_current_student, get_current_user
from placement_portal.schemas.schemas import (
    ApplicationCreate, ApplicationListResponse, ApplicationResponse, ApplicationStage,
    CurrentUser, InterviewSchedule, ReviewRequest, StageUpdate, WithdrawRequest
)
from placement_portal.services.application_service import ApplicationService

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(application: ApplicationCreate, student: CurrentUser = Depends(get_current_student)):
    """Apply to a job. Students only. Cannot apply twice to same job."""
    return ApplicationService().submit(student, application)


@router.get("/me", response_model=ApplicationListResponse)
async def get_my_applications(
    page: int = Query(1, ge=1),
    status: Optional[ApplicationStage] = Query(None),
    student: CurrentUser = Depends(get_current_student)
):
    """Get all job applications for current student."""
    return ApplicationService().list_for_student(
        student, page=page, limit=10, stage=status.value if status else None
    )


@router.get("/job/{job_id}", response_model=ApplicationListResponse)
async def get_job_applications(
    job_id: str,
    page: int = Query(1, ge=1),
    stage: Optional[ApplicationStage] = Query(None),
    company: CurrentUser = Depends(get_current_company)
):
    """Get applications received for one of the company's jobs."""
    return ApplicationService().list_for_job(
        company, job_id, page=page, limit=20, stage=stage.value if stage else None
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, user: CurrentUser = Depends(get_current_user)):
    return ApplicationService().get(user, application_id)


@router.patch("/{application_id}/stage", response_model=ApplicationResponse)
async def update_application_stage(
    application_id: str,
    update: StageUpdate,
    company: CurrentUser = Depends(get_current_company)
):
    """Move an application to any review stage; every change is recorded."""
    return ApplicationService().transition_stage(company, application_id, update.stage, update.reason)


@router.patch("/{application_id}/withdraw", response_model=ApplicationResponse)
async def withdraw_application(
    application_id: str,
    request: Optional[WithdrawRequest] = None,
    student: CurrentUser = Depends(get_current_student)
):
    """Withdraw one of my applications."""
    reason = request.reason if request else None
    return ApplicationService().withdraw(student, application_id, reason)


@router.post("/{application_id}/review", response_model=ApplicationResponse)
async def add_review(
    application_id: str,
    review: ReviewRequest,
    company: CurrentUser = Depends(get_current_company)
):
    """Add a reviewer note and/or scores."""
    return ApplicationService().add_review(company, application_id, review)


@router.put("/{application_id}/interview", response_model=ApplicationResponse)
async def schedule_interview(
    application_id: str,
    schedule: InterviewSchedule,
    company: CurrentUser = Depends(get_current_company)
):
    return ApplicationService().schedule_interview(company, application_id, schedule)
