"""
Job Routes

GET /jobs - List open jobs with filters (public)
POST /jobs - Create job posting (company only)
GET /jobs/company/mine - Get company's own jobs with application counts
GET /jobs/{job_id} - Get job details (public)
PUT /jobs/{job_id} - Partial update (owning company)
POST /jobs/{job_id}/close - Close job (owning company)
DELETE /jobs/{job_id} - Delete job without applications (owning company)
GET /jobs/{job_id}/eligibility - Check eligibility (student only)
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from placement_portal.core.auth import get_current_company, get_current_student
from placement_portal.core.config import get_settings
from placement_portal.schemas.schemas import (
    CurrentUser, EligibilityResponse, JobCreate, JobListResponse, JobResponse,
    JobStatus, JobType, JobUpdate, MessageResponse
)
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.job_service import JobService

settings = get_settings()

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: Optional[str] = Query(None, description="Search in title, company and description"),
    skills: Optional[str] = Query(None, description="Comma separated, matches any"),
    location: Optional[str] = Query(None),
    job_type: Optional[JobType] = Query(None)
):
    """List open job postings whose deadline hasn't passed."""
    skill_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else None
    return JobService().list_open(
        page=page,
        limit=limit,
        search=search.strip() if search else None,
        skills=skill_list,
        location=location.strip() if location else None,
        job_type=job_type.value if job_type else None
    )


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(job: JobCreate, company: CurrentUser = Depends(get_current_company)):
    """Create a new job posting. Only companies can create jobs."""
    return JobService().create(company, job)


@router.get("/company/mine", response_model=JobListResponse)
async def get_company_jobs(
    page: int = Query(1, ge=1),
    status: Optional[JobStatus] = Query(None),
    company: CurrentUser = Depends(get_current_company)
):
    """Get all jobs posted by this company."""
    return JobService().list_for_company(
        company, page=page, limit=settings.default_page_size,
        status=status.value if status else None
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str):
    """Get details of a specific job."""
    return JobService().get(job_id)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(job_id: str, update: JobUpdate, company: CurrentUser = Depends(get_current_company)):
    """Update a job posting. Only provided fields are changed."""
    return JobService().update(company, job_id, update)


@router.post("/{job_id}/close", response_model=JobResponse)
async def close_job(job_id: str, company: CurrentUser = Depends(get_current_company)):
    """Stop accepting applications."""
    return JobService().close(company, job_id)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, company: CurrentUser = Depends(get_current_company)):
    """Delete a job posting. Jobs with applications must be closed instead."""
    JobService().delete(company, job_id)
    return MessageResponse(message="Job deleted successfully")


@router.get("/{job_id}/eligibility", response_model=EligibilityResponse)
async def check_eligibility(job_id: str, student: CurrentUser = Depends(get_current_student)):
    """Tell the student whether they may apply, and why not."""
    return ApplicationService().check_eligibility(student, job_id)
