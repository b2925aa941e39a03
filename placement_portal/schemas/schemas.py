"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Ids are MongoDB ObjectIds rendered as strings.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum

MIN_GRADUATION_YEAR = 2020
MAX_GRADUATION_YEAR = 2030


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    company = "company"
    admin = "admin"


class RegisterRole(str, Enum):
    """Roles open to self-registration (admins are seeded)."""
    student = "student"
    company = "company"


class JobType(str, Enum):
    internship = "internship"
    full_time = "full-time"
    part_time = "part-time"


class JobStatus(str, Enum):
    draft = "draft"
    open = "open"
    closed = "closed"


class ApplicationStage(str, Enum):
    applied = "applied"
    shortlisted = "shortlisted"
    interview = "interview"
    offered = "offered"
    rejected = "rejected"
    withdrawn = "withdrawn"


class TransitionStage(str, Enum):
    """Stages a company may move an application to. Withdrawal is student-only."""
    applied = "applied"
    shortlisted = "shortlisted"
    interview = "interview"
    offered = "offered"
    rejected = "rejected"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class CurrentUser(BaseModel):
    """Authenticated identity passed explicitly into every service call."""
    user_id: str
    email: str
    name: str
    role: UserRole


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: RegisterRole
    department: Optional[str] = None
    company_name: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    department: Optional[str] = None
    company_name: Optional[str] = None
    is_active: bool
    created_at: datetime

class TokenResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

class UserStatusUpdate(BaseModel):
    is_active: bool


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class Project(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    technologies: List[str] = []
    url: Optional[str] = None

class ProfileUpdate(BaseModel):
    program: Optional[str] = Field(None, min_length=2)
    graduation_year: Optional[int] = Field(None, ge=MIN_GRADUATION_YEAR, le=MAX_GRADUATION_YEAR)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[List[str]] = None
    projects: Optional[List[Project]] = None
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None

class ProfileOwner(BaseModel):
    id: str
    name: str
    email: str
    department: Optional[str] = None

class ProfileResponse(BaseModel):
    id: str
    user_id: str
    user: Optional[ProfileOwner] = None
    program: str
    graduation_year: int
    cgpa: Optional[float] = None
    skills: List[str] = []
    projects: List[Project] = []
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    is_profile_complete: bool
    created_at: datetime
    updated_at: datetime


# ============================================================
# JOB SCHEMAS
# ============================================================

class Eligibility(BaseModel):
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    graduation_year: List[int] = []
    departments: List[str] = []
    verification_required: bool = False

class ScreeningQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    required: bool = False

class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    company: str = Field(..., min_length=2)
    skills: List[str] = Field(..., min_length=1)
    eligibility: Eligibility = Eligibility()
    location: str = Field(..., min_length=1)
    is_remote: bool = False
    job_type: JobType
    stipend: Optional[float] = Field(None, ge=0)
    salary: Optional[float] = Field(None, ge=0)
    deadline: datetime
    status: JobStatus = JobStatus.open
    max_applications: Optional[int] = Field(None, ge=1)
    screening_questions: List[ScreeningQuestion] = []

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    company: Optional[str] = Field(None, min_length=2)
    skills: Optional[List[str]] = Field(None, min_length=1)
    eligibility: Optional[Eligibility] = None
    location: Optional[str] = Field(None, min_length=1)
    is_remote: Optional[bool] = None
    job_type: Optional[JobType] = None
    stipend: Optional[float] = Field(None, ge=0)
    salary: Optional[float] = Field(None, ge=0)
    deadline: Optional[datetime] = None
    status: Optional[JobStatus] = None
    max_applications: Optional[int] = Field(None, ge=1)
    screening_questions: Optional[List[ScreeningQuestion]] = None

class JobResponse(BaseModel):
    id: str
    company_id: str
    company: str
    title: str
    description: str
    skills: List[str] = []
    eligibility: Eligibility
    location: str
    is_remote: bool
    job_type: JobType
    stipend: Optional[float] = None
    salary: Optional[float] = None
    deadline: datetime
    status: JobStatus
    max_applications: Optional[int] = None
    screening_questions: List[ScreeningQuestion] = []
    application_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime

class Pagination(BaseModel):
    current: int
    pages: int
    total: int

class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    pagination: Pagination

class EligibilityResponse(BaseModel):
    job_id: str
    eligible: bool
    reason: Optional[str] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ScreeningAnswer(BaseModel):
    question: str
    answer: str

class ApplicationCreate(BaseModel):
    job_id: str
    cover_letter: str = Field(..., min_length=50)
    resume_url: Optional[str] = None
    screening_answers: List[ScreeningAnswer] = []

class StageUpdate(BaseModel):
    stage: TransitionStage
    reason: Optional[str] = None

class WithdrawRequest(BaseModel):
    reason: Optional[str] = None

class Scores(BaseModel):
    aptitude: Optional[int] = Field(None, ge=0, le=100)
    technical: Optional[int] = Field(None, ge=0, le=100)
    communication: Optional[int] = Field(None, ge=0, le=100)

class ReviewRequest(BaseModel):
    note: Optional[str] = None
    scores: Optional[Scores] = None

class InterviewSchedule(BaseModel):
    date: datetime
    time: Optional[str] = None
    location: Optional[str] = None
    interviewer_notes: Optional[str] = None

class ReviewerNote(BaseModel):
    note: str
    reviewer: str
    created_at: datetime

class StageHistoryEntry(BaseModel):
    stage: ApplicationStage
    changed_by: str
    changed_at: datetime
    reason: Optional[str] = None

class JobSummary(BaseModel):
    id: str
    title: str
    company: str
    location: Optional[str] = None
    job_type: Optional[str] = None
    deadline: Optional[datetime] = None

class StudentSummary(BaseModel):
    id: str
    name: str
    email: str
    department: Optional[str] = None

class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    student_id: str
    job: Optional[JobSummary] = None
    student: Optional[StudentSummary] = None
    cover_letter: str
    resume_url: Optional[str] = None
    screening_answers: List[ScreeningAnswer] = []
    stage: ApplicationStage
    scores: Scores = Scores()
    reviewer_notes: List[ReviewerNote] = []
    stage_history: List[StageHistoryEntry] = []
    interview_schedule: Optional[InterviewSchedule] = None
    created_at: datetime
    updated_at: datetime

class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    pagination: Pagination
    stage_stats: Optional[Dict[str, int]] = None


# ============================================================
# ADMIN / ANALYTICS SCHEMAS
# ============================================================

class UserListResponse(BaseModel):
    users: List[UserResponse]
    pagination: Pagination

class ProfileListResponse(BaseModel):
    profiles: List[ProfileResponse]
    pagination: Pagination

class UserStatsResponse(BaseModel):
    total: int
    by_role: Dict[str, int]

class SkillDemand(BaseModel):
    skill: str
    count: int

class CompanyJobCount(BaseModel):
    company_name: Optional[str] = None
    job_count: int

class JobStatsResponse(BaseModel):
    total: int
    active: int
    by_status: Dict[str, int]
    applications: int
    placement_rate: int
    funnel: Dict[str, int]
    skills_demand: List[SkillDemand]
    company_stats: List[CompanyJobCount]

class StageCount(BaseModel):
    stage: str
    count: int

class DepartmentStats(BaseModel):
    department: Optional[str] = None
    stages: List[StageCount]

class PlacementAnalyticsResponse(BaseModel):
    placement_funnel: List[StageCount]
    department_stats: List[DepartmentStats]

class CompanyApplicationStats(BaseModel):
    company_id: str
    company_name: Optional[str] = None
    stages: List[StageCount]
    total_applications: int

class CompanyAnalyticsResponse(BaseModel):
    company_stats: List[CompanyApplicationStats]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
    kind: str
