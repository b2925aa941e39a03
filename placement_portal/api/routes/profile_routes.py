"""
Profile Routes

GET /profiles/me - Get own profile (student only)
PUT /profiles/me - Update own profile (student only)
GET /profiles - List student profiles (admin only)
GET /profiles/{profile_id} - Get one profile (admin only)
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from placement_portal.core.auth import get_current_admin, get_current_student
from placement_portal.schemas.schemas import (
    CurrentUser, ProfileListResponse, ProfileResponse, ProfileUpdate
)
from placement_portal.services.profile_service import StudentProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_profile(student: CurrentUser = Depends(get_current_student)):
    """Get current student's profile."""
    return StudentProfileService().get_my_profile(student)


@router.put("/me", response_model=ProfileResponse)
async def update_profile(data: ProfileUpdate, student: CurrentUser = Depends(get_current_student)):
    """Update student profile. Only provided fields are updated."""
    return StudentProfileService().update_my_profile(student, data)


@router.get("", response_model=ProfileListResponse)
async def list_profiles(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    department: Optional[str] = Query(None),
    graduation_year: Optional[int] = Query(None),
    skills: Optional[str] = Query(None, description="Comma separated, matches any"),
    admin: CurrentUser = Depends(get_current_admin)
):
    """Browse student profiles."""
    skill_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else None
    return StudentProfileService().list_profiles(
        admin, page=page, limit=limit, department=department,
        graduation_year=graduation_year, skills=skill_list
    )


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile_by_id(profile_id: str, admin: CurrentUser = Depends(get_current_admin)):
    return StudentProfileService().get_profile(admin, profile_id)
