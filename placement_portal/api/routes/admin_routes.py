"""
Admin Routes

GET /admin/stats/users - Active users by role
GET /admin/stats/jobs - Job counts, placement funnel, skill demand
GET /admin/users - List users
PATCH /admin/users/{user_id}/status - Activate / deactivate a user
GET /admin/analytics/placement - Funnel by batch / department
GET /admin/analytics/companies - Applications per company by stage
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from placement_portal.core.auth import get_current_admin
from placement_portal.schemas.schemas import (
    CompanyAnalyticsResponse, CurrentUser, JobStatsResponse, PlacementAnalyticsResponse,
    UserListResponse, UserResponse, UserRole, UserStatsResponse, UserStatusUpdate
)
from placement_portal.services.analytics_service import AnalyticsService
from placement_portal.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats/users", response_model=UserStatsResponse)
async def user_stats(admin: CurrentUser = Depends(get_current_admin)):
    return AnalyticsService().user_stats(admin)


@router.get("/stats/jobs", response_model=JobStatsResponse)
async def job_stats(admin: CurrentUser = Depends(get_current_admin)):
    """Totals, placement funnel and rate, top skills and companies."""
    return AnalyticsService().job_stats(admin)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    department: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Search in name and email"),
    admin: CurrentUser = Depends(get_current_admin)
):
    return UserService().list_users(
        admin, page=page, limit=limit, role=role.value if role else None,
        department=department, search=search
    )


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: str,
    update: UserStatusUpdate,
    admin: CurrentUser = Depends(get_current_admin)
):
    """Deactivate instead of deleting. Admins can't change their own status."""
    return UserService().set_active(admin, user_id, update.is_active)


@router.get("/analytics/placement", response_model=PlacementAnalyticsResponse)
async def placement_analytics(
    batch: Optional[int] = Query(None, description="Graduation year"),
    department: Optional[str] = Query(None),
    admin: CurrentUser = Depends(get_current_admin)
):
    return AnalyticsService().placement_analytics(admin, batch=batch, department=department)


@router.get("/analytics/companies", response_model=CompanyAnalyticsResponse)
async def company_analytics(admin: CurrentUser = Depends(get_current_admin)):
    return AnalyticsService().company_analytics(admin)
