"""
Schemas module - Request/Response schemas for API endpoints.

Services work on plain MongoDB documents; schemas are the API contract
(what the client sends and receives).
"""

from placement_portal.schemas.schemas import (
    ApplicationStage,
    CurrentUser,
    JobStatus,
    UserRole
)

__all__ = ["ApplicationStage", "CurrentUser", "JobStatus", "UserRole"]
