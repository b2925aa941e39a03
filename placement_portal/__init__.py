"""
Placement Portal
Students browse and apply to jobs, companies post jobs and screen applicants
through a pipeline of stages, admins watch the placement numbers.

Architecture:
- MongoDB: users, student profiles, jobs, applications
- FastAPI: REST layer with JWT bearer auth and role checks
"""

__version__ = "1.0.0"
