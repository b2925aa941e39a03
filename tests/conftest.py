from datetime import timedelta

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from placement_portal.core import auth
from placement_portal.core.auth import hash_password
from placement_portal.db import mongodb
from placement_portal.db.mongodb import COLLECTIONS, init_mongo_indexes
from placement_portal.schemas.schemas import CurrentUser, JobCreate
from placement_portal.services.job_service import JobService
from placement_portal.services.mongo_service import utcnow

COVER_LETTER = (
    "I am excited to apply for this role. I have built several projects "
    "with Python and React and would love to learn from your team."
)


@pytest.fixture(scope="session", autouse=True)
def fast_password_hashing():
    # Minimum bcrypt cost keeps the suite quick
    auth.pwd_context.update(bcrypt__rounds=4)


@pytest.fixture()
def db(monkeypatch):
    database = mongomock.MongoClient()["placement_portal_test"]
    monkeypatch.setattr(mongodb, "_db", database)
    init_mongo_indexes()
    return database


@pytest.fixture()
def client(db):
    from placement_portal.main import app
    with TestClient(app) as test_client:
        yield test_client


def _insert_user(db, role, name, email, **extra) -> CurrentUser:
    now = utcnow()
    doc = {
        "name": name,
        "email": email,
        "password_hash": hash_password("secret123"),
        "role": role,
        "department": extra.pop("department", None),
        "company_name": extra.pop("company_name", None),
        "is_active": True,
        "created_at": now,
        "updated_at": now
    }
    doc.update(extra)
    db[COLLECTIONS["users"]].insert_one(doc)
    return CurrentUser(user_id=str(doc["_id"]), email=email, name=name, role=role)


def _insert_profile(db, student: CurrentUser, **overrides) -> dict:
    now = utcnow()
    doc = {
        "user_id": ObjectId(student.user_id),
        "program": "B.Tech Computer Science",
        "graduation_year": 2025,
        "cgpa": 8.0,
        "skills": ["Python", "SQL"],
        "projects": [],
        "resume_url": "https://example.com/resume.pdf",
        "linkedin_url": None,
        "github_url": None,
        "portfolio_url": None,
        "is_profile_complete": True,
        "created_at": now,
        "updated_at": now
    }
    doc.update(overrides)
    db[COLLECTIONS["profiles"]].insert_one(doc)
    return doc


@pytest.fixture()
def make_student(db):
    counter = {"n": 0}

    def factory(department="Computer Science", profile=True, **profile_overrides):
        counter["n"] += 1
        student = _insert_user(
            db, "student", f"Student {counter['n']}", f"student{counter['n']}@portal.com",
            department=department
        )
        if profile:
            _insert_profile(db, student, **profile_overrides)
        return student
    return factory


@pytest.fixture()
def make_company(db):
    counter = {"n": 0}

    def factory(company_name=None):
        counter["n"] += 1
        name = company_name or f"Company {counter['n']}"
        return _insert_user(
            db, "company", name, f"hr{counter['n']}@company.com", company_name=name
        )
    return factory


@pytest.fixture()
def admin(db):
    return _insert_user(db, "admin", "Admin", "admin@portal.com")


@pytest.fixture()
def make_job(db):
    def factory(company: CurrentUser, **overrides):
        data = {
            "title": "Backend Intern",
            "description": "Build and maintain REST APIs for the placement team.",
            "company": company.name,
            "skills": ["Python", "MongoDB"],
            "eligibility": {"min_cgpa": 7.5, "graduation_year": [2025]},
            "location": "Bangalore",
            "job_type": "internship",
            "deadline": utcnow() + timedelta(days=7)
        }
        data.update(overrides)
        return JobService().create(company, JobCreate(**data))
    return factory
