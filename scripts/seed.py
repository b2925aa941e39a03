#!/usr/bin/env python3
"""
Seed Script

Wipes the portal collections and creates demo accounts:
- admin@portal.com / admin123      (admin)
- student@portal.com / student123    (student, complete profile)
- company@portal.com / company123    (company, one open job)

Run: python scripts/seed.py
"""
import logging
from datetime import timedelta

from placement_portal.core.auth import hash_password
from placement_portal.core.logging import setup_logging
from placement_portal.db.mongodb import COLLECTIONS, get_mongo_db, init_mongo_indexes
from placement_portal.services.mongo_service import utcnow

logger = logging.getLogger("seed")


def _user(name, email, password, role, **extra):
    now = utcnow()
    doc = {
        "name": name,
        "email": email,
        "password_hash": hash_password(password),
        "role": role,
        "department": None,
        "company_name": None,
        "is_active": True,
        "created_at": now,
        "updated_at": now
    }
    doc.update(extra)
    return doc


def seed():
    db = get_mongo_db()
    for name in COLLECTIONS.values():
        db[name].delete_many({})
    logger.info("Cleared existing data")

    init_mongo_indexes()
    users = db[COLLECTIONS["users"]]

    users.insert_one(_user("System Admin", "admin@portal.com", "admin123", "admin"))

    student = _user("John Doe", "student@portal.com", "student123", "student",
                    department="Computer Science")
    users.insert_one(student)

    now = utcnow()
    db[COLLECTIONS["profiles"]].insert_one({
        "user_id": student["_id"],
        "program": "B.Tech Computer Science",
        "graduation_year": now.year,
        "cgpa": 8.5,
        "skills": ["JavaScript", "React", "Node.js", "MongoDB"],
        "projects": [{
            "title": "E-commerce Website",
            "description": "Full-stack e-commerce application with React and Node.js",
            "technologies": ["React", "Node.js", "MongoDB"],
            "url": "https://github.com/johndoe/ecommerce"
        }],
        "resume_url": "https://example.com/resume.pdf",
        "linkedin_url": None,
        "github_url": None,
        "portfolio_url": None,
        "is_profile_complete": True,
        "created_at": now,
        "updated_at": now
    })

    company = _user("Tech Corp", "company@portal.com", "company123", "company",
                    company_name="Tech Corp Solutions")
    users.insert_one(company)

    db[COLLECTIONS["jobs"]].insert_one({
        "company_id": company["_id"],
        "company": "Tech Corp Solutions",
        "title": "Software Engineering Intern",
        "description": "Work with the platform team on our Python and React services.",
        "skills": ["Python", "React", "MongoDB"],
        "eligibility": {
            "min_cgpa": 7.0,
            "graduation_year": [now.year, now.year + 1],
            "departments": ["Computer Science"],
            "verification_required": False
        },
        "location": "Bangalore",
        "is_remote": False,
        "job_type": "internship",
        "stipend": 25000,
        "salary": None,
        "deadline": now + timedelta(days=30),
        "status": "open",
        "max_applications": None,
        "screening_questions": [],
        "created_at": now,
        "updated_at": now
    })

    logger.info("Seeded admin, student and company accounts with one open job")


if __name__ == "__main__":
    setup_logging()
    seed()
