from datetime import datetime

import pytest
from bson import ObjectId

from placement_portal.core.exceptions import (
    ConflictError, ForbiddenError, NotFoundError, ValidationFailed
)
from placement_portal.schemas.schemas import (
    MAX_GRADUATION_YEAR, CurrentUser, ProfileUpdate, RegisterRequest
)
from placement_portal.services import profile_service
from placement_portal.services.mongo_service import utcnow
from placement_portal.services.profile_service import (
    PLACEHOLDER_PROGRAM, StudentProfileService, is_profile_complete
)
from placement_portal.services.user_service import UserService


def register(role="student", email="new.student@portal.com", **extra):
    return UserService().register(RegisterRequest(
        name="New User", email=email, password="secret123", role=role, **extra
    ))


def as_actor(user: dict) -> CurrentUser:
    return CurrentUser(user_id=user["id"], email=user["email"], name=user["name"], role=user["role"])


# ------------------------------------------------------------
# Registration
# ------------------------------------------------------------

def test_register_student_creates_stub_profile(db):
    user = register(department="Computer Science")

    assert "password_hash" not in user
    profile = db.student_profiles.find_one({"user_id": ObjectId(user["id"])})
    assert profile["program"] == PLACEHOLDER_PROGRAM
    assert profile["graduation_year"] == min(utcnow().year + 4, MAX_GRADUATION_YEAR)
    assert profile["is_profile_complete"] is False


def test_register_company_has_no_profile(db):
    user = register(role="company", email="hr@company.com", company_name="Acme")

    assert user["company_name"] == "Acme"
    assert db.student_profiles.count_documents({}) == 0


def test_register_duplicate_email_case_insensitive(db):
    register()
    with pytest.raises(ConflictError):
        register(email="NEW.Student@portal.com")


def test_authenticate(db):
    register()
    service = UserService()

    assert service.authenticate("new.student@portal.com", "secret123") is not None
    assert service.authenticate("new.student@portal.com", "wrong") is None
    assert service.authenticate("nobody@portal.com", "secret123") is None


# ------------------------------------------------------------
# Profiles
# ------------------------------------------------------------

def test_profile_becomes_complete_when_all_fields_set(db):
    student = as_actor(register())
    service = StudentProfileService()

    partial = service.update_my_profile(student, ProfileUpdate(program="B.Tech IT", cgpa=8.1))
    assert partial["is_profile_complete"] is False
    assert partial["user"]["email"] == "new.student@portal.com"

    done = service.update_my_profile(student, ProfileUpdate(
        skills=["Python"], resume_url="https://example.com/cv.pdf", graduation_year=2026
    ))
    assert done["is_profile_complete"] is True
    assert done["program"] == "B.Tech IT"
    assert done["cgpa"] == 8.1


def test_profile_update_creates_missing_stub(db, make_student):
    student = make_student(profile=False)

    result = StudentProfileService().update_my_profile(student, ProfileUpdate(skills=["Go"]))

    assert result["skills"] == ["Go"]
    assert db.student_profiles.count_documents({}) == 1


def test_clearing_resume_marks_incomplete(make_student):
    student = make_student()
    result = StudentProfileService().update_my_profile(student, ProfileUpdate(resume_url=None))
    assert result["is_profile_complete"] is False


def test_missing_profile_is_not_found(make_student):
    with pytest.raises(NotFoundError):
        StudentProfileService().get_my_profile(make_student(profile=False))


def test_only_students_edit_profiles(make_company):
    with pytest.raises(ForbiddenError):
        StudentProfileService().update_my_profile(make_company(), ProfileUpdate(cgpa=9.0))


def test_is_profile_complete_rules():
    full = {
        "program": "MCA", "graduation_year": 2025, "cgpa": 0.0,
        "skills": ["C"], "resume_url": "https://example.com/r.pdf"
    }
    assert is_profile_complete(full) is True
    assert is_profile_complete({**full, "program": PLACEHOLDER_PROGRAM}) is False
    assert is_profile_complete({**full, "skills": []}) is False
    assert is_profile_complete({**full, "cgpa": None}) is False


def test_admin_lists_profiles_with_filters(make_student, admin):
    make_student(department="Computer Science", graduation_year=2025, skills=["Python"])
    make_student(department="Mechanical", graduation_year=2026, skills=["CAD"])
    service = StudentProfileService()

    assert service.list_profiles(admin)["pagination"]["total"] == 2
    by_dept = service.list_profiles(admin, department="Mechanical")["profiles"]
    assert [p["user"]["department"] for p in by_dept] == ["Mechanical"]
    assert service.list_profiles(admin, graduation_year=2025)["pagination"]["total"] == 1
    assert service.list_profiles(admin, skills=["CAD", "Rust"])["pagination"]["total"] == 1

    profile_id = by_dept[0]["id"]
    assert service.get_profile(admin, profile_id)["id"] == profile_id


def test_non_admin_cannot_list_profiles(make_student):
    with pytest.raises(ForbiddenError):
        StudentProfileService().list_profiles(make_student())


# ------------------------------------------------------------
# Admin user management
# ------------------------------------------------------------

def test_admin_list_users_search_and_filter(make_student, make_company, admin):
    make_student(department="Civil")
    make_company(company_name="Globex")
    service = UserService()

    assert service.list_users(admin, role="company")["pagination"]["total"] == 1
    assert service.list_users(admin, department="Civil")["users"][0]["role"] == "student"
    found = service.list_users(admin, search="globex")["users"]
    assert [u["name"] for u in found] == ["Globex"]
    assert all("password_hash" not in u for u in found)


def test_admin_deactivates_user(make_student, admin):
    student = make_student()
    result = UserService().set_active(admin, student.user_id, False)
    assert result["is_active"] is False


def test_admin_cannot_change_own_status(admin):
    with pytest.raises(ForbiddenError):
        UserService().set_active(admin, admin.user_id, False)


def test_set_active_unknown_user(admin):
    with pytest.raises(NotFoundError):
        UserService().set_active(admin, str(ObjectId()), True)


@pytest.mark.parametrize("field", ["program", "graduation_year", "skills", "projects"])
def test_update_cannot_clear_required_fields(db, make_student, field):
    student = make_student()

    with pytest.raises(ValidationFailed, match=f"{field} cannot be empty"):
        StudentProfileService().update_my_profile(student, ProfileUpdate(**{field: None}))

    stored = db.student_profiles.find_one({"user_id": ObjectId(student.user_id)})
    assert stored[field] is not None
    assert stored["is_profile_complete"] is True


def test_rejected_update_does_not_create_stub(db, make_student):
    student = make_student(profile=False)

    with pytest.raises(ValidationFailed):
        StudentProfileService().update_my_profile(student, ProfileUpdate(program=None))
    assert db.student_profiles.count_documents({}) == 0


def test_stub_graduation_year_stays_within_accepted_range(db, make_student, monkeypatch):
    monkeypatch.setattr(profile_service, "utcnow", lambda: datetime(2029, 6, 1))
    student = make_student(profile=False)

    stub = StudentProfileService().create_stub(ObjectId(student.user_id))

    assert stub["graduation_year"] == MAX_GRADUATION_YEAR
    # The stub value can be sent back unchanged
    assert ProfileUpdate(graduation_year=stub["graduation_year"]).graduation_year == MAX_GRADUATION_YEAR
