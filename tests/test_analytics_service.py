import pytest

from placement_portal.core.exceptions import ForbiddenError
from placement_portal.schemas.schemas import ApplicationCreate
from placement_portal.services.analytics_service import AnalyticsService
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.user_service import UserService

from tests.conftest import COVER_LETTER


@pytest.fixture()
def pipeline(make_student, make_company, make_job):
    """Two companies, three students, four applications at different stages."""
    acme, globex = make_company("Acme"), make_company("Globex")
    cs_2025 = make_student(department="Computer Science")
    cs_2025_b = make_student(department="Computer Science")
    mech_2026 = make_student(department="Mechanical", graduation_year=2026)

    acme_job = make_job(acme, skills=["Python", "SQL"])
    acme_open = make_job(acme, title="Data Intern", skills=["Python"],
                         eligibility={"min_cgpa": 6.0, "graduation_year": [2026]})
    globex_job = make_job(globex, skills=["Python", "Java"], eligibility={})

    service = ApplicationService()

    def apply(student, job):
        return service.submit(student, ApplicationCreate(job_id=job["id"], cover_letter=COVER_LETTER))

    offered = apply(cs_2025, acme_job)
    service.transition_stage(acme, offered["id"], "offered")
    rejected = apply(cs_2025_b, acme_job)
    service.transition_stage(acme, rejected["id"], "rejected")
    apply(mech_2026, acme_open)
    apply(cs_2025, globex_job)

    return {"acme": acme, "globex": globex, "mech": mech_2026}


def test_user_stats_counts_active_only(pipeline, admin):
    UserService().set_active(admin, pipeline["mech"].user_id, False)

    stats = AnalyticsService().user_stats(admin)

    assert stats["total"] == 5
    assert stats["by_role"] == {"student": 2, "company": 2, "admin": 1}


def test_job_stats(pipeline, admin):
    stats = AnalyticsService().job_stats(admin)

    assert stats["total"] == 3
    assert stats["active"] == 3
    assert stats["by_status"] == {"open": 3}
    assert stats["applications"] == 4
    assert stats["placement_rate"] == 25
    assert stats["funnel"] == {"offered": 1, "rejected": 1, "applied": 2}
    assert stats["skills_demand"][0] == {"skill": "Python", "count": 3}
    companies = {c["company_name"]: c["job_count"] for c in stats["company_stats"]}
    assert companies == {"Acme": 2, "Globex": 1}


def test_job_stats_with_no_applications(admin):
    stats = AnalyticsService().job_stats(admin)
    assert stats["applications"] == 0
    assert stats["placement_rate"] == 0
    assert stats["skills_demand"] == []


def test_placement_analytics_filters(pipeline, admin):
    service = AnalyticsService()

    overall = service.placement_analytics(admin)
    assert sum(f["count"] for f in overall["placement_funnel"]) == 4
    departments = {d["department"]: d["stages"] for d in overall["department_stats"]}
    assert departments["Mechanical"] == [{"stage": "applied", "count": 1}]

    batch = service.placement_analytics(admin, batch=2026)
    assert batch["placement_funnel"] == [{"stage": "applied", "count": 1}]

    cs = service.placement_analytics(admin, department="Computer Science")
    assert {f["stage"]: f["count"] for f in cs["placement_funnel"]} == {
        "applied": 1, "offered": 1, "rejected": 1
    }


def test_company_analytics_sorted_by_volume(pipeline, admin):
    stats = AnalyticsService().company_analytics(admin)["company_stats"]

    assert [s["company_name"] for s in stats] == ["Acme", "Globex"]
    assert stats[0]["total_applications"] == 3
    assert stats[0]["company_id"] == pipeline["acme"].user_id
    assert {s["stage"] for s in stats[0]["stages"]} == {"offered", "rejected", "applied"}


def test_analytics_admin_only(make_company):
    with pytest.raises(ForbiddenError):
        AnalyticsService().job_stats(make_company())
