from placement_portal.services.eligibility_service import (
    CGPA_NOT_MET,
    GRADUATION_YEAR_NOT_MET,
    PROFILE_INCOMPLETE,
    evaluate_eligibility
)

JOB = {"min_cgpa": 7.5, "graduation_year": [2025]}


def profile(**overrides):
    data = {"cgpa": 8.0, "graduation_year": 2025, "is_profile_complete": True}
    data.update(overrides)
    return data


def test_eligible_student():
    result = evaluate_eligibility(JOB, profile())
    assert result.eligible is True
    assert result.reason is None


def test_cgpa_below_minimum():
    result = evaluate_eligibility(JOB, profile(cgpa=7.0))
    assert result.eligible is False
    assert result.reason == "CGPA requirement not met"


def test_cgpa_boundary_is_inclusive():
    assert evaluate_eligibility(JOB, profile(cgpa=7.5)).eligible is True


def test_missing_cgpa_fails_when_minimum_set():
    assert evaluate_eligibility(JOB, profile(cgpa=None)).reason == CGPA_NOT_MET


def test_graduation_year_not_allowed():
    result = evaluate_eligibility(JOB, profile(graduation_year=2026))
    assert result.eligible is False
    assert result.reason == GRADUATION_YEAR_NOT_MET


def test_empty_year_list_allows_any_year():
    result = evaluate_eligibility({"min_cgpa": 7.5, "graduation_year": []}, profile(graduation_year=2030))
    assert result.eligible is True


def test_incomplete_profile_rejected():
    result = evaluate_eligibility(JOB, profile(is_profile_complete=False))
    assert result.reason == PROFILE_INCOMPLETE


def test_first_failure_wins():
    # Fails all three; CGPA is reported first
    result = evaluate_eligibility(JOB, profile(cgpa=5.0, graduation_year=2020, is_profile_complete=False))
    assert result.reason == CGPA_NOT_MET

    result = evaluate_eligibility(JOB, profile(graduation_year=2020, is_profile_complete=False))
    assert result.reason == GRADUATION_YEAR_NOT_MET


def test_no_requirements_only_needs_complete_profile():
    assert evaluate_eligibility(None, profile(cgpa=None, graduation_year=None)).eligible is True
    assert evaluate_eligibility({}, {}).reason == PROFILE_INCOMPLETE


def test_missing_profile_is_incomplete():
    assert evaluate_eligibility(JOB, None).reason == CGPA_NOT_MET
    assert evaluate_eligibility({}, None).reason == PROFILE_INCOMPLETE
