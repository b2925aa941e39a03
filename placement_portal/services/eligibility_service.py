"""
Eligibility Service

Decides whether a student profile satisfies a job's eligibility rules.

Checks run in a fixed order and stop at the first failure, so the caller
always gets one human-readable reason:
1. CGPA >= the job minimum (when the job sets one, boundary inclusive)
2. Graduation year is one of the allowed years (when the job lists any)
3. The profile is marked complete

All three are required; the order only decides which reason is reported.
"""

from dataclasses import dataclass
from typing import Optional

CGPA_NOT_MET = "CGPA requirement not met"
GRADUATION_YEAR_NOT_MET = "Graduation year requirement not met"
PROFILE_INCOMPLETE = "Please complete your profile before applying"


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: Optional[str] = None


def evaluate_eligibility(eligibility: Optional[dict], profile: Optional[dict]) -> EligibilityResult:
    """
    Evaluate a job's eligibility block against a student profile document.

    Args:
        eligibility: job["eligibility"] (min_cgpa, graduation_year, ...); may be None
        profile: student_profiles document; None is treated as an empty,
                 incomplete profile

    Returns:
        EligibilityResult with the first failing reason, if any
    """
    eligibility = eligibility or {}
    profile = profile or {}

    min_cgpa = eligibility.get("min_cgpa")
    if min_cgpa is not None:
        cgpa = profile.get("cgpa")
        if cgpa is None or cgpa < min_cgpa:
            return EligibilityResult(False, CGPA_NOT_MET)

    allowed_years = eligibility.get("graduation_year") or []
    if allowed_years and profile.get("graduation_year") not in allowed_years:
        return EligibilityResult(False, GRADUATION_YEAR_NOT_MET)

    if not profile.get("is_profile_complete"):
        return EligibilityResult(False, PROFILE_INCOMPLETE)

    return EligibilityResult(True)
