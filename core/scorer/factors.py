#!/usr/bin/env python3
"""
Factor Scores - Salary, experience and location sub-scores.

Every function is total: missing optional data maps to a neutral value
instead of raising.
"""

from typing import Optional

from core.scorer.models import CandidateProfile, JobPosting

NEUTRAL_SALARY_SCORE = 50.0
OVERQUALIFIED_MARGIN_YEARS = 5


def score_salary(candidate: CandidateProfile, job: JobPosting) -> float:
    if not candidate.min_salary or not job.salary_max:
        return NEUTRAL_SALARY_SCORE

    if job.salary_max >= candidate.min_salary:
        return 100.0

    # Ranges still overlap at the bottom of the offer
    if job.salary_min and candidate.max_salary and job.salary_min <= candidate.max_salary:
        return 70.0

    shortfall = (candidate.min_salary - job.salary_max) / candidate.min_salary
    if shortfall <= 0.10:
        return 50.0
    if shortfall <= 0.20:
        return 30.0
    return 10.0


def score_experience(years: int, min_required: Optional[int], max_required: Optional[int]) -> float:
    years = years or 0
    min_required = min_required or 0

    if years >= min_required:
        if max_required and years > max_required + OVERQUALIFIED_MARGIN_YEARS:
            return 60.0
        return 100.0

    gap = min_required - years
    if gap <= 1:
        return 70.0
    if gap <= 2:
        return 40.0
    return 10.0


def score_location(candidate: CandidateProfile, job: JobPosting) -> float:
    if candidate.remote_preference == 'any':
        return 80.0

    if job.remote_type == candidate.remote_preference:
        return 100.0

    if job.location:
        job_location = job.location.lower()
        for preferred in candidate.preferred_locations or []:
            # a blank entry would match every location
            if preferred and preferred.strip() and preferred.strip().lower() in job_location:
                return 90.0

    if job.remote_type == 'hybrid':
        return 60.0

    return 30.0
