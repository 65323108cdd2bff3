#!/usr/bin/env python3
"""
Scoring Service - Deterministic candidate/job match scoring.

Combines four sub-scores into a weighted aggregate:
- Skills (weighted required / nice-to-have coverage)
- Salary (range compatibility)
- Experience (years vs. required range)
- Location (remote preference and preferred locations)

Pure computation: no I/O, no clock, no randomness. Identical inputs always
produce an identical breakdown.
"""

from typing import List, Optional, Iterable, Tuple, TypeVar, Callable
import math
import logging

from core.config_loader import ScorerConfig
from core.scorer.models import (
    CandidateProfile,
    JobPosting,
    ScoreBreakdown,
    DetailedScoreBreakdown,
)
from core.scorer import skills as skill_scoring
from core.scorer import factors

logger = logging.getLogger(__name__)

T = TypeVar('T')


def round_half_up(value: float, digits: int = 2) -> float:
    """Round on the scaled value, halves away from zero for positives."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


class ScoreCalculator:
    """
    Scores a CandidateProfile against a JobPosting.

    Weights come from ScorerConfig (0.40 / 0.30 / 0.20 / 0.10 by default).
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    def _aggregate(self, skills: float, salary: float, experience: float, location: float) -> float:
        total = (
            skills * self.config.weight_skills +
            salary * self.config.weight_salary +
            experience * self.config.weight_experience +
            location * self.config.weight_location
        )
        return min(100.0, max(0.0, round_half_up(total)))

    def score_detailed(self, candidate: CandidateProfile, job: JobPosting) -> DetailedScoreBreakdown:
        """Score plus matched/missing skill partitions and the job's threshold."""
        required, nice = skill_scoring.analyze_skills(
            candidate.skills,
            job.required_skills,
            job.nice_to_have_skills,
            job.skill_weights
        )

        skills = skill_scoring.score_skills(required, nice)
        salary = factors.score_salary(candidate, job)
        experience = factors.score_experience(
            candidate.experience_years, job.experience_min, job.experience_max
        )
        location = factors.score_location(candidate, job)

        breakdown = ScoreBreakdown(
            skills=skills,
            salary=salary,
            experience=experience,
            location=location,
            overall_score=self._aggregate(skills, salary, experience, location),
        )

        return DetailedScoreBreakdown(
            breakdown=breakdown,
            required_skills=required,
            nice_to_have_skills=nice,
            threshold=job.min_match_score,
        )

    def score(self, candidate: CandidateProfile, job: JobPosting) -> ScoreBreakdown:
        return self.score_detailed(candidate, job).breakdown

    def rank(
        self,
        candidate: CandidateProfile,
        jobs: Iterable[T],
        to_posting: Optional[Callable[[T], JobPosting]] = None
    ) -> List[Tuple[T, ScoreBreakdown]]:
        """
        Score every job and sort by aggregate, highest first.

        Args:
            candidate: Profile to score
            jobs: JobPosting objects, or arbitrary rows when to_posting is given
            to_posting: Converts a row into a JobPosting

        Returns:
            List of (job, breakdown) pairs; ties keep input order
        """
        scored = []
        for job in jobs:
            posting = to_posting(job) if to_posting else job
            scored.append((job, self.score(candidate, posting)))

        scored.sort(key=lambda pair: pair[1].overall_score, reverse=True)
        logger.debug(f"Ranked {len(scored)} jobs")
        return scored
