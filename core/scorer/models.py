#!/usr/bin/env python3
"""
Scoring Models - Inputs and results of candidate/job match scoring.

The scorer only ever sees these plain dataclasses; ORM rows are converted
with JobSeeker.to_candidate_profile() and JobPosting.to_job_posting().
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field


REMOTE_PREFERENCES = ('remote', 'onsite', 'hybrid', 'any')
REMOTE_TYPES = ('remote', 'onsite', 'hybrid')
JOB_STATUSES = ('active', 'paused', 'closed', 'filled')


@dataclass(frozen=True)
class CandidateProfile:
    """What a job seeker brings to a match."""
    skills: List[str] = field(default_factory=list)
    min_salary: Optional[int] = None
    max_salary: Optional[int] = None
    experience_years: int = 0
    remote_preference: str = 'any'
    preferred_locations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class JobPosting:
    """What a job opening asks for."""
    required_skills: List[str] = field(default_factory=list)
    nice_to_have_skills: List[str] = field(default_factory=list)
    skill_weights: Optional[Dict[str, float]] = None
    min_match_score: Optional[float] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    experience_min: int = 0
    experience_max: Optional[int] = None
    remote_type: str = 'onsite'
    location: Optional[str] = None
    status: str = 'active'


@dataclass(frozen=True)
class ScoreBreakdown:
    """Four sub-scores (0-100) and their weighted aggregate."""
    skills: float
    salary: float
    experience: float
    location: float
    overall_score: float

    def components(self) -> Dict[str, float]:
        return {
            'skills': self.skills,
            'salary': self.salary,
            'experience': self.experience,
            'location': self.location,
        }


@dataclass(frozen=True)
class WeightedSkill:
    skill: str
    weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {'skill': self.skill, 'weight': self.weight}


@dataclass(frozen=True)
class SkillSetAnalysis:
    """Partition of one skill set into matched and missing skills."""
    matched: List[WeightedSkill] = field(default_factory=list)
    missing: List[WeightedSkill] = field(default_factory=list)

    @property
    def matched_weight(self) -> float:
        return sum(s.weight for s in self.matched)

    @property
    def total_weight(self) -> float:
        return self.matched_weight + sum(s.weight for s in self.missing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'matched': [s.to_dict() for s in self.matched],
            'missing': [s.to_dict() for s in self.missing],
        }


@dataclass(frozen=True)
class DetailedScoreBreakdown:
    """ScoreBreakdown plus the diagnostics an agent needs to self-correct."""
    breakdown: ScoreBreakdown
    required_skills: SkillSetAnalysis
    nice_to_have_skills: SkillSetAnalysis
    threshold: Optional[float] = None

    @property
    def overall_score(self) -> float:
        return self.breakdown.overall_score

    @property
    def passed(self) -> bool:
        return self.threshold is None or self.breakdown.overall_score >= self.threshold

    def skill_analysis(self) -> Dict[str, Any]:
        return {
            'required_skills': self.required_skills.to_dict(),
            'nice_to_have_skills': self.nice_to_have_skills.to_dict(),
        }
