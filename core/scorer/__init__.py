#!/usr/bin/env python3
"""
Scoring Module - Rule-based candidate/job match scoring.

Public API:
- ScoreCalculator: Computes ScoreBreakdown / DetailedScoreBreakdown
- CandidateProfile, JobPosting: Scoring inputs

Modules:
- models.py: Data structures (inputs, breakdowns, skill analysis)
- skills.py: Weighted skill coverage
- factors.py: Salary, experience and location sub-scores
- service.py: ScoreCalculator orchestrator
"""

from core.scorer.models import (
    CandidateProfile,
    JobPosting,
    ScoreBreakdown,
    DetailedScoreBreakdown,
    SkillSetAnalysis,
    WeightedSkill,
)
from core.scorer.service import ScoreCalculator, round_half_up

__all__ = [
    'ScoreCalculator',
    'round_half_up',
    'CandidateProfile',
    'JobPosting',
    'ScoreBreakdown',
    'DetailedScoreBreakdown',
    'SkillSetAnalysis',
    'WeightedSkill',
]
