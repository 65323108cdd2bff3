#!/usr/bin/env python3
"""
Skill Coverage - Weighted required / nice-to-have skill matching.

Skills match by case-insensitive exact string comparison. Each skill
carries a weight from the job's skill_weights map (default 1).
"""

from typing import Dict, Iterable, Optional, Tuple
import logging

from core.scorer.models import SkillSetAnalysis, WeightedSkill

logger = logging.getLogger(__name__)

NO_REQUIRED_SKILLS_SCORE = 70.0
REQUIRED_SHARE = 80.0
NICE_TO_HAVE_SHARE = 20.0
DEFAULT_SKILL_WEIGHT = 1.0


def _normalize_weights(skill_weights: Optional[Dict[str, float]]) -> Dict[str, float]:
    """Lower-case the weight map, dropping entries that are not positive numbers."""
    normalized: Dict[str, float] = {}
    for skill, weight in (skill_weights or {}).items():
        if not isinstance(skill, str):
            continue
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight <= 0:
            continue
        normalized[skill.strip().lower()] = float(weight)
    return normalized


def skill_weight(skill: str, weights: Dict[str, float]) -> float:
    return weights.get(skill.strip().lower(), DEFAULT_SKILL_WEIGHT)


def analyze_skill_set(
    candidate_skills: Iterable[str],
    job_skills: Iterable[str],
    skill_weights: Optional[Dict[str, float]] = None
) -> SkillSetAnalysis:
    """Split job_skills into matched and missing, keeping posting order."""
    weights = _normalize_weights(skill_weights)
    have = {s.strip().lower() for s in candidate_skills if isinstance(s, str)}

    matched, missing = [], []
    for skill in job_skills:
        entry = WeightedSkill(skill=skill, weight=skill_weight(skill, weights))
        if skill.strip().lower() in have:
            matched.append(entry)
        else:
            missing.append(entry)

    return SkillSetAnalysis(matched=matched, missing=missing)


def _coverage(analysis: SkillSetAnalysis) -> float:
    total = analysis.total_weight
    return analysis.matched_weight / total if total > 0 else 0.0


def score_skills(
    required: SkillSetAnalysis,
    nice_to_have: SkillSetAnalysis
) -> float:
    """
    Skills sub-score (0-100).

    Formula: 80 * required_coverage + 20 * nice_to_have_coverage, where an
    empty nice-to-have list earns the full 20 and an empty required list
    short-circuits to a flat 70.
    """
    if not required.matched and not required.missing:
        return NO_REQUIRED_SKILLS_SCORE

    required_score = _coverage(required) * REQUIRED_SHARE

    if nice_to_have.matched or nice_to_have.missing:
        nice_score = _coverage(nice_to_have) * NICE_TO_HAVE_SHARE
    else:
        nice_score = NICE_TO_HAVE_SHARE

    return required_score + nice_score


def analyze_skills(
    candidate_skills: Iterable[str],
    required_skills: Iterable[str],
    nice_to_have_skills: Iterable[str],
    skill_weights: Optional[Dict[str, float]] = None
) -> Tuple[SkillSetAnalysis, SkillSetAnalysis]:
    """Returns: (required_analysis, nice_to_have_analysis)"""
    candidate_skills = list(candidate_skills or [])
    required = analyze_skill_set(candidate_skills, required_skills or [], skill_weights)
    nice = analyze_skill_set(candidate_skills, nice_to_have_skills or [], skill_weights)
    return required, nice
