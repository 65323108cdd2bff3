#!/usr/bin/env python3
"""
Job service - active postings, optionally scored for the calling seeker.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.scorer import ScoreCalculator
from database.repository import MarketplaceRepository
from .pagination import pagination
from ..exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)


class JobService:
    """Service for job listing and match explanations."""

    def __init__(self, db: Session, calculator: ScoreCalculator):
        self.repo = MarketplaceRepository(db)
        self.calculator = calculator

    def list_jobs(
        self,
        user_id: Any,
        role: Optional[str],
        remote_type: Optional[str] = None,
        salary_min: Optional[int] = None,
        skills: Optional[List[str]] = None,
        page: int = 1,
        per_page: int = 20,
        include_match_score: bool = False
    ) -> Dict[str, Any]:
        """
        Active postings, newest first. With include_match_score a job seeker
        gets the page ranked by aggregate score, each with its breakdown.
        """
        jobs, total = self.repo.jobs.list_active(
            remote_type=remote_type,
            min_salary=salary_min,
            skills=skills,
            limit=per_page,
            offset=(page - 1) * per_page
        )

        seeker = None
        if include_match_score and role == 'job_seeker':
            seeker = self.repo.profiles.get_seeker_by_user_id(user_id)

        if seeker is None:
            data = [job.to_dict() for job in jobs]
        else:
            ranked = self.calculator.rank(
                seeker.to_candidate_profile(), jobs, to_posting=lambda job: job.to_job_posting()
            )
            data = []
            for job, breakdown in ranked:
                item = job.to_dict()
                item['match_score'] = breakdown.overall_score
                item['breakdown'] = breakdown.components()
                data.append(item)

        return {'data': data, 'pagination': pagination(page, per_page, total)}

    def get_job(self, job_posting_id: Any) -> Dict[str, Any]:
        job = self.repo.jobs.get_by_id(job_posting_id)
        if job is None:
            raise NotFoundException('Job not found')
        return job.to_dict()

    def explain_match(self, user_id: Any, job_posting_id: Any) -> Dict[str, Any]:
        """Detailed breakdown of the caller's profile against one posting."""
        seeker = self.repo.profiles.get_seeker_by_user_id(user_id)
        if seeker is None:
            raise ValidationException('Create your profile first')

        job = self.repo.jobs.get_by_id(job_posting_id)
        if job is None:
            raise NotFoundException('Job not found')

        detailed = self.calculator.score_detailed(seeker.to_candidate_profile(), job.to_job_posting())
        return {
            'job_posting_id': str(job.id),
            'score': detailed.overall_score,
            'threshold': detailed.threshold,
            'passed': detailed.passed,
            'breakdown': detailed.breakdown.components(),
            'skill_analysis': detailed.skill_analysis(),
        }
