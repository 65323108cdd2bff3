#!/usr/bin/env python3
"""
Job endpoints - browse active postings and explain match scores.
"""

import uuid
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.auth import CredentialIdentity
from ..dependencies import get_app_context, get_db, enforce_rate_limit, require_job_seeker
from ..models.responses import JobsResponse, MatchExplanationResponse
from ..services import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])


@router.get("", response_model=JobsResponse)
def list_jobs(
    remote_type: Optional[str] = Query(default=None, pattern="^(remote|onsite|hybrid)$"),
    salary_min: Optional[int] = Query(default=None, ge=0, description="Minimum offered salary_max"),
    skills: Optional[str] = Query(default=None, description="Comma separated required skills"),
    include_match_score: bool = Query(default=False, description="Rank by match score (job seekers)"),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=100),
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    ctx: AppContext = Depends(get_app_context),
    db: Session = Depends(get_db)
):
    """List active job postings, newest first or ranked by match score."""
    skill_list = [s.strip() for s in skills.split(',') if s.strip()] if skills else None

    service = JobService(db, ctx.calculator)
    return service.list_jobs(
        identity.user_id,
        identity.role,
        remote_type=remote_type,
        salary_min=salary_min,
        skills=skill_list,
        page=page,
        per_page=per_page,
        include_match_score=include_match_score
    )


@router.get("/{job_id}")
def get_job(
    job_id: uuid.UUID,
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    ctx: AppContext = Depends(get_app_context),
    db: Session = Depends(get_db)
):
    """Get one job posting."""
    return JobService(db, ctx.calculator).get_job(job_id)


@router.get("/{job_id}/match", response_model=MatchExplanationResponse)
def explain_match(
    job_id: uuid.UUID,
    identity: CredentialIdentity = Depends(require_job_seeker),
    ctx: AppContext = Depends(get_app_context),
    db: Session = Depends(get_db)
):
    """
    Score the caller's profile against a posting.

    Shows the four sub-scores, the employer's threshold and which required
    and nice-to-have skills matched, so an agent can decide before applying.
    """
    return JobService(db, ctx.calculator).explain_match(identity.user_id, job_id)
