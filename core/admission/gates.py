#!/usr/bin/env python3
"""
Admission Gates - Ordered checks an application must pass.

Each gate takes the AdmissionContext and returns None to pass, or an
AdmissionRejected to stop the pipeline. Gates may populate the context
(seeker, job, detailed score) for the gates after them.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Tuple
from zoneinfo import ZoneInfo
import logging
import uuid

from core.config_loader import AdmissionConfig
from core.scorer import ScoreCalculator, DetailedScoreBreakdown
from core.admission.outcomes import AdmissionRejected, RejectionCode
from database.models import JobSeeker, JobPosting
from database.repository import MarketplaceRepository

logger = logging.getLogger(__name__)


@dataclass
class AdmissionContext:
    repo: MarketplaceRepository
    calculator: ScoreCalculator
    config: AdmissionConfig
    user_id: Any
    job_posting_id: Any
    cover_message: Optional[str]
    now: datetime

    seeker: Optional[JobSeeker] = None
    job: Optional[JobPosting] = None
    detailed: Optional[DetailedScoreBreakdown] = None


Gate = Callable[[AdmissionContext], Optional[AdmissionRejected]]


def quota_day_bounds(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    """UTC start and end of the calendar day containing now in tz_name."""
    tz = ZoneInfo(tz_name)
    local_start = now.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)
    local_end = local_start + timedelta(days=1)
    return local_start.astimezone(timezone.utc), local_end.astimezone(timezone.utc)


def require_profile(ctx: AdmissionContext) -> Optional[AdmissionRejected]:
    seeker = ctx.repo.profiles.get_seeker_by_user_id(ctx.user_id)
    if seeker is None:
        return AdmissionRejected(RejectionCode.VALIDATION_ERROR, 'Create your profile first')

    if not ctx.job_posting_id or not (ctx.cover_message or '').strip():
        return AdmissionRejected(
            RejectionCode.VALIDATION_ERROR,
            'job_posting_id and cover_message are required'
        )

    try:
        ctx.job_posting_id = uuid.UUID(str(ctx.job_posting_id))
    except ValueError:
        return AdmissionRejected(RejectionCode.VALIDATION_ERROR, 'job_posting_id must be a UUID')

    # Row lock held until the unit of work ends
    ctx.seeker = ctx.repo.profiles.lock_seeker(seeker.id)
    return None


def require_active_job(ctx: AdmissionContext) -> Optional[AdmissionRejected]:
    job = ctx.repo.jobs.get_by_id(ctx.job_posting_id)
    if job is None:
        return AdmissionRejected(RejectionCode.NOT_FOUND, 'Job not found')
    if job.status != 'active':
        return AdmissionRejected(
            RejectionCode.JOB_NOT_ACTIVE,
            'This job is no longer accepting applications',
            {'status': job.status}
        )
    ctx.job = job
    return None


def reject_duplicate(ctx: AdmissionContext) -> Optional[AdmissionRejected]:
    existing = ctx.repo.applications.get_for_pair(ctx.seeker.id, ctx.job.id)
    if existing is not None:
        return AdmissionRejected(
            RejectionCode.DUPLICATE_APPLICATION,
            'Already applied to this job',
            {'application_id': str(existing.id)}
        )
    return None


def require_payment(ctx: AdmissionContext) -> Optional[AdmissionRejected]:
    if not ctx.seeker.has_paid:
        return AdmissionRejected(
            RejectionCode.PAYMENT_REQUIRED,
            'Payment required to unlock job applications'
        )
    return None


def require_match_score(ctx: AdmissionContext) -> Optional[AdmissionRejected]:
    detailed = ctx.calculator.score_detailed(
        ctx.seeker.to_candidate_profile(), ctx.job.to_job_posting()
    )
    ctx.detailed = detailed

    if detailed.passed:
        return None

    logger.info(
        f"Seeker {ctx.seeker.id} scored {detailed.overall_score} on job {ctx.job.id} "
        f"(threshold {detailed.threshold})"
    )
    return AdmissionRejected(
        RejectionCode.MATCH_SCORE_TOO_LOW,
        f"Match score {detailed.overall_score} is below the required threshold of {detailed.threshold}",
        {
            'score': detailed.overall_score,
            'threshold': detailed.threshold,
            'breakdown': detailed.breakdown.components(),
            'skill_analysis': detailed.skill_analysis(),
        }
    )


def enforce_daily_quota(ctx: AdmissionContext) -> Optional[AdmissionRejected]:
    start, end = quota_day_bounds(ctx.now, ctx.config.reference_timezone)
    count = ctx.repo.applications.count_created_between(ctx.seeker.id, start, end)
    limit = ctx.config.daily_application_limit

    if count >= limit:
        return AdmissionRejected(
            RejectionCode.DAILY_LIMIT_REACHED,
            f"Daily limit reached ({limit} applications per day)",
            {'limit': limit, 'count': count, 'resets_at': end.isoformat()}
        )
    return None


DEFAULT_GATES: Tuple[Gate, ...] = (
    require_profile,
    require_active_job,
    reject_duplicate,
    require_payment,
    require_match_score,
    enforce_daily_quota,
)
