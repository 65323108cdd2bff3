#!/usr/bin/env python3
"""
Admission Pipeline - Decides whether an application is created.

Runs the ordered gates inside one unit of work while holding the
candidate's lock, then persists the application, its conversation and the
first agent message. The employer's agent is notified only after commit and
never awaited.
"""

from typing import Any, Callable, List, Optional, Sequence, Union
from datetime import datetime
import logging

from sqlalchemy.exc import IntegrityError

from core.config_loader import AdmissionConfig
from core.scorer import ScoreCalculator
from core.admission.gates import AdmissionContext, Gate, DEFAULT_GATES, quota_day_bounds
from core.admission.locks import CandidateLockRegistry
from core.admission.outcomes import AdmissionAccepted, AdmissionRejected, RejectionCode
from core.admission.writers import CoverMessageWriter
from database.models import utcnow
from database.uow import marketplace_uow

logger = logging.getLogger(__name__)

AdmissionOutcome = Union[AdmissionAccepted, AdmissionRejected]


class AdmissionPipeline:
    """
    Gate pipeline for job applications.

    Args:
        calculator: ScoreCalculator used by the match score gate
        config: AdmissionConfig (daily limit, reference timezone)
        notifier: Object with notify_user(user_id, event_type, payload), optional
        locks: Per-candidate lock registry shared by every caller in the process
        clock: Returns the current aware datetime
        uow_factory: Context manager factory yielding a MarketplaceRepository
        gates: Gate order override
    """

    def __init__(
        self,
        calculator: Optional[ScoreCalculator] = None,
        config: Optional[AdmissionConfig] = None,
        notifier: Optional[Any] = None,
        locks: Optional[CandidateLockRegistry] = None,
        clock: Callable[[], datetime] = utcnow,
        uow_factory: Callable = marketplace_uow,
        gates: Sequence[Gate] = DEFAULT_GATES
    ):
        self.calculator = calculator or ScoreCalculator()
        self.config = config or AdmissionConfig()
        self.notifier = notifier
        self.locks = locks or CandidateLockRegistry()
        self.clock = clock
        self.uow_factory = uow_factory
        self.gates = tuple(gates)

    def admit(
        self,
        user_id: Any,
        job_posting_id: Any,
        cover_message: Optional[str],
        api_key_id: Optional[Any] = None
    ) -> AdmissionOutcome:
        try:
            with self.locks.hold(user_id):
                with self.uow_factory() as repo:
                    ctx = AdmissionContext(
                        repo=repo,
                        calculator=self.calculator,
                        config=self.config,
                        user_id=user_id,
                        job_posting_id=job_posting_id,
                        cover_message=cover_message,
                        now=self.clock(),
                    )
                    rejection = self._run_gates(ctx)
                    if rejection is not None:
                        return rejection

                    accepted, employer_user_id = self._create(ctx, api_key_id)
        except IntegrityError:
            # Another process created the pair between the check and the insert
            logger.info(f"Duplicate application by user {user_id} for job {job_posting_id} lost the race")
            return AdmissionRejected(RejectionCode.DUPLICATE_APPLICATION, 'Already applied to this job')

        logger.info(
            f"Application {accepted.application['id']} created for job {job_posting_id} "
            f"with score {accepted.score.overall_score}"
        )
        self._notify(employer_user_id, 'application_received', {
            'application_id': accepted.application['id'],
            'job_posting_id': accepted.application['job_posting_id'],
            'job_title': accepted.job_title,
            'match_score': accepted.score.overall_score,
            'conversation_id': accepted.conversation_id,
        })
        return accepted

    def _run_gates(self, ctx: AdmissionContext) -> Optional[AdmissionRejected]:
        for gate in self.gates:
            rejection = gate(ctx)
            if rejection is not None:
                logger.debug(f"Gate {gate.__name__} rejected user {ctx.user_id}: {rejection.code.value}")
                return rejection
        return None

    def _create(self, ctx: AdmissionContext, api_key_id: Optional[Any]):
        score = ctx.detailed.breakdown
        application, conversation = ctx.repo.applications.create_with_conversation(
            job_seeker_id=ctx.seeker.id,
            job_posting_id=ctx.job.id,
            match_score=score.overall_score,
            cover_message=ctx.cover_message,
            created_at=ctx.now,
        )

        ctx.repo.activity.log(
            user_id=ctx.user_id,
            api_key_id=api_key_id,
            action='apply',
            resource_type='application',
            resource_id=application.id,
            details={
                'job_title': ctx.job.title,
                'company_name': ctx.job.company_name,
                'match_score': score.overall_score,
            }
        )

        accepted = AdmissionAccepted(
            application=application.to_dict(),
            conversation_id=str(conversation.id),
            score=score,
            job_title=ctx.job.title,
            company_name=ctx.job.company_name,
        )
        employer_user_id = ctx.job.employer.user_id if ctx.job.employer else None
        return accepted, employer_user_id

    def _notify(self, user_id: Any, event_type: str, payload: dict) -> None:
        if self.notifier is None or user_id is None:
            return
        try:
            self.notifier.notify_user(user_id, event_type, payload)
        except Exception as e:
            logger.error(f"Failed to schedule {event_type} notification for user {user_id}: {e}")

    def auto_apply(
        self,
        user_id: Any,
        writer: CoverMessageWriter,
        api_key_id: Optional[Any] = None
    ) -> List[AdmissionOutcome]:
        """
        Apply on the seeker's behalf to the best-ranked jobs not yet applied to.

        At most the remaining daily quota is attempted. Each attempt goes
        through admit(), so every gate still applies.
        """
        with self.uow_factory() as repo:
            seeker = repo.profiles.get_seeker_by_user_id(user_id)
            if seeker is None:
                return [AdmissionRejected(RejectionCode.VALIDATION_ERROR, 'Complete your profile first')]
            if not seeker.agent_active:
                return [AdmissionRejected(
                    RejectionCode.VALIDATION_ERROR,
                    'Agent is not active. Activate your agent first.'
                )]
            if not seeker.has_paid:
                return [AdmissionRejected(RejectionCode.PAYMENT_REQUIRED, 'Payment required to use agent')]

            start, end = quota_day_bounds(self.clock(), self.config.reference_timezone)
            used = repo.applications.count_created_between(seeker.id, start, end)
            remaining = self.config.daily_application_limit - used
            if remaining <= 0:
                return [AdmissionRejected(
                    RejectionCode.DAILY_LIMIT_REACHED,
                    f"Daily limit reached ({self.config.daily_application_limit} applications per day)",
                    {'limit': self.config.daily_application_limit, 'count': used, 'resets_at': end.isoformat()}
                )]

            candidates = repo.jobs.list_active_not_applied(seeker.id)
            ranked = self.calculator.rank(
                seeker.to_candidate_profile(),
                candidates,
                to_posting=lambda job: job.to_job_posting()
            )
            drafts = [(job.id, writer.write(seeker, job)) for job, _ in ranked[:remaining]]

        logger.info(f"Auto-apply for user {user_id}: {len(drafts)} of {len(ranked)} candidate jobs")
        return [
            self.admit(user_id, job_id, message, api_key_id=api_key_id)
            for job_id, message in drafts
        ]
