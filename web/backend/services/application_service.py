#!/usr/bin/env python3
"""
Application service - listing and employer status transitions.

Status moves forward only:
    pending -> reviewing -> shortlisted -> interview_scheduled
Any non-terminal status may jump ahead, or end in accepted / rejected.
accepted and rejected are terminal. Setting the current status again is a
no-op.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from database.models import APPLICATION_STATUSES, utcnow
from database.repository import MarketplaceRepository
from .pagination import pagination
from ..exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)

PROGRESSION = ('pending', 'reviewing', 'shortlisted', 'interview_scheduled')
TERMINAL_STATUSES = ('accepted', 'rejected')
EMPLOYER_SORT_KEYS = ('created_at', 'match_score')


def check_transition(current: str, target: str) -> Optional[str]:
    """Return why current -> target is not allowed, or None."""
    if target not in APPLICATION_STATUSES:
        return f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}"
    if current == target:
        return None
    if current in TERMINAL_STATUSES:
        return f"Application is already {current}"
    if target in TERMINAL_STATUSES:
        return None
    if PROGRESSION.index(target) < PROGRESSION.index(current):
        return f"Cannot move application back from {current} to {target}"
    return None


class ApplicationService:
    """Service for application queries and updates."""

    def __init__(self, db: Session, notifier: Optional[Any] = None):
        self.repo = MarketplaceRepository(db)
        self.notifier = notifier

    def list_for_seeker(
        self,
        user_id: Any,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 20
    ) -> Dict[str, Any]:
        seeker = self.repo.profiles.get_seeker_by_user_id(user_id)
        if seeker is None:
            raise ValidationException('Create your profile first')
        if status and status not in APPLICATION_STATUSES:
            raise ValidationException(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")

        applications, total = self.repo.applications.list_for_seeker(
            seeker.id, status=status, limit=per_page, offset=(page - 1) * per_page
        )

        data = []
        for application in applications:
            item = application.to_dict()
            item['job_title'] = application.job_posting.title
            item['company_name'] = application.job_posting.company_name
            data.append(item)

        return {'data': data, 'pagination': pagination(page, per_page, total)}

    def list_for_employer(
        self,
        user_id: Any,
        job_id: Optional[Any] = None,
        status: Optional[str] = None,
        sort_by: str = 'created_at',
        page: int = 1,
        per_page: int = 20
    ) -> Dict[str, Any]:
        """Applications to the employer's postings, for screening."""
        if status and status not in APPLICATION_STATUSES:
            raise ValidationException(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")
        if sort_by not in EMPLOYER_SORT_KEYS:
            raise ValidationException(f"Invalid sort_by. Must be one of: {', '.join(EMPLOYER_SORT_KEYS)}")

        employer = self.repo.profiles.get_employer_by_user_id(user_id)
        if employer is None:
            return {'data': [], 'pagination': pagination(page, per_page, 0)}

        applications, total = self.repo.applications.list_for_employer(
            employer.id,
            job_id=job_id,
            status=status,
            sort_by=sort_by,
            limit=per_page,
            offset=(page - 1) * per_page
        )

        data = []
        for application in applications:
            item = application.to_dict()
            item['job_title'] = application.job_posting.title
            item['seeker_name'] = application.job_seeker.full_name
            data.append(item)

        return {'data': data, 'pagination': pagination(page, per_page, total)}

    def update_status(
        self,
        employer_user_id: Any,
        application_id: Any,
        status: str,
        employer_notes: Optional[str] = None,
        api_key_id: Optional[Any] = None
    ) -> Dict[str, Any]:
        """
        Move an application on one of the employer's postings to status.

        Raises:
            ValidationException: Unknown status, no employer profile, or a
                transition out of a terminal state or backwards.
            NotFoundException: Application missing or owned by another employer.
        """
        if status not in APPLICATION_STATUSES:
            raise ValidationException(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")

        employer = self.repo.profiles.get_employer_by_user_id(employer_user_id)
        if employer is None:
            raise ValidationException('Employer profile not found')

        application = self.repo.applications.get_for_employer(application_id, employer.id)
        if application is None:
            raise NotFoundException('Application not found')

        previous = application.status
        problem = check_transition(previous, status)
        if problem:
            raise ValidationException(problem, {'from': previous, 'to': status})

        if employer_notes is not None:
            application.employer_notes = employer_notes

        if previous != status:
            application.status = status
            application.updated_at = utcnow()
            self.repo.activity.log(
                user_id=employer_user_id,
                api_key_id=api_key_id,
                action='update_application_status',
                resource_type='application',
                resource_id=application.id,
                details={'from': previous, 'to': status},
            )

        self.repo.flush()
        result = application.to_dict()
        seeker_user_id = application.job_seeker.user_id
        job_title = application.job_posting.title
        self.repo.commit()

        if previous != status:
            logger.info(f"Application {application_id} moved from {previous} to {status}")
            self._notify(seeker_user_id, {
                'application_id': result['id'],
                'job_posting_id': result['job_posting_id'],
                'job_title': job_title,
                'from': previous,
                'to': status,
            })
        return result

    def _notify(self, user_id: Any, payload: Dict[str, Any]) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify_user(user_id, 'application_status_changed', payload)
        except Exception as e:
            logger.error(f"Failed to schedule status notification for user {user_id}: {e}")
