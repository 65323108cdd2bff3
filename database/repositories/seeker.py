import logging
from typing import Optional, Any

from sqlalchemy import select

from database.models import JobSeeker, Employer, User
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository):
    def get_user(self, user_id: Any) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_seeker_by_user_id(self, user_id: Any) -> Optional[JobSeeker]:
        stmt = select(JobSeeker).where(JobSeeker.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_seeker(self, job_seeker_id: Any) -> Optional[JobSeeker]:
        return self.db.get(JobSeeker, job_seeker_id)

    def lock_seeker(self, job_seeker_id: Any) -> Optional[JobSeeker]:
        """
        Re-read the seeker row with SELECT ... FOR UPDATE.

        Serializes concurrent admissions for the same candidate across
        processes on PostgreSQL; a no-op lock on SQLite.
        """
        stmt = (
            select(JobSeeker)
            .where(JobSeeker.id == job_seeker_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_employer_by_user_id(self, user_id: Any) -> Optional[Employer]:
        stmt = select(Employer).where(Employer.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def mark_paid(self, job_seeker_id: Any) -> bool:
        seeker = self.get_seeker(job_seeker_id)
        if seeker is None:
            logger.warning(f"Payment for unknown job seeker {job_seeker_id}")
            return False
        seeker.has_paid = True
        return True
