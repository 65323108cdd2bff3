import logging
from typing import List, Optional, Any, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from database.models import JobPosting, Application
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobPostingRepository(BaseRepository):
    def get_by_id(self, job_posting_id: Any) -> Optional[JobPosting]:
        return self.db.get(JobPosting, job_posting_id)

    def list_active(
        self,
        remote_type: Optional[str] = None,
        min_salary: Optional[int] = None,
        skills: Optional[List[str]] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[JobPosting], int]:
        """
        Active postings, newest first.

        Returns: (page_of_postings, total_count)
        """
        conditions = [JobPosting.status == 'active']
        if remote_type:
            conditions.append(JobPosting.remote_type == remote_type)
        if min_salary is not None:
            conditions.append(JobPosting.salary_max >= min_salary)

        stmt = (
            select(JobPosting)
            .where(*conditions)
            .options(selectinload(JobPosting.employer))
            .order_by(JobPosting.created_at.desc(), JobPosting.id)
        )

        wanted = {s.strip().lower() for s in skills or [] if s.strip()}
        if not wanted:
            total = self.db.execute(
                select(func.count()).select_from(JobPosting).where(*conditions)
            ).scalar_one()
            page = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
            return list(page), total

        # Array overlap is PostgreSQL-only; filter skills portably
        jobs = [
            job for job in self.db.execute(stmt).scalars().all()
            if wanted & {s.lower() for s in (job.required_skills or [])}
        ]
        return jobs[offset:offset + limit], len(jobs)

    def list_active_not_applied(self, job_seeker_id: Any) -> List[JobPosting]:
        applied = select(Application.job_posting_id).where(Application.job_seeker_id == job_seeker_id)
        stmt = (
            select(JobPosting)
            .where(JobPosting.status == 'active', JobPosting.id.not_in(applied))
            .order_by(JobPosting.created_at.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

