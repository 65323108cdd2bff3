import logging
from datetime import datetime
from typing import List, Optional, Any, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from database.models import Application, Conversation, Message, JobPosting, utcnow
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository):
    def get_for_pair(self, job_seeker_id: Any, job_posting_id: Any) -> Optional[Application]:
        stmt = select(Application).where(
            Application.job_seeker_id == job_seeker_id,
            Application.job_posting_id == job_posting_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def count_created_between(self, job_seeker_id: Any, start: datetime, end: datetime) -> int:
        """Applications created by the seeker in [start, end)."""
        stmt = select(func.count()).select_from(Application).where(
            Application.job_seeker_id == job_seeker_id,
            Application.created_at >= start,
            Application.created_at < end
        )
        return self.db.execute(stmt).scalar_one()

    def create_with_conversation(
        self,
        job_seeker_id: Any,
        job_posting_id: Any,
        match_score: float,
        cover_message: str,
        created_at: Optional[datetime] = None
    ) -> Tuple[Application, Conversation]:
        """
        Insert the application, its conversation and the cover message as the
        first agent message. Flushes so a duplicate pair fails here.
        """
        now = created_at or utcnow()
        application = Application(
            job_seeker_id=job_seeker_id,
            job_posting_id=job_posting_id,
            match_score=match_score,
            cover_message=cover_message,
            status='pending',
            created_at=now,
            updated_at=now,
        )
        self.db.add(application)
        self.db.flush()

        conversation = Conversation(application_id=application.id, created_at=now)
        self.db.add(conversation)
        self.db.flush()

        self.db.add(Message(
            conversation_id=conversation.id,
            sender_type='agent',
            content=cover_message,
            created_at=now,
        ))
        self.db.flush()

        application.conversation = conversation
        return application, conversation

    def get_for_employer(self, application_id: Any, employer_id: Any) -> Optional[Application]:
        stmt = (
            select(Application)
            .join(JobPosting, JobPosting.id == Application.job_posting_id)
            .where(Application.id == application_id, JobPosting.employer_id == employer_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_seeker(
        self,
        job_seeker_id: Any,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Application], int]:
        conditions = [Application.job_seeker_id == job_seeker_id]
        if status:
            conditions.append(Application.status == status)

        total = self.db.execute(
            select(func.count()).select_from(Application).where(*conditions)
        ).scalar_one()

        stmt = (
            select(Application)
            .where(*conditions)
            .options(selectinload(Application.job_posting).selectinload(JobPosting.employer))
            .order_by(Application.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    def list_for_employer(
        self,
        employer_id: Any,
        job_id: Optional[Any] = None,
        status: Optional[str] = None,
        sort_by: str = 'created_at',
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Application], int]:
        """
        Applications on the employer's postings, newest first or by the
        match score frozen at admission.
        """
        conditions = [JobPosting.employer_id == employer_id]
        if job_id is not None:
            conditions.append(Application.job_posting_id == job_id)
        if status:
            conditions.append(Application.status == status)

        total = self.db.execute(
            select(func.count())
            .select_from(Application)
            .join(JobPosting, JobPosting.id == Application.job_posting_id)
            .where(*conditions)
        ).scalar_one()

        if sort_by == 'match_score':
            ordering = (Application.match_score.desc(), Application.created_at.desc())
        else:
            ordering = (Application.created_at.desc(),)

        stmt = (
            select(Application)
            .join(JobPosting, JobPosting.id == Application.job_posting_id)
            .where(*conditions)
            .options(
                selectinload(Application.job_posting),
                selectinload(Application.job_seeker),
            )
            .order_by(*ordering, Application.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars().all()), total
