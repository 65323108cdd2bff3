import logging
from typing import List, Optional, Any

from sqlalchemy import select, update

from database.models import (
    Application, Conversation, Message, JobPosting, JobSeeker, Employer, utcnow
)
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ConversationRepository(BaseRepository):
    def get_for_participant(self, conversation_id: Any, user_id: Any, role: str) -> Optional[Conversation]:
        """
        Conversation the user takes part in: as the seeker who applied or as
        the employer owning the posting.
        """
        stmt = (
            select(Conversation)
            .join(Application, Application.id == Conversation.application_id)
            .join(JobPosting, JobPosting.id == Application.job_posting_id)
            .where(Conversation.id == conversation_id)
        )
        if role == 'employer':
            stmt = stmt.join(Employer, Employer.id == JobPosting.employer_id).where(Employer.user_id == user_id)
        else:
            stmt = stmt.join(JobSeeker, JobSeeker.id == Application.job_seeker_id).where(JobSeeker.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_messages(self, conversation_id: Any) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_message(self, conversation_id: Any, sender_type: str, content: str) -> Message:
        message = Message(conversation_id=conversation_id, sender_type=sender_type, content=content)
        self.db.add(message)
        self.db.flush()
        return message

    def mark_read(self, conversation_id: Any, reader_sender_type: str) -> int:
        """Mark the counterparty's unread messages as read. Returns rows updated."""
        stmt = (
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.sender_type != reader_sender_type,
                Message.read_at.is_(None)
            )
            .values(read_at=utcnow())
        )
        return self.db.execute(stmt).rowcount or 0
