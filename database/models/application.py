import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Numeric, UniqueConstraint, Index, Uuid, Enum
from sqlalchemy.orm import relationship

from .base import Base, utcnow

APPLICATION_STATUSES = ('pending', 'reviewing', 'shortlisted', 'interview_scheduled', 'accepted', 'rejected')


class Application(Base):
    """
    One job seeker's application to one job posting.

    match_score is frozen at creation and never recomputed. At most one
    application exists per (job_seeker, job_posting) pair.
    """
    __tablename__ = 'applications'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_seeker_id = Column(Uuid, ForeignKey('job_seekers.id', ondelete='CASCADE'), nullable=False)
    job_posting_id = Column(Uuid, ForeignKey('job_postings.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Numeric(5, 2), nullable=False)
    status = Column(
        Enum(*APPLICATION_STATUSES, name='application_status', native_enum=False),
        nullable=False,
        default='pending'
    )
    cover_message = Column(Text)
    employer_notes = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    job_seeker = relationship("JobSeeker", back_populates="applications")
    job_posting = relationship("JobPosting", back_populates="applications")
    conversation = relationship("Conversation", back_populates="application", uselist=False)

    __table_args__ = (
        UniqueConstraint('job_seeker_id', 'job_posting_id', name='uq_application_seeker_job'),
        Index('idx_applications_seeker_created', 'job_seeker_id', 'created_at'),
        Index('idx_applications_job', 'job_posting_id'),
        Index('idx_applications_status', 'status'),
    )

    def to_dict(self) -> dict:
        return {
            'id': str(self.id),
            'job_seeker_id': str(self.job_seeker_id),
            'job_posting_id': str(self.job_posting_id),
            'match_score': float(self.match_score) if self.match_score is not None else None,
            'status': self.status,
            'cover_message': self.cover_message,
            'employer_notes': self.employer_notes,
            'conversation_id': str(self.conversation.id) if self.conversation else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Conversation(Base):
    """Message thread attached to an application."""
    __tablename__ = 'conversations'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    application_id = Column(Uuid, ForeignKey('applications.id', ondelete='CASCADE'), nullable=False, unique=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    application = relationship("Application", back_populates="conversation")
    messages = relationship("Message", back_populates="conversation", order_by="Message.created_at")


class Message(Base):
    __tablename__ = 'messages'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(Uuid, ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False)
    sender_type = Column(
        Enum('agent', 'employer', 'system', name='sender_type', native_enum=False),
        nullable=False
    )
    content = Column(Text, nullable=False)
    read_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")

    __table_args__ = (
        Index('idx_messages_conversation', 'conversation_id', 'created_at'),
    )

    def to_dict(self) -> dict:
        return {
            'id': str(self.id),
            'conversation_id': str(self.conversation_id),
            'sender_type': self.sender_type,
            'content': self.content,
            'read_at': self.read_at.isoformat() if self.read_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
