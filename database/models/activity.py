import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Index, Uuid, Enum

from .base import Base, JSONType, utcnow


class ActivityLog(Base):
    """Audit trail of agent actions (apply, status changes, messages, keys)."""
    __tablename__ = 'agent_activity_log'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    api_key_id = Column(Uuid, ForeignKey('api_keys.id', ondelete='SET NULL'), nullable=True)
    action = Column(Text, nullable=False)
    resource_type = Column(Text)
    resource_id = Column(Text)
    # 'metadata' is reserved on declarative classes
    details = Column('metadata', JSONType, default=dict)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_activity_user_created', 'user_id', 'created_at'),
    )


class Payment(Base):
    """One-time unlock payment for a job seeker."""
    __tablename__ = 'payments'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_seeker_id = Column(Uuid, ForeignKey('job_seekers.id', ondelete='CASCADE'), nullable=False)
    charge_id = Column(Text, nullable=False, unique=True)
    status = Column(
        Enum('created', 'pending_confirmation', 'confirmed', 'failed', name='payment_status', native_enum=False),
        nullable=False,
        default='created'
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
