import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Index, Uuid, Enum
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow


class User(Base):
    """
    Marketplace account. Each user acts either as a job seeker or an employer.
    """
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    role = Column(
        Enum('job_seeker', 'employer', name='user_role', native_enum=False),
        nullable=False
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    # Relationships
    api_keys = relationship("ApiKey", back_populates="owner", cascade="all, delete-orphan")


class ApiKey(Base):
    """
    Hashed API credential.

    Only key_prefix is stored in plaintext, as a lookup index. The full
    secret exists only as a bcrypt hash and is returned once on issuance.
    """
    __tablename__ = 'api_keys'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    key_hash = Column(Text, nullable=False)
    key_prefix = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    scopes = Column(JSONType, default=list)

    last_used_at = Column(TIMESTAMP(timezone=True))
    expires_at = Column(TIMESTAMP(timezone=True))
    revoked_at = Column(TIMESTAMP(timezone=True))  # terminal
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    owner = relationship("User", back_populates="api_keys")

    __table_args__ = (
        Index('idx_api_keys_prefix', 'key_prefix'),
        Index('idx_api_keys_user', 'user_id'),
    )

    def to_public_dict(self) -> dict:
        """Everything except the hash."""
        return {
            'id': str(self.id),
            'user_id': str(self.user_id),
            'key_prefix': self.key_prefix,
            'name': self.name,
            'scopes': list(self.scopes or []),
            'last_used_at': self.last_used_at.isoformat() if self.last_used_at else None,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'revoked_at': self.revoked_at.isoformat() if self.revoked_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class AgentMapping(Base):
    """
    Where a user's agent can be woken. Only 'hosted' agents receive
    wake notifications through the orchestrator.
    """
    __tablename__ = 'agent_mappings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    agent_id = Column(Text, nullable=False)
    agent_hosting = Column(
        Enum('hosted', 'self', name='agent_hosting', native_enum=False),
        nullable=False,
        default='hosted'
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
