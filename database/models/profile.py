import uuid

from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Uuid, Enum
from sqlalchemy.orm import relationship

from core.scorer.models import CandidateProfile
from .base import Base, JSONType, utcnow


class JobSeeker(Base):
    """
    Job seeker profile. Scoring reads it through to_candidate_profile().
    """
    __tablename__ = 'job_seekers'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    full_name = Column(Text, nullable=False)
    resume_text = Column(Text, default='')

    skills = Column(JSONType, default=list)
    preferred_job_titles = Column(JSONType, default=list)
    preferred_locations = Column(JSONType, default=list)

    min_salary = Column(Integer)
    max_salary = Column(Integer)
    experience_years = Column(Integer, nullable=False, default=0)
    remote_preference = Column(
        Enum('remote', 'onsite', 'hybrid', 'any', name='remote_preference', native_enum=False),
        nullable=False,
        default='any'
    )

    agent_active = Column(Boolean, nullable=False, default=False)
    # One-time fee; never consumed by applications
    has_paid = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    user = relationship("User")
    applications = relationship("Application", back_populates="job_seeker")

    def to_candidate_profile(self) -> CandidateProfile:
        return CandidateProfile(
            skills=list(self.skills or []),
            min_salary=self.min_salary,
            max_salary=self.max_salary,
            experience_years=self.experience_years or 0,
            remote_preference=self.remote_preference or 'any',
            preferred_locations=list(self.preferred_locations or []),
        )


class Employer(Base):
    __tablename__ = 'employers'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    company_name = Column(Text, nullable=False)
    company_description = Column(Text)
    industry = Column(Text)
    website = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    user = relationship("User")
    job_postings = relationship("JobPosting", back_populates="employer")
