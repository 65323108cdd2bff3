import uuid

from sqlalchemy import Column, Text, Integer, Numeric, TIMESTAMP, ForeignKey, Index, Uuid, Enum
from sqlalchemy.orm import relationship

from core.scorer import models as scoring
from .base import Base, JSONType, utcnow


class JobPosting(Base):
    """
    Job opening published by an employer.

    Only postings with status 'active' can be scored for admission.
    """
    __tablename__ = 'job_postings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employer_id = Column(Uuid, ForeignKey('employers.id', ondelete='CASCADE'), nullable=False)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')

    required_skills = Column(JSONType, default=list)
    nice_to_have_skills = Column(JSONType, default=list)
    skill_weights = Column(JSONType)  # skill -> positive weight, default 1
    min_match_score = Column(Numeric(5, 2))  # null = no threshold

    location = Column(Text)
    remote_type = Column(
        Enum('remote', 'onsite', 'hybrid', name='remote_type', native_enum=False),
        nullable=False,
        default='onsite'
    )
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    experience_min = Column(Integer, nullable=False, default=0)
    experience_max = Column(Integer)

    status = Column(
        Enum('active', 'paused', 'closed', 'filled', name='job_status', native_enum=False),
        nullable=False,
        default='active'
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    employer = relationship("Employer", back_populates="job_postings")
    applications = relationship("Application", back_populates="job_posting")

    __table_args__ = (
        Index('idx_job_postings_status', 'status'),
        Index('idx_job_postings_employer', 'employer_id'),
    )

    @property
    def company_name(self):
        return self.employer.company_name if self.employer else None

    def to_job_posting(self) -> scoring.JobPosting:
        return scoring.JobPosting(
            required_skills=list(self.required_skills or []),
            nice_to_have_skills=list(self.nice_to_have_skills or []),
            skill_weights=dict(self.skill_weights) if self.skill_weights else None,
            min_match_score=float(self.min_match_score) if self.min_match_score is not None else None,
            salary_min=self.salary_min,
            salary_max=self.salary_max,
            experience_min=self.experience_min or 0,
            experience_max=self.experience_max,
            remote_type=self.remote_type or 'onsite',
            location=self.location,
            status=self.status or 'active',
        )

    def to_dict(self) -> dict:
        return {
            'id': str(self.id),
            'employer_id': str(self.employer_id),
            'company_name': self.company_name,
            'title': self.title,
            'description': self.description,
            'required_skills': list(self.required_skills or []),
            'nice_to_have_skills': list(self.nice_to_have_skills or []),
            'skill_weights': dict(self.skill_weights) if self.skill_weights else None,
            'min_match_score': float(self.min_match_score) if self.min_match_score is not None else None,
            'location': self.location,
            'remote_type': self.remote_type,
            'salary_min': self.salary_min,
            'salary_max': self.salary_max,
            'experience_min': self.experience_min,
            'experience_max': self.experience_max,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
