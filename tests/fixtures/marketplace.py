"""
Row factories for SQLite-backed tests.

Each helper inserts and commits one row with sensible defaults and returns
its id, so tests never hold ORM objects across sessions.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import sessionmaker

from database.models import (
    User, JobSeeker, Employer, JobPosting, AgentMapping, Application, Payment
)

FIXED_NOW = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


class MarketplaceFactory:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _add(self, row) -> uuid.UUID:
        session = self.session_factory()
        try:
            session.add(row)
            session.commit()
            return row.id
        finally:
            session.close()

    def user(self, role: str = 'job_seeker', email: Optional[str] = None) -> uuid.UUID:
        return self._add(User(email=email or f"{uuid.uuid4().hex[:10]}@example.com", role=role))

    def seeker(
        self,
        user_id: Optional[uuid.UUID] = None,
        skills: Optional[List[str]] = None,
        min_salary: Optional[int] = 100000,
        max_salary: Optional[int] = 150000,
        experience_years: int = 5,
        remote_preference: str = 'any',
        preferred_locations: Optional[List[str]] = None,
        has_paid: bool = True,
        agent_active: bool = True,
        full_name: str = 'Ada Lovelace'
    ) -> Dict[str, uuid.UUID]:
        user_id = user_id or self.user('job_seeker')
        seeker_id = self._add(JobSeeker(
            user_id=user_id,
            full_name=full_name,
            skills=skills if skills is not None else ['Python', 'React', 'Docker'],
            preferred_locations=preferred_locations or [],
            min_salary=min_salary,
            max_salary=max_salary,
            experience_years=experience_years,
            remote_preference=remote_preference,
            has_paid=has_paid,
            agent_active=agent_active,
        ))
        return {'user_id': user_id, 'seeker_id': seeker_id}

    def employer(self, company_name: str = 'Acme Corp') -> Dict[str, uuid.UUID]:
        user_id = self.user('employer')
        employer_id = self._add(Employer(user_id=user_id, company_name=company_name))
        return {'user_id': user_id, 'employer_id': employer_id}

    def job(self, employer_id: uuid.UUID, **overrides: Any) -> uuid.UUID:
        fields = dict(
            employer_id=employer_id,
            title='Backend Engineer',
            description='Build APIs',
            required_skills=['Python'],
            nice_to_have_skills=[],
            skill_weights=None,
            min_match_score=None,
            location='Berlin',
            remote_type='remote',
            salary_min=90000,
            salary_max=130000,
            experience_min=3,
            experience_max=None,
            status='active',
        )
        fields.update(overrides)
        return self._add(JobPosting(**fields))

    def agent(self, user_id: uuid.UUID, agent_id: str = 'agent-123', hosting: str = 'hosted') -> uuid.UUID:
        return self._add(AgentMapping(user_id=user_id, agent_id=agent_id, agent_hosting=hosting))

    def application(
        self,
        seeker_id: uuid.UUID,
        job_id: uuid.UUID,
        status: str = 'pending',
        created_at: datetime = FIXED_NOW,
        match_score: float = 75.0
    ) -> uuid.UUID:
        return self._add(Application(
            job_seeker_id=seeker_id,
            job_posting_id=job_id,
            match_score=match_score,
            status=status,
            cover_message='Hello',
            created_at=created_at,
            updated_at=created_at,
        ))

    def payment(self, seeker_id: uuid.UUID, charge_id: str = 'charge-1', status: str = 'created') -> uuid.UUID:
        return self._add(Payment(job_seeker_id=seeker_id, charge_id=charge_id, status=status))
