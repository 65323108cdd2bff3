import logging

from sqlalchemy.orm import Session

from database.repositories import (
    ProfileRepository,
    JobPostingRepository,
    ApplicationRepository,
    ConversationRepository,
    ApiKeyRepository,
    ActivityRepository,
    AgentMappingRepository,
    PaymentRepository,
)

logger = logging.getLogger(__name__)


class MarketplaceRepository:
    """
    Single entry point over the per-aggregate repositories.

    All of them share one Session, so work done through any of them commits
    or rolls back together.
    """

    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.jobs = JobPostingRepository(db)
        self.applications = ApplicationRepository(db)
        self.conversations = ConversationRepository(db)
        self.api_keys = ApiKeyRepository(db)
        self.activity = ActivityRepository(db)
        self.agents = AgentMappingRepository(db)
        self.payments = PaymentRepository(db)

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
