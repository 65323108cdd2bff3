from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import sessionmaker

from core.config_loader import AppConfig
from core.admission import AdmissionPipeline, CandidateLockRegistry, CoverMessageWriter, TemplateCoverMessageWriter
from core.auth import (
    CredentialStore,
    LastUsedRecorder,
    RateLimiter,
    InMemoryRateWindowStore,
    RedisRateWindowStore,
)
from core.scorer import ScoreCalculator
from database.database import get_session_factory
from database.uow import marketplace_uow
from notification.service import NotificationService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Single source of truth for service instantiation. DB access should be
    obtained via marketplace_uow() inside each operation; the services
    below open their own units of work.
    """
    config: AppConfig
    session_factory: sessionmaker
    calculator: ScoreCalculator
    credentials: CredentialStore
    rate_limiter: RateLimiter
    admission: AdmissionPipeline
    notification_service: Optional[NotificationService] = None
    cover_writer: CoverMessageWriter = field(default_factory=TemplateCoverMessageWriter)

    def uow(self):
        return marketplace_uow(self.session_factory)

    @classmethod
    def build(cls, config: AppConfig, session_factory: Optional[sessionmaker] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            session_factory: Session factory override (tests bind SQLite)

        Returns:
            Fully wired AppContext instance
        """
        session_factory = session_factory or get_session_factory()

        def uow_factory():
            return marketplace_uow(session_factory)

        calculator = ScoreCalculator(config.matching.scorer)

        notification_service = None
        if config.notifications.enabled:
            notification_service = NotificationService(config.notifications, uow_factory=uow_factory)

        credentials = CredentialStore(
            config.auth,
            uow_factory=uow_factory,
            recorder=LastUsedRecorder(uow_factory, max_workers=config.auth.last_used_workers),
        )

        admission = AdmissionPipeline(
            calculator=calculator,
            config=config.admission,
            notifier=notification_service,
            locks=CandidateLockRegistry(),
            uow_factory=uow_factory,
        )

        return cls(
            config=config,
            session_factory=session_factory,
            calculator=calculator,
            credentials=credentials,
            rate_limiter=cls._build_rate_limiter(config),
            admission=admission,
            notification_service=notification_service
        )

    @staticmethod
    def _build_rate_limiter(config: AppConfig) -> RateLimiter:
        """Redis-backed windows when configured, in-process otherwise."""
        rate_config = config.rate_limit
        if rate_config.backend == 'redis' and rate_config.redis_url:
            return RateLimiter(RedisRateWindowStore.from_url(rate_config.redis_url))
        return RateLimiter(InMemoryRateWindowStore(max_entries=rate_config.max_tracked_identities))

    def shutdown(self) -> None:
        if self.credentials.recorder is not None:
            self.credentials.recorder.shutdown(wait=False)
