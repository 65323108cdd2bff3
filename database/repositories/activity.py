import logging
from typing import Optional, Any, Dict

from sqlalchemy import select

from database.models import ActivityLog, AgentMapping, Payment
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ActivityRepository(BaseRepository):
    def log(
        self,
        user_id: Any,
        action: str,
        api_key_id: Optional[Any] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> ActivityLog:
        entry = ActivityLog(
            user_id=user_id,
            api_key_id=api_key_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details or {},
        )
        self.db.add(entry)
        return entry


class AgentMappingRepository(BaseRepository):
    def get_hosted(self, user_id: Any) -> Optional[AgentMapping]:
        stmt = select(AgentMapping).where(
            AgentMapping.user_id == user_id,
            AgentMapping.agent_hosting == 'hosted'
        )
        return self.db.execute(stmt).scalar_one_or_none()


class PaymentRepository(BaseRepository):
    def get_by_charge_id(self, charge_id: str) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.charge_id == charge_id)
        return self.db.execute(stmt).scalar_one_or_none()
