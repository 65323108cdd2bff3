import logging
from datetime import datetime
from typing import List, Optional, Any

from sqlalchemy import select, update, or_

from database.models import ApiKey, User
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ApiKeyRepository(BaseRepository):
    def create(self, user_id: Any, key_hash: str, key_prefix: str, name: str,
               expires_at: Optional[datetime] = None) -> ApiKey:
        record = ApiKey(
            user_id=user_id,
            key_hash=key_hash,
            key_prefix=key_prefix,
            name=name,
            scopes=[],
            expires_at=expires_at,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def find_usable_by_prefix(self, key_prefix: str, now: datetime) -> List[ApiKey]:
        """Non-revoked, non-expired keys sharing a prefix (collisions possible)."""
        stmt = select(ApiKey).where(
            ApiKey.key_prefix == key_prefix,
            ApiKey.revoked_at.is_(None),
            or_(ApiKey.expires_at.is_(None), ApiKey.expires_at > now)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_owned(self, api_key_id: Any, user_id: Any) -> Optional[ApiKey]:
        stmt = select(ApiKey).where(ApiKey.id == api_key_id, ApiKey.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_user(self, user_id: Any) -> List[ApiKey]:
        stmt = select(ApiKey).where(ApiKey.user_id == user_id).order_by(ApiKey.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def touch_last_used(self, api_key_id: Any, at: datetime) -> None:
        self.db.execute(update(ApiKey).where(ApiKey.id == api_key_id).values(last_used_at=at))

    def get_owner(self, user_id: Any) -> Optional[User]:
        return self.db.get(User, user_id)
