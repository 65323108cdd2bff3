#!/usr/bin/env python3
"""
Credential Store - API key issuance, validation and revocation.

Secrets look like "<key_prefix><hex>". The key prefix plus the first
prefix_length hex characters are stored in plaintext as a lookup index;
the full secret is kept only as a bcrypt hash. Validation compares the
secret against every usable key sharing that index.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple
import logging
import secrets
import uuid

import bcrypt

from core.config_loader import AuthConfig
from database.models import ApiKey, utcnow
from database.uow import marketplace_uow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialIdentity:
    """Who a validated secret belongs to."""
    user_id: uuid.UUID
    credential_id: uuid.UUID
    role: Optional[str] = None


class LastUsedRecorder:
    """
    Records last_used_at in the background with its own session.

    Failures are logged and dropped; authentication never waits on them.
    """

    def __init__(self, uow_factory: Callable = marketplace_uow, max_workers: int = 1):
        self.uow_factory = uow_factory
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='last-used')

    def record(self, credential_id: Any, at: datetime):
        return self._executor.submit(self._write, credential_id, at)

    def _write(self, credential_id: Any, at: datetime) -> None:
        try:
            with self.uow_factory() as repo:
                repo.api_keys.touch_last_used(credential_id, at)
        except Exception as e:
            logger.warning(f"Failed to update last_used_at for key {credential_id}: {e}")

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class CredentialStore:
    def __init__(
        self,
        config: Optional[AuthConfig] = None,
        uow_factory: Callable = marketplace_uow,
        recorder: Optional[LastUsedRecorder] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.config = config or AuthConfig()
        self.uow_factory = uow_factory
        self.recorder = recorder
        self.clock = clock

    @property
    def _index_length(self) -> int:
        return len(self.config.key_prefix) + self.config.prefix_length

    def generate_secret(self) -> Tuple[str, str]:
        """Return (secret, lookup prefix)."""
        secret = self.config.key_prefix + secrets.token_hex(self.config.random_bytes)
        return secret, secret[:self._index_length]

    def hash_secret(self, secret: str) -> str:
        salt = bcrypt.gensalt(rounds=self.config.bcrypt_rounds)
        return bcrypt.hashpw(secret.encode('utf-8'), salt).decode('utf-8')

    def parse_prefix(self, secret: Optional[str]) -> Optional[str]:
        """Lookup prefix of a presented secret, or None when it cannot be ours."""
        if not secret or not secret.startswith(self.config.key_prefix):
            return None
        if len(secret) != len(self.config.key_prefix) + self.config.random_bytes * 2:
            return None
        return secret[:self._index_length]

    def issue(self, owner_id: Any, label: str, expires_at: Optional[datetime] = None) -> Tuple[str, dict]:
        """
        Create a key for owner_id.

        Returns:
            (secret, public record). The secret is not retrievable later.
        """
        if expires_at is not None and expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(timezone.utc)

        secret, prefix = self.generate_secret()
        key_hash = self.hash_secret(secret)

        with self.uow_factory() as repo:
            record = repo.api_keys.create(owner_id, key_hash, prefix, label, expires_at=expires_at)
            repo.activity.log(
                user_id=owner_id,
                api_key_id=record.id,
                action='create_api_key',
                resource_type='api_key',
                resource_id=record.id,
                details={'name': label, 'key_prefix': prefix},
            )
            public = record.to_public_dict()

        logger.info(f"Issued API key {prefix}... for user {owner_id}")
        return secret, public

    def validate(self, secret: Optional[str]) -> Optional[CredentialIdentity]:
        prefix = self.parse_prefix(secret)
        if prefix is None:
            return None

        now = self.clock()
        encoded = secret.encode('utf-8')
        with self.uow_factory() as repo:
            for candidate in repo.api_keys.find_usable_by_prefix(prefix, now):
                if not self._matches(encoded, candidate):
                    continue
                owner = repo.api_keys.get_owner(candidate.user_id)
                identity = CredentialIdentity(
                    user_id=candidate.user_id,
                    credential_id=candidate.id,
                    role=owner.role if owner else None,
                )
                break
            else:
                return None

        if self.recorder is not None:
            try:
                self.recorder.record(identity.credential_id, now)
            except Exception as e:
                logger.warning(f"Could not schedule last_used_at update: {e}")
        return identity

    @staticmethod
    def _matches(encoded_secret: bytes, candidate: ApiKey) -> bool:
        try:
            return bcrypt.checkpw(encoded_secret, candidate.key_hash.encode('utf-8'))
        except ValueError:
            logger.error(f"Stored hash for key {candidate.id} is malformed")
            return False

    def revoke(self, credential_id: Any, owner_id: Any) -> bool:
        """
        Revoke one of owner_id's keys.

        Idempotent: revoking an already revoked key returns True and keeps
        the original revoked_at. Unknown or foreign keys return False.
        """
        with self.uow_factory() as repo:
            record = repo.api_keys.get_owned(credential_id, owner_id)
            if record is None:
                return False
            if record.revoked_at is None:
                record.revoked_at = self.clock()
                repo.activity.log(
                    user_id=owner_id,
                    action='revoke_api_key',
                    resource_type='api_key',
                    resource_id=record.id,
                    details={'key_prefix': record.key_prefix},
                )
                logger.info(f"Revoked API key {record.key_prefix}... for user {owner_id}")
        return True

    def list(self, owner_id: Any) -> List[dict]:
        with self.uow_factory() as repo:
            return [record.to_public_dict() for record in repo.api_keys.list_for_user(owner_id)]
