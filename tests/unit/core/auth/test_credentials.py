#!/usr/bin/env python3
"""
Tests for CredentialStore and LastUsedRecorder.

bcrypt runs at its minimum cost factor to keep the suite fast.
"""

import uuid
from datetime import timedelta, timezone, datetime
from unittest.mock import Mock

import pytest
from sqlalchemy import select

from core.config_loader import AuthConfig
from core.auth import CredentialStore, LastUsedRecorder
from database.models import ApiKey, ActivityLog

pytestmark = pytest.mark.db


@pytest.fixture
def auth_config():
    return AuthConfig(bcrypt_rounds=4)


@pytest.fixture
def store(auth_config, uow_factory, fixed_now):
    return CredentialStore(auth_config, uow_factory=uow_factory, clock=lambda: fixed_now)


@pytest.fixture
def owner(factory):
    return factory.user('job_seeker')


class TestIssue:

    def test_secret_format(self, store, owner):
        secret, public = store.issue(owner, 'laptop')

        assert secret.startswith('aj_live_')
        assert len(secret) == len('aj_live_') + 32
        assert public['key_prefix'] == secret[:16]
        assert public['name'] == 'laptop'
        assert 'key_hash' not in public

    def test_only_hash_is_stored(self, store, owner, session_factory):
        secret, public = store.issue(owner, 'laptop')

        with session_factory() as session:
            record = session.get(ApiKey, uuid.UUID(public['id']))
            assert record.key_hash != secret
            assert secret not in record.key_hash
            assert record.key_hash.startswith('$2')

    def test_logs_activity(self, store, owner, session_factory):
        store.issue(owner, 'laptop')

        with session_factory() as session:
            assert session.execute(select(ActivityLog.action)).scalars().all() == ['create_api_key']

    def test_secrets_are_unique(self, store, owner):
        first, _ = store.issue(owner, 'a')
        second, _ = store.issue(owner, 'b')

        assert first != second


class TestValidate:

    def test_valid_secret(self, store, owner):
        secret, public = store.issue(owner, 'laptop')

        identity = store.validate(secret)

        assert identity is not None
        assert identity.user_id == owner
        assert str(identity.credential_id) == public['id']
        assert identity.role == 'job_seeker'

    @pytest.mark.parametrize('presented', [None, '', 'Bearer nope', 'aj_live_short', 'sk_live_' + 'a' * 32])
    def test_malformed_secret(self, store, presented):
        assert store.validate(presented) is None

    def test_wrong_secret_with_same_prefix(self, store, owner):
        secret, _ = store.issue(owner, 'laptop')
        forged = secret[:16] + ('0' if secret[16] != '0' else '1') + secret[17:]

        assert len(forged) == len(secret)
        assert store.validate(forged) is None

    def test_revoked(self, store, owner):
        secret, public = store.issue(owner, 'laptop')
        assert store.revoke(uuid.UUID(public['id']), owner) is True

        assert store.validate(secret) is None

    def test_expired(self, store, owner, fixed_now):
        secret, _ = store.issue(owner, 'old', expires_at=fixed_now - timedelta(minutes=1))

        assert store.validate(secret) is None

    def test_not_yet_expired(self, store, owner, fixed_now):
        secret, _ = store.issue(owner, 'new', expires_at=fixed_now + timedelta(days=1))

        assert store.validate(secret) is not None

    def test_aware_expiry_in_other_timezone(self, store, owner):
        # 2026-03-10 14:30 UTC, an hour before the fixed clock
        expiry = datetime(2026, 3, 10, 16, 30, tzinfo=timezone(timedelta(hours=2)))
        secret, _ = store.issue(owner, 'tz', expires_at=expiry)

        assert store.validate(secret) is None

    def test_prefix_collision(self, store, owner, factory, uow_factory):
        """Keys sharing a lookup prefix resolve to their own owner."""
        secret, public = store.issue(owner, 'real')
        other_owner = factory.user('employer')
        other_secret = secret[:16] + 'f' * 24
        with uow_factory() as repo:
            other_id = repo.api_keys.create(
                other_owner, store.hash_secret(other_secret), secret[:16], 'collision'
            ).id

        mine = store.validate(secret)
        theirs = store.validate(other_secret)

        assert store.parse_prefix(other_secret) == store.parse_prefix(secret)
        assert mine.user_id == owner
        assert mine.credential_id == uuid.UUID(public['id'])
        assert theirs.user_id == other_owner
        assert theirs.credential_id == other_id
        assert theirs.role == 'employer'

    def test_malformed_stored_hash_is_skipped(self, store, owner, uow_factory):
        secret, _ = store.issue(owner, 'real')
        with uow_factory() as repo:
            repo.api_keys.create(owner, 'not-a-bcrypt-hash', secret[:16], 'broken')

        assert store.validate(secret) is not None

    def test_schedules_last_used(self, auth_config, uow_factory, owner, fixed_now):
        recorder = Mock()
        store = CredentialStore(auth_config, uow_factory=uow_factory, recorder=recorder, clock=lambda: fixed_now)
        secret, public = store.issue(owner, 'laptop')

        store.validate(secret)

        recorder.record.assert_called_once_with(uuid.UUID(public['id']), fixed_now)

    def test_recorder_scheduling_failure_is_ignored(self, auth_config, uow_factory, owner, fixed_now):
        recorder = Mock()
        recorder.record.side_effect = RuntimeError("executor shut down")
        store = CredentialStore(auth_config, uow_factory=uow_factory, recorder=recorder, clock=lambda: fixed_now)
        secret, _ = store.issue(owner, 'laptop')

        assert store.validate(secret) is not None


class TestRevokeAndList:

    def test_revoke_is_idempotent(self, store, owner, session_factory):
        _, public = store.issue(owner, 'laptop')
        key_id = uuid.UUID(public['id'])

        assert store.revoke(key_id, owner) is True
        assert store.revoke(key_id, owner) is True

        with session_factory() as session:
            actions = session.execute(select(ActivityLog.action)).scalars().all()
        assert actions.count('revoke_api_key') == 1

    def test_revoke_foreign_key(self, store, owner, factory):
        _, public = store.issue(owner, 'laptop')
        stranger = factory.user('employer')

        assert store.revoke(uuid.UUID(public['id']), stranger) is False

    def test_revoke_unknown_key(self, store, owner):
        assert store.revoke(uuid.uuid4(), owner) is False

    def test_list_hides_hash(self, store, owner):
        store.issue(owner, 'a')
        store.issue(owner, 'b')

        keys = store.list(owner)

        assert sorted(k['name'] for k in keys) == ['a', 'b']
        assert all('key_hash' not in k for k in keys)


class TestLastUsedRecorder:

    def test_writes_timestamp(self, store, owner, uow_factory, session_factory, fixed_now):
        _, public = store.issue(owner, 'laptop')
        recorder = LastUsedRecorder(uow_factory)

        recorder.record(uuid.UUID(public['id']), fixed_now).result(timeout=5)
        recorder.shutdown()

        with session_factory() as session:
            record = session.get(ApiKey, uuid.UUID(public['id']))
            assert record.last_used_at is not None

    def test_failure_is_swallowed(self):
        def broken_uow():
            raise RuntimeError("database unavailable")

        recorder = LastUsedRecorder(broken_uow)
        future = recorder.record(uuid.uuid4(), datetime.now(timezone.utc))

        assert future.result(timeout=5) is None
        recorder.shutdown()
