#!/usr/bin/env python3
"""
API tests for bearer authentication, key management and per-identity
rate limiting.
"""

import pytest

from core.auth import RateLimiter, InMemoryRateWindowStore

pytestmark = pytest.mark.db


@pytest.fixture
def user_id(factory):
    return factory.seeker()['user_id']


class TestAuthentication:

    def test_missing_header(self, client):
        response = client.get('/api/v1/auth/api-keys')

        assert response.status_code == 401
        assert response.json() == {
            'success': False,
            'error': 'Missing API key. Use Authorization: Bearer <key>',
            'code': 'UNAUTHORIZED',
            'details': {},
        }

    def test_unknown_key(self, client):
        response = client.get('/api/v1/auth/api-keys', headers={'Authorization': 'Bearer aj_live_' + '0' * 32})

        assert response.status_code == 401

    def test_wrong_scheme(self, client, app_context, user_id):
        secret, _ = app_context.credentials.issue(user_id, 'test')

        response = client.get('/api/v1/auth/api-keys', headers={'Authorization': f'Token {secret}'})

        assert response.status_code == 401


class TestApiKeys:

    def test_create_returns_secret_once(self, client, auth_headers, user_id):
        headers = auth_headers(user_id)

        created = client.post('/api/v1/auth/api-keys', json={'name': 'ci'}, headers=headers)

        assert created.status_code == 201
        body = created.json()
        assert body['key'].startswith('aj_live_')
        assert body['api_key']['name'] == 'ci'
        assert body['api_key']['key_prefix'] == body['key'][:16]

        listed = client.get('/api/v1/auth/api-keys', headers=headers).json()['data']
        assert sorted(k['name'] for k in listed) == ['ci', 'test']
        assert all('key' not in k and 'key_hash' not in k for k in listed)

    def test_new_key_authenticates(self, client, auth_headers, user_id):
        created = client.post('/api/v1/auth/api-keys', json={}, headers=auth_headers(user_id)).json()

        response = client.get('/api/v1/auth/api-keys', headers={'Authorization': f"Bearer {created['key']}"})

        assert response.status_code == 200
        assert created['api_key']['name'] == 'Default'

    def test_revoke(self, client, auth_headers, user_id):
        headers = auth_headers(user_id)
        created = client.post('/api/v1/auth/api-keys', json={'name': 'temp'}, headers=headers).json()
        key_id = created['api_key']['id']

        first = client.delete(f'/api/v1/auth/api-keys/{key_id}', headers=headers)
        second = client.delete(f'/api/v1/auth/api-keys/{key_id}', headers=headers)

        assert first.status_code == 200
        assert first.json() == {'success': True, 'id': key_id}
        assert second.status_code == 200
        revoked = client.get('/api/v1/auth/api-keys', headers={'Authorization': f"Bearer {created['key']}"})
        assert revoked.status_code == 401

    def test_revoke_someone_elses_key(self, client, auth_headers, factory, user_id):
        other = factory.employer()['user_id']
        foreign = client.post('/api/v1/auth/api-keys', json={'name': 'x'}, headers=auth_headers(other)).json()

        response = client.delete(f"/api/v1/auth/api-keys/{foreign['api_key']['id']}", headers=auth_headers(user_id))

        assert response.status_code == 404

    def test_expired_key_rejected(self, client, auth_headers, user_id):
        created = client.post(
            '/api/v1/auth/api-keys',
            json={'name': 'old', 'expires_at': '2020-01-01T00:00:00+00:00'},
            headers=auth_headers(user_id)
        ).json()

        response = client.get('/api/v1/auth/api-keys', headers={'Authorization': f"Bearer {created['key']}"})

        assert response.status_code == 401


class TestRateLimiting:

    @pytest.fixture
    def tight_budget(self, app_context):
        app_context.config.rate_limit.max_requests = 2
        app_context.rate_limiter = RateLimiter(InMemoryRateWindowStore())
        return app_context

    def test_headers_on_success(self, client, auth_headers, user_id):
        response = client.get('/api/v1/auth/api-keys', headers=auth_headers(user_id))

        assert response.headers['X-RateLimit-Limit'] == '100'
        assert response.headers['X-RateLimit-Remaining'] == '99'
        assert 'X-RateLimit-Reset' in response.headers

    def test_headers_on_error_responses(self, client, auth_headers, user_id):
        response = client.get('/api/v1/jobs/00000000-0000-0000-0000-000000000000', headers=auth_headers(user_id))

        assert response.status_code == 404
        assert response.headers['X-RateLimit-Remaining'] == '99'

    def test_budget_exhausted(self, client, auth_headers, user_id, tight_budget):
        headers = auth_headers(user_id)
        for _ in range(2):
            assert client.get('/api/v1/auth/api-keys', headers=headers).status_code == 200

        response = client.get('/api/v1/auth/api-keys', headers=headers)

        assert response.status_code == 429
        body = response.json()
        assert body['code'] == 'RATE_LIMIT_EXCEEDED'
        assert response.headers['X-RateLimit-Remaining'] == '0'
        assert int(response.headers['Retry-After']) >= 0
        assert body['details']['retry_after_seconds'] == int(response.headers['Retry-After'])

    def test_budget_is_per_user(self, client, auth_headers, factory, user_id, tight_budget):
        headers = auth_headers(user_id)
        for _ in range(3):
            client.get('/api/v1/auth/api-keys', headers=headers)

        other = auth_headers(factory.seeker()['user_id'])

        assert client.get('/api/v1/auth/api-keys', headers=other).status_code == 200

    def test_all_keys_of_a_user_share_the_budget(self, client, auth_headers, user_id, tight_budget):
        first = auth_headers(user_id)
        second = auth_headers(user_id)
        client.get('/api/v1/auth/api-keys', headers=first)
        client.get('/api/v1/auth/api-keys', headers=first)

        assert client.get('/api/v1/auth/api-keys', headers=second).status_code == 429


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'
