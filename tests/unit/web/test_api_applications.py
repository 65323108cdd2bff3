#!/usr/bin/env python3
"""
API tests for submitting and listing applications and agent auto-apply.
"""

import uuid

import pytest

pytestmark = pytest.mark.db


@pytest.fixture
def seeker(factory):
    return factory.seeker()


@pytest.fixture
def employer(factory):
    return factory.employer()


class TestCreateApplication:

    def test_created(self, client, factory, auth_headers, seeker, employer, notifier):
        job_id = factory.job(employer['employer_id'])

        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(job_id), 'cover_message': 'Hi there'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 201
        body = response.json()
        assert body['job_posting_id'] == str(job_id)
        assert body['status'] == 'pending'
        assert body['match_score'] == 98.0
        assert body['conversation_id']
        assert body['company_name'] == 'Acme Corp'
        notifier.notify_user.assert_called_once()
        assert notifier.notify_user.call_args[0][1] == 'application_received'

    def test_duplicate_is_conflict(self, client, factory, auth_headers, seeker, employer):
        job_id = factory.job(employer['employer_id'])
        factory.application(seeker['seeker_id'], job_id)

        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(job_id), 'cover_message': 'Again'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'DUPLICATE_APPLICATION'

    def test_unpaid_is_payment_required(self, client, factory, auth_headers, employer):
        unpaid = factory.seeker(has_paid=False)
        job_id = factory.job(employer['employer_id'])

        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(job_id), 'cover_message': 'Hi'},
            headers=auth_headers(unpaid['user_id'])
        )

        assert response.status_code == 402
        assert response.json()['code'] == 'PAYMENT_REQUIRED'

    def test_low_score_explains_gap(self, client, factory, auth_headers, seeker, employer):
        job_id = factory.job(employer['employer_id'], required_skills=['Rust', 'Go'], min_match_score=90)

        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(job_id), 'cover_message': 'Hi'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['code'] == 'MATCH_SCORE_TOO_LOW'
        assert body['details']['threshold'] == 90.0
        assert body['details']['score'] < 90
        missing = [s['skill'] for s in body['details']['skill_analysis']['required_skills']['missing']]
        assert missing == ['Rust', 'Go']

    def test_daily_limit(self, client, factory, auth_headers, seeker, employer, fixed_now):
        for _ in range(3):
            factory.application(seeker['seeker_id'], factory.job(employer['employer_id']), created_at=fixed_now)
        job_id = factory.job(employer['employer_id'])

        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(job_id), 'cover_message': 'Hi'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 429
        body = response.json()
        assert body['code'] == 'DAILY_LIMIT_REACHED'
        assert body['details']['limit'] == 3

    def test_unknown_job(self, client, auth_headers, seeker):
        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(uuid.uuid4()), 'cover_message': 'Hi'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 404
        assert response.json()['code'] == 'NOT_FOUND'

    def test_inactive_job(self, client, factory, auth_headers, seeker, employer):
        job_id = factory.job(employer['employer_id'], status='closed')

        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(job_id), 'cover_message': 'Hi'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'JOB_NOT_ACTIVE'

    def test_malformed_body(self, client, auth_headers, seeker):
        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': 'nope'},
            headers=auth_headers(seeker['user_id'])
        )

        assert response.status_code == 422
        assert response.json()['code'] == 'VALIDATION_ERROR'

    def test_requires_api_key(self, client):
        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(uuid.uuid4()), 'cover_message': 'Hi'}
        )

        assert response.status_code == 401
        assert response.json()['code'] == 'UNAUTHORIZED'

    def test_employers_cannot_apply(self, client, auth_headers, employer):
        response = client.post(
            '/api/v1/applications',
            json={'job_posting_id': str(uuid.uuid4()), 'cover_message': 'Hi'},
            headers=auth_headers(employer['user_id'])
        )

        assert response.status_code == 403
        assert response.json()['code'] == 'FORBIDDEN'


class TestListApplications:

    def test_lists_with_pagination(self, client, factory, auth_headers, seeker, employer):
        for _ in range(3):
            factory.application(seeker['seeker_id'], factory.job(employer['employer_id']))

        response = client.get('/api/v1/applications?per_page=2', headers=auth_headers(seeker['user_id']))

        assert response.status_code == 200
        body = response.json()
        assert len(body['data']) == 2
        assert body['pagination'] == {'page': 1, 'per_page': 2, 'total': 3, 'total_pages': 2}
        assert body['data'][0]['job_title'] == 'Backend Engineer'

    def test_status_filter(self, client, factory, auth_headers, seeker, employer):
        factory.application(seeker['seeker_id'], factory.job(employer['employer_id']), status='reviewing')
        factory.application(seeker['seeker_id'], factory.job(employer['employer_id']))

        response = client.get('/api/v1/applications?status=reviewing', headers=auth_headers(seeker['user_id']))

        assert [a['status'] for a in response.json()['data']] == ['reviewing']

    def test_invalid_status_filter(self, client, auth_headers, seeker):
        response = client.get('/api/v1/applications?status=hired', headers=auth_headers(seeker['user_id']))

        assert response.status_code == 400

    def test_only_own_applications(self, client, factory, auth_headers, seeker, employer):
        other = factory.seeker()
        factory.application(other['seeker_id'], factory.job(employer['employer_id']))

        response = client.get('/api/v1/applications', headers=auth_headers(seeker['user_id']))

        assert response.json()['data'] == []


class TestAutoApply:

    def test_applies_to_best_jobs(self, client, factory, auth_headers, seeker, employer):
        for _ in range(2):
            factory.job(employer['employer_id'])

        response = client.post('/api/v1/agent/apply', headers=auth_headers(seeker['user_id']))

        assert response.status_code == 200
        body = response.json()
        assert body['message'] == 'Applied to 2 job(s)'
        assert len(body['applications']) == 2
        assert body['rejections'] == []

    def test_no_jobs(self, client, auth_headers, seeker):
        response = client.post('/api/v1/agent/apply', headers=auth_headers(seeker['user_id']))

        assert response.status_code == 200
        assert response.json()['message'] == 'No new matching jobs found'

    def test_below_threshold_jobs_are_reported(self, client, factory, auth_headers, seeker, employer):
        factory.job(employer['employer_id'], required_skills=['Rust'], min_match_score=95)

        response = client.post('/api/v1/agent/apply', headers=auth_headers(seeker['user_id']))

        body = response.json()
        assert response.status_code == 200
        assert body['applications'] == []
        assert [r['code'] for r in body['rejections']] == ['MATCH_SCORE_TOO_LOW']

    def test_inactive_agent(self, client, factory, auth_headers):
        idle = factory.seeker(agent_active=False)

        response = client.post('/api/v1/agent/apply', headers=auth_headers(idle['user_id']))

        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'

    def test_unpaid(self, client, factory, auth_headers):
        unpaid = factory.seeker(has_paid=False)

        response = client.post('/api/v1/agent/apply', headers=auth_headers(unpaid['user_id']))

        assert response.status_code == 402
