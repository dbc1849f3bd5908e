"""
Tests for the HTTP surface
"""

import pytest

from app import create_app
from conftest import MATCH_DATE, FakeMatchStore, deterministic_signals, make_profile
from match_generator import DailyMatchGenerator
from match_store import StoreError
from models import Match


class BrokenGenerator:
    def generate_daily_matches(self):
        raise StoreError("Could not list eligible profiles: connection refused")


@pytest.fixture
def store():
    store = FakeMatchStore(profiles=[make_profile("a"), make_profile("b")])
    store.insert_match(Match(user1_id="a", user2_id="b", match_score=0.8, match_date=MATCH_DATE))
    return store


@pytest.fixture
def client(store):
    tokens = {"token-a": "a", "token-b": "b", "token-c": "c"}
    app = create_app(
        generator_factory=lambda: DailyMatchGenerator(store=store, signals=deterministic_signals()),
        store_factory=lambda: store,
        user_resolver=tokens.get,
    )
    app.config['TESTING'] = True
    return app.test_client()


class TestGenerateDailyMatches:
    """Test the generation trigger"""

    def test_success_body(self):
        """Test a successful run returns counts with CORS headers"""
        store = FakeMatchStore(profiles=[make_profile("a"), make_profile("b")])
        app = create_app(
            generator_factory=lambda: DailyMatchGenerator(store=store, signals=deterministic_signals())
        )
        response = app.test_client().post('/generate-daily-matches')

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['matchesCreated'] == 1
        assert body['usersProcessed'] == 2
        assert response.headers['Access-Control-Allow-Origin'] == '*'

    def test_failure_is_500_with_error(self):
        """Test a failed run returns 500 with the error message"""
        app = create_app(generator_factory=BrokenGenerator)
        response = app.test_client().post('/generate-daily-matches')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Could not list eligible profiles: connection refused'}
        assert response.headers['Access-Control-Allow-Origin'] == '*'

    def test_preflight(self, client):
        """Test OPTIONS preflight allows any origin"""
        response = client.options(
            '/generate-daily-matches',
            headers={
                'Origin': 'https://hearth.example',
                'Access-Control-Request-Method': 'POST',
                'Access-Control-Request-Headers': 'authorization, content-type',
            },
        )

        assert response.status_code == 200
        assert response.headers['Access-Control-Allow-Origin'] == '*'
        assert 'POST' in response.headers['Access-Control-Allow-Methods']

    def test_get_not_allowed(self, client):
        """Test GET is rejected"""
        assert client.get('/generate-daily-matches').status_code == 405


class TestRecordInterest:
    """Test the interest endpoint"""

    def test_requires_token(self, client, store):
        """Test requests without a token are rejected"""
        match_id = store.matches[0].id
        response = client.post(f'/matches/{match_id}/interest', json={'interested': True})
        assert response.status_code == 401

    def test_rejects_unknown_token(self, client, store):
        """Test unverifiable tokens are rejected"""
        match_id = store.matches[0].id
        response = client.post(
            f'/matches/{match_id}/interest',
            json={'interested': True},
            headers={'Authorization': 'Bearer nope'},
        )
        assert response.status_code == 401

    def test_requires_boolean(self, client, store):
        """Test a non-boolean interested flag is rejected"""
        match_id = store.matches[0].id
        response = client.post(
            f'/matches/{match_id}/interest',
            json={'interested': 'yes'},
            headers={'Authorization': 'Bearer token-a'},
        )
        assert response.status_code == 400

    def test_one_sided_then_mutual(self, client, store):
        """Test mutual is reported once both users are interested"""
        match_id = store.matches[0].id

        first = client.post(
            f'/matches/{match_id}/interest',
            json={'interested': True},
            headers={'Authorization': 'Bearer token-a'},
        )
        assert first.status_code == 200
        assert first.get_json()['mutual'] is False
        assert first.get_json()['match']['user1_interest'] == 'interested'

        second = client.post(
            f'/matches/{match_id}/interest',
            json={'interested': True},
            headers={'Authorization': 'Bearer token-b'},
        )
        assert second.get_json()['mutual'] is True

    def test_non_participant_forbidden(self, client, store):
        """Test outsiders get 403"""
        match_id = store.matches[0].id
        response = client.post(
            f'/matches/{match_id}/interest',
            json={'interested': True},
            headers={'Authorization': 'Bearer token-c'},
        )
        assert response.status_code == 403

    def test_unknown_match(self, client):
        """Test a missing match returns 404"""
        response = client.post(
            '/matches/missing/interest',
            json={'interested': False},
            headers={'Authorization': 'Bearer token-a'},
        )
        assert response.status_code == 404


def test_health(client):
    """Test the health check"""
    assert client.get('/health').get_json() == {'status': 'ok'}
