"""
Shared fixtures for match generation tests
"""

import os
import sys
import uuid
from datetime import date

import pandas as pd
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from match_store import (MATCH_COLUMNS, DuplicateMatchError, MatchNotFoundError,
                         NotMatchParticipantError, StoreError)
from models import (INTEREST_INTERESTED, INTEREST_NOT_INTERESTED, Match,
                    Profile, Reflection)
from scoring import AgeSignal, LocationSignal, ProfessionSignal, ScoringSignal

MATCH_DATE = date(2026, 10, 18)


class FixedToneSignal(ScoringSignal):
    """Tone stand-in returning the same fraction of its weight every time"""

    name = 'tone'

    def __init__(self, weight: float = 0.4, fraction: float = 0.5):
        super().__init__(weight)
        self.fraction = fraction

    def score(self, seeker, candidate):
        return self.weight * self.fraction


class FakeMatchStore:
    """In-memory store that enforces the (user1_id, user2_id, match_date) constraint"""

    def __init__(self, profiles=None, reflections=None):
        self.profiles = list(profiles or [])
        self.reflections = dict(reflections or {})
        self.matches = []
        self.insert_attempts = []
        self.reflection_requests = []
        self.fail_profiles = False
        self.fail_reflections_for = set()
        self.fail_inserts_for = set()

    def list_eligible_profiles(self):
        if self.fail_profiles:
            raise StoreError("Could not list eligible profiles: connection refused")
        return [
            Profile(
                user_id=p.user_id,
                age=p.age,
                profession=p.profession,
                location_city=p.location_city,
                location_state=p.location_state,
                verified=p.verified,
                invisible=p.invisible,
            )
            for p in self.profiles
            if p.is_eligible
        ]

    def list_recent_reflections(self, user_id, limit=5):
        self.reflection_requests.append(user_id)
        if user_id in self.fail_reflections_for:
            raise StoreError(f"Timed out while trying to list reflections for {user_id}")
        return list(self.reflections.get(user_id, []))[:limit]

    def find_matches_for_date(self, match_date):
        return [m for m in self.matches if m.match_date == match_date]

    def insert_match(self, match):
        self.insert_attempts.append(match)
        if match.user1_id in self.fail_inserts_for or match.user2_id in self.fail_inserts_for:
            raise StoreError("Could not insert match: server error")
        if not match.user1_id < match.user2_id:
            raise StoreError("Could not insert match: violates matches_canonical_order")
        for existing in self.matches:
            if existing.pair == match.pair and existing.match_date == match.match_date:
                raise DuplicateMatchError("duplicate key value violates unique constraint")
        match.id = str(uuid.uuid4())
        self.matches.append(match)
        return match

    def get_match(self, match_id):
        for match in self.matches:
            if match.id == match_id:
                return match
        raise MatchNotFoundError(f"Match {match_id} not found")

    def record_interest(self, match_id, user_id, interested):
        match = self.get_match(match_id)
        if not match.involves(user_id):
            raise NotMatchParticipantError(f"User {user_id} is not part of match {match_id}")
        value = INTEREST_INTERESTED if interested else INTEREST_NOT_INTERESTED
        setattr(match, match.interest_field_for(user_id), value)
        return match

    def export_to_dataframe(self, match_date):
        matches = self.find_matches_for_date(match_date)
        return pd.DataFrame([m.to_response() for m in matches], columns=MATCH_COLUMNS)


def make_profile(user_id, age=30, profession="Teacher", city="Austin", state="TX",
                 verified=True, invisible=False):
    return Profile(
        user_id=user_id,
        age=age,
        profession=profession,
        location_city=city,
        location_state=state,
        verified=verified,
        invisible=invisible,
    )


def deterministic_signals(tone_fraction=0.5):
    return [
        FixedToneSignal(0.4, tone_fraction),
        LocationSignal(0.3),
        AgeSignal(0.2, full_years=5, half_years=10),
        ProfessionSignal(0.1),
    ]


@pytest.fixture
def signals():
    return deterministic_signals()


@pytest.fixture
def population():
    """Six eligible users plus one unverified and one invisible user"""
    return [
        make_profile("a1", age=30, profession="Teacher", city="Austin", state="TX"),
        make_profile("b2", age=32, profession="Nurse", city="Austin", state="TX"),
        make_profile("c3", age=45, profession="Teacher", city="Dallas", state="TX"),
        make_profile("d4", age=29, profession="Chef", city="Denver", state="CO"),
        make_profile("e5", age=38, profession="Teacher", city="Houston", state="TX"),
        make_profile("f6", age=61, profession="Pilot", city="Boise", state="ID"),
        make_profile("x8", age=31, profession="Teacher", city="Austin", state="TX", verified=False),
        make_profile("y9", age=30, profession="Teacher", city="Austin", state="TX", invisible=True),
    ]


@pytest.fixture
def fake_store(population):
    return FakeMatchStore(
        profiles=population,
        reflections={"a1": [Reflection(response="Grateful for slow mornings", tone_tags=["calm"])]},
    )
