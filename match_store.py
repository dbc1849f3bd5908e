"""
Match store for daily match generation
Handles all profile/reflection/match database operations
"""
import logging
from datetime import date
from typing import List, Optional

import httpx
import pandas as pd
from postgrest.exceptions import APIError

from config import get_profile_page_size, get_reflection_limit
from models import (INTEREST_INTERESTED, INTEREST_NOT_INTERESTED, Match,
                    Profile, Reflection)
from supabase_client import get_admin_client

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

PROFILE_FIELDS = "user_id, location_city, location_state, age, profession, verified, invisible"
MATCH_COLUMNS = [
    "id", "user1_id", "user2_id", "match_score", "match_date",
    "user1_interest", "user2_interest", "mutual_values", "shared_reflections",
]


class StoreError(Exception):
    """A store call failed"""


class StoreTimeoutError(StoreError):
    """A store call did not answer within the configured timeout"""


class DuplicateMatchError(StoreError):
    """The canonical pair already has a match row for that date"""


class MatchNotFoundError(StoreError):
    pass


class NotMatchParticipantError(StoreError):
    """The user is neither party of the match"""


class MatchStore:
    def __init__(self, client=None):
        self.client = client if client is not None else get_admin_client()

    def _execute(self, query, action: str):
        """Run a query, translating client errors into store errors"""
        try:
            return query.execute()
        except httpx.TimeoutException as e:
            raise StoreTimeoutError(f"Timed out while trying to {action}") from e
        except APIError as e:
            raise StoreError(f"Could not {action}: {e.message}") from e
        except httpx.HTTPError as e:
            raise StoreError(f"Could not {action}: {e}") from e

    # ==========================================
    # PROFILES AND REFLECTIONS
    # ==========================================

    def list_eligible_profiles(self, page_size: Optional[int] = None) -> List[Profile]:
        """
        Fetch every verified, visible profile.

        Pages through the table to get past Supabase's 1000 row limit.
        """
        page_size = page_size or get_profile_page_size()
        profiles = []
        offset = 0

        while True:
            query = self.client.table("profiles") \
                .select(PROFILE_FIELDS) \
                .eq("verified", True) \
                .eq("invisible", False) \
                .order("user_id") \
                .range(offset, offset + page_size - 1)
            batch = self._execute(query, "list eligible profiles").data or []

            profiles.extend(Profile.from_row(row) for row in batch)

            if len(batch) < page_size:
                break
            offset += page_size

        return [p for p in profiles if p.is_eligible]

    def list_recent_reflections(self, user_id: str, limit: Optional[int] = None) -> List[Reflection]:
        """Get a user's most recent reflections, newest first"""
        query = self.client.table("reflections") \
            .select("response, tone_tags, shared") \
            .eq("user_id", user_id) \
            .order("created_at", desc=True) \
            .limit(limit or get_reflection_limit())
        rows = self._execute(query, f"list reflections for {user_id}").data or []
        return [Reflection.from_row(row) for row in rows]

    # ==========================================
    # MATCHES
    # ==========================================

    def find_matches_for_date(self, match_date: date, page_size: Optional[int] = None) -> List[Match]:
        """
        Get all match rows dated match_date.

        Pages through the table; a busy day holds more than 1000 rows.
        """
        page_size = page_size or get_profile_page_size()
        matches = []
        offset = 0

        while True:
            query = self.client.table("matches") \
                .select("*") \
                .eq("match_date", match_date.isoformat()) \
                .order("id") \
                .range(offset, offset + page_size - 1)
            batch = self._execute(query, f"find matches for {match_date}").data or []

            matches.extend(Match.from_row(row) for row in batch)

            if len(batch) < page_size:
                break
            offset += page_size

        return matches

    def insert_match(self, match: Match) -> Match:
        """
        Insert a single match row.

        Raises:
            DuplicateMatchError: the pair already has a row for match.match_date
            StoreError: any other failure
        """
        try:
            response = self.client.table("matches").insert(match.to_row()).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateMatchError(
                    f"Match {match.user1_id} <-> {match.user2_id} already exists for {match.match_date}"
                ) from e
            raise StoreError(f"Could not insert match: {e.message}") from e
        except httpx.TimeoutException as e:
            raise StoreTimeoutError("Timed out while inserting match") from e
        except httpx.HTTPError as e:
            raise StoreError(f"Could not insert match: {e}") from e

        return Match.from_row(response.data[0]) if response.data else match

    def get_match(self, match_id: str) -> Match:
        query = self.client.table("matches").select("*").eq("id", match_id).limit(1)
        rows = self._execute(query, f"get match {match_id}").data or []
        if not rows:
            raise MatchNotFoundError(f"Match {match_id} not found")
        return Match.from_row(rows[0])

    def record_interest(self, match_id: str, user_id: str, interested: bool) -> Match:
        """
        Set user_id's interest slot on a match

        Args:
            match_id: Match row id
            user_id: The participant expressing interest
            interested: True for 'interested', False for 'not_interested'

        Returns:
            The updated match
        """
        match = self.get_match(match_id)
        if not match.involves(user_id):
            raise NotMatchParticipantError(f"User {user_id} is not part of match {match_id}")

        interest_field = match.interest_field_for(user_id)
        value = INTEREST_INTERESTED if interested else INTEREST_NOT_INTERESTED

        query = self.client.table("matches").update({interest_field: value}).eq("id", match_id)
        rows = self._execute(query, f"record interest on match {match_id}").data or []
        if rows:
            return Match.from_row(rows[0])

        setattr(match, interest_field, value)
        return match

    def export_to_dataframe(self, match_date: date) -> pd.DataFrame:
        """Export a day's matches to a pandas DataFrame"""
        matches = self.find_matches_for_date(match_date)
        return pd.DataFrame([m.to_response() for m in matches], columns=MATCH_COLUMNS)
