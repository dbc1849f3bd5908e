"""
Record types for daily match generation
Rows come from the Supabase tables: profiles, reflections, matches
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from utils.helpers import parse_age, parse_match_date

INTEREST_PENDING = 'pending'
INTEREST_INTERESTED = 'interested'
INTEREST_NOT_INTERESTED = 'not_interested'

INTEREST_STATES = (INTEREST_PENDING, INTEREST_INTERESTED, INTEREST_NOT_INTERESTED)


@dataclass
class Reflection:
    """A free-text journal entry authored by a user"""
    response: str = ""
    tone_tags: List[str] = None
    shared: bool = False

    def __post_init__(self):
        if self.tone_tags is None:
            self.tone_tags = []

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Reflection':
        return cls(
            response=row.get('response') or "",
            tone_tags=list(row.get('tone_tags') or []),
            shared=bool(row.get('shared', False)),
        )


@dataclass
class Profile:
    """A platform member as seen by the matcher"""
    user_id: str
    age: Optional[int] = None
    profession: Optional[str] = None
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    verified: bool = False
    invisible: bool = False
    reflections: List[Reflection] = None

    def __post_init__(self):
        if self.reflections is None:
            self.reflections = []

    @property
    def is_eligible(self) -> bool:
        """Verified and not hidden from matching"""
        return self.verified is True and self.invisible is False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Profile':
        return cls(
            user_id=str(row['user_id']),
            age=parse_age(row.get('age')),
            profession=row.get('profession'),
            location_city=row.get('location_city'),
            location_state=row.get('location_state'),
            verified=row.get('verified') is True,
            invisible=row.get('invisible') is True,
        )


@dataclass
class Match:
    """A proposed daily introduction between two users, stored in canonical order"""
    user1_id: str
    user2_id: str
    match_score: float
    match_date: date
    user1_interest: str = INTEREST_PENDING
    user2_interest: str = INTEREST_PENDING
    mutual_values: List[str] = field(default_factory=list)
    shared_reflections: List[str] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def pair(self) -> Tuple[str, str]:
        return (self.user1_id, self.user2_id)

    @property
    def is_mutual(self) -> bool:
        """Both participants said they are interested"""
        return (self.user1_interest == INTEREST_INTERESTED
                and self.user2_interest == INTEREST_INTERESTED)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)

    def interest_field_for(self, user_id: str) -> str:
        """Name of the interest column owned by user_id"""
        if user_id == self.user1_id:
            return 'user1_interest'
        if user_id == self.user2_id:
            return 'user2_interest'
        raise ValueError(f"User {user_id} is not part of match {self.id}")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Match':
        return cls(
            id=row.get('id'),
            user1_id=str(row['user1_id']),
            user2_id=str(row['user2_id']),
            match_score=float(row.get('match_score') or 0.0),
            match_date=parse_match_date(row.get('match_date')),
            user1_interest=row.get('user1_interest') or INTEREST_PENDING,
            user2_interest=row.get('user2_interest') or INTEREST_PENDING,
            mutual_values=list(row.get('mutual_values') or []),
            shared_reflections=list(row.get('shared_reflections') or []),
        )

    def to_row(self) -> Dict[str, Any]:
        """Insert payload for the matches table (id is assigned by the database)"""
        return {
            'user1_id': self.user1_id,
            'user2_id': self.user2_id,
            'match_score': self.match_score,
            'match_date': self.match_date.isoformat(),
            'user1_interest': self.user1_interest,
            'user2_interest': self.user2_interest,
            'mutual_values': list(self.mutual_values),
            'shared_reflections': list(self.shared_reflections),
        }

    def to_response(self) -> Dict[str, Any]:
        row = self.to_row()
        row['id'] = self.id
        return row


@dataclass
class ScoredCandidate:
    """A candidate profile with its score against one seeker"""
    profile: Profile
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def user_id(self) -> str:
        return self.profile.user_id


@dataclass
class GenerationResult:
    """Aggregate counts for one generator run"""
    match_date: date
    matches_created: int = 0
    users_processed: int = 0
    users_skipped: int = 0
    insert_failures: int = 0

    def to_response(self) -> Dict[str, Any]:
        return {
            'success': True,
            'matchesCreated': self.matches_created,
            'usersProcessed': self.users_processed,
            'usersSkipped': self.users_skipped,
        }
