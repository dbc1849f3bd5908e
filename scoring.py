"""
Candidate scoring for daily matches

Score = Tone (0.40) + Location (0.30) + Age (0.20) + Profession (0.10)

Each signal contributes at most its weight, so the total stays in [0, 1].
Signals are independent and pluggable: anything with a `name`, a `weight`
and a `score(seeker, candidate)` method can be passed to `rank_candidates`.
"""
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import get_age_thresholds, get_signal_weights
from models import Profile, ScoredCandidate


class ScoringSignal:
    """Base class for one weighted scoring dimension"""

    name = 'signal'

    def __init__(self, weight: float):
        if weight < 0:
            raise ValueError(f"Signal weight must be non-negative, got {weight}")
        self.weight = weight

    def score(self, seeker: Profile, candidate: Profile) -> float:
        """
        Score a candidate for a seeker

        Returns:
            Contribution in [0, weight]
        """
        raise NotImplementedError


class ToneAffinitySignal(ScoringSignal):
    """
    Reflection tone affinity.

    No similarity model exists yet, so this draws a bounded random value.
    Pass a seeded `random.Random` to make runs reproducible.
    """

    name = 'tone'

    def __init__(self, weight: float, rng: Optional[random.Random] = None):
        super().__init__(weight)
        self.rng = rng or random.Random()

    def score(self, seeker: Profile, candidate: Profile) -> float:
        return self.weight * self.rng.random()


class LocationSignal(ScoringSignal):
    """Full weight for the same city, half for the same state only"""

    name = 'location'

    def score(self, seeker: Profile, candidate: Profile) -> float:
        if seeker.location_city and candidate.location_city == seeker.location_city:
            return self.weight
        if seeker.location_state and candidate.location_state == seeker.location_state:
            return self.weight / 2
        return 0.0


class AgeSignal(ScoringSignal):
    """Full weight within `full_years` of each other, half within `half_years`"""

    name = 'age'

    def __init__(self, weight: float, full_years: int = 5, half_years: int = 10):
        super().__init__(weight)
        self.full_years = full_years
        self.half_years = half_years

    def score(self, seeker: Profile, candidate: Profile) -> float:
        if seeker.age is None or candidate.age is None:
            return 0.0
        age_diff = abs(candidate.age - seeker.age)
        if age_diff <= self.full_years:
            return self.weight
        if age_diff <= self.half_years:
            return self.weight / 2
        return 0.0


class ProfessionSignal(ScoringSignal):
    """Exact, case-sensitive profession match"""

    name = 'profession'

    def score(self, seeker: Profile, candidate: Profile) -> float:
        if seeker.profession and candidate.profession == seeker.profession:
            return self.weight
        return 0.0


def default_signals(rng: Optional[random.Random] = None) -> List[ScoringSignal]:
    """Build the standard four signals from config weights"""
    weights = get_signal_weights()
    thresholds = get_age_thresholds()
    return [
        ToneAffinitySignal(weights['tone'], rng=rng),
        LocationSignal(weights['location']),
        AgeSignal(
            weights['age'],
            full_years=thresholds['full_weight_years'],
            half_years=thresholds['half_weight_years'],
        ),
        ProfessionSignal(weights['profession']),
    ]


def score_candidate(
    seeker: Profile,
    candidate: Profile,
    signals: Sequence[ScoringSignal]
) -> ScoredCandidate:
    """
    Score one candidate against a seeker

    Args:
        seeker: The user receiving introductions
        candidate: A potential match
        signals: Scoring signals to sum

    Returns:
        ScoredCandidate with the total score and per-signal breakdown
    """
    breakdown: Dict[str, float] = {}
    total = 0.0
    for signal in signals:
        contribution = min(max(signal.score(seeker, candidate), 0.0), signal.weight)
        breakdown[signal.name] = breakdown.get(signal.name, 0.0) + contribution
        total += contribution

    total = min(max(total, 0.0), 1.0)
    return ScoredCandidate(profile=candidate, score=total, breakdown=breakdown)


def rank_candidates(
    seeker: Profile,
    candidates: Iterable[Profile],
    signals: Sequence[ScoringSignal],
    limit: int = 2
) -> List[ScoredCandidate]:
    """
    Score and rank candidates for a seeker, keeping the top `limit`.

    The seeker and ineligible profiles are never offered. Equal scores keep
    the order the candidates arrived in.
    """
    if limit <= 0:
        return []

    scored = [
        score_candidate(seeker, candidate, signals)
        for candidate in candidates
        if candidate.user_id != seeker.user_id and candidate.is_eligible
    ]
    scored.sort(key=lambda c: c.score, reverse=True)
    return scored[:limit]


def canonical_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    """
    Order a pair of user ids for storage

    Raises:
        ValueError: if both ids are the same user
    """
    if user_a == user_b:
        raise ValueError(f"Cannot pair user {user_a} with themself")
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)
