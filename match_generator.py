"""
Daily Match Generator - Creates daily introductions between verified users

Flow per run:
1. Snapshot eligible profiles and the day's existing matches
2. For each seeker not yet matched today: score every other eligible user
3. Keep the top N and insert one canonical-pair match row for each

Re-running on the same day is safe: already-matched users are skipped and the
unique (user1_id, user2_id, match_date) constraint rejects duplicate pairs.
"""
import argparse
import logging
import sys
from datetime import date
from typing import List, Optional, Sequence, Set, Union

from config import get_matches_per_user
from match_store import DuplicateMatchError, MatchStore, StoreError
from models import GenerationResult, Match, Profile, ScoredCandidate
from scoring import ScoringSignal, canonical_pair, default_signals, rank_candidates
from utils.helpers import parse_match_date

logger = logging.getLogger(__name__)


class DailyMatchGenerator:
    """Generate up to N new introductions per eligible user per day"""

    def __init__(
        self,
        store: Optional[MatchStore] = None,
        signals: Optional[Sequence[ScoringSignal]] = None,
        matches_per_user: Optional[int] = None
    ):
        self.store = store if store is not None else MatchStore()
        self.signals = list(signals) if signals is not None else default_signals()
        self.matches_per_user = matches_per_user if matches_per_user is not None else get_matches_per_user()

    def generate_daily_matches(self, match_date: Union[str, date, None] = None) -> GenerationResult:
        """
        Run one generation pass.

        Args:
            match_date: Day to generate for (defaults to today, UTC)

        Returns:
            GenerationResult with created/processed/skipped counts

        Raises:
            StoreError: if profiles or the day's matches cannot be read
        """
        match_date = parse_match_date(match_date)
        logger.info(f"Starting daily match generation for {match_date}")

        try:
            users = self.store.list_eligible_profiles()
            existing = self.store.find_matches_for_date(match_date)
        except StoreError:
            logger.error("Could not read match snapshot", exc_info=True)
            raise

        logger.info(f"Found {len(users)} eligible users, {len(existing)} matches already dated {match_date}")

        matched_today: Set[str] = set()
        for match in existing:
            matched_today.update(match.pair)

        result = GenerationResult(match_date=match_date, users_processed=len(users))

        for user in users:
            if user.user_id in matched_today:
                logger.info(f"User {user.user_id} already has matches for {match_date}")
                result.users_skipped += 1
                continue

            try:
                user.reflections = self.store.list_recent_reflections(user.user_id)
            except StoreError as e:
                logger.warning(f"Scoring user {user.user_id} without reflections: {e}")
                user.reflections = []

            top_matches = self.select_matches(user, users)
            if not top_matches:
                logger.info(f"No candidates found for user {user.user_id}")
                continue

            logger.info(f"Creating {len(top_matches)} matches for user {user.user_id}")
            for scored in top_matches:
                self._save_match(user, scored, match_date, result, matched_today)

        logger.info(
            f"Match generation complete. Created {result.matches_created} matches "
            f"for {result.users_processed} users ({result.users_skipped} skipped)"
        )
        return result

    def select_matches(self, seeker: Profile, population: List[Profile]) -> List[ScoredCandidate]:
        """Pick the seeker's top candidates from a profile snapshot"""
        return rank_candidates(seeker, population, self.signals, limit=self.matches_per_user)

    def _save_match(
        self,
        seeker: Profile,
        scored: ScoredCandidate,
        match_date: date,
        result: GenerationResult,
        matched_today: Set[str]
    ) -> None:
        user1, user2 = canonical_pair(seeker.user_id, scored.user_id)
        match = Match(
            user1_id=user1,
            user2_id=user2,
            match_score=scored.score,
            match_date=match_date,
        )

        try:
            self.store.insert_match(match)
        except DuplicateMatchError:
            # Created from the other side (or by a concurrent run)
            logger.info(f"Match {user1} <-> {user2} already exists for {match_date}")
            matched_today.update(match.pair)
            return
        except StoreError as e:
            logger.warning(f"Could not create match {user1} <-> {user2}: {e}")
            result.insert_failures += 1
            return

        result.matches_created += 1
        matched_today.update(match.pair)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(
        description="Generate today's matches for all eligible users"
    )
    parser.add_argument(
        '--date', '-d',
        help='Match date as YYYY-MM-DD (default: today, UTC)'
    )
    parser.add_argument(
        '--export', '-e',
        help='Write the day\'s matches to this CSV file after generating'
    )
    args = parser.parse_args(argv)

    try:
        match_date = parse_match_date(args.date)
    except ValueError:
        parser.error(f"Invalid date: {args.date}")

    store = MatchStore()
    try:
        result = DailyMatchGenerator(store=store).generate_daily_matches(match_date)
    except StoreError as e:
        logger.error(f"Matching error: {e}")
        return 1

    print(f"\nResult: {result.to_response()}")

    if args.export:
        df = store.export_to_dataframe(match_date)
        df.to_csv(args.export, index=False)
        print(f"Exported {len(df)} matches to {args.export}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
