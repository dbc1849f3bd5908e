"""
Interest service for daily matches
Records a participant's response to an introduction and reports mutual interest
"""
import logging
from typing import Any, Dict

from match_store import MatchStore

logger = logging.getLogger(__name__)


def express_interest(store: MatchStore, match_id: str, user_id: str, interested: bool) -> Dict[str, Any]:
    """
    Record whether user_id is interested in their match

    Args:
        store: Match store
        match_id: Match row id
        user_id: The participant responding
        interested: True for 'interested', False for 'not_interested'

    Returns:
        Dict with the updated 'match' and a 'mutual' flag, true once both
        participants are interested
    """
    match = store.record_interest(match_id, user_id, interested)
    mutual = match.is_mutual

    if mutual:
        logger.info(f"Mutual interest on match {match_id}")
    else:
        logger.info(f"User {user_id} responded to match {match_id} (interested={interested})")

    return {"match": match, "mutual": mutual}
