"""Config loader for daily match generation settings"""
import json
import math
import os
from functools import lru_cache
from typing import Dict, Any, List

CONFIG_PATH = os.getenv(
    'MATCHING_CONFIG_PATH',
    os.path.join(os.path.dirname(__file__), 'matching.json')
)


@lru_cache(maxsize=1)
def load_matching_config() -> Dict[str, Any]:
    """Load and cache matching config from JSON file"""
    with open(CONFIG_PATH, 'r') as f:
        config = json.load(f)

    total = sum(config['signal_weights'].values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Signal weights must sum to 1.0, got {total}")
    return config


def get_signal_weights() -> Dict[str, float]:
    """Get per-signal weights keyed by signal name"""
    return dict(load_matching_config()['signal_weights'])


def get_age_thresholds() -> Dict[str, int]:
    """
    Get age-gap thresholds for the age signal.

    Returns:
        Dict with 'full_weight_years' and 'half_weight_years' keys
    """
    return dict(load_matching_config()['age_thresholds'])


def get_matches_per_user() -> int:
    """Get the number of new introductions generated per seeker per day"""
    return load_matching_config().get('matches_per_user', 2)


def get_reflection_limit() -> int:
    """Get how many recent reflections are fetched per seeker"""
    return load_matching_config().get('reflection_limit', 5)


def get_profile_page_size() -> int:
    return load_matching_config().get('profile_page_size', 1000)


def get_store_timeout() -> float:
    """Get per-request timeout (seconds) for store calls"""
    return float(load_matching_config().get('store_timeout_seconds', 10))


def get_cors_settings() -> Dict[str, List[str]]:
    """Get allowed CORS headers and methods for the HTTP surface"""
    return load_matching_config()['cors']
