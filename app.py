"""
HTTP surface for daily match generation

POST /generate-daily-matches      run one generation pass for today
POST /matches/<match_id>/interest record the caller's interest in a match
GET  /health                      health check

Run locally with:
    flask --app app run
"""
import logging
from typing import Callable, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS

from config import get_cors_settings
from interest_service import express_interest
from match_generator import DailyMatchGenerator
from match_store import MatchNotFoundError, MatchStore, NotMatchParticipantError
from supabase_client import get_client
from utils.helpers import extract_bearer_token

# Load environment variables
load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def resolve_user_id(token: str) -> Optional[str]:
    """Look up the Supabase user behind a JWT, None if the token is not valid"""
    try:
        response = get_client().auth.get_user(token)
    except Exception as e:
        logger.warning(f"Could not verify access token: {e}")
        return None
    user = response.user if response else None
    return str(user.id) if user else None


def create_app(
    generator_factory: Optional[Callable[[], DailyMatchGenerator]] = None,
    store_factory: Optional[Callable[[], MatchStore]] = None,
    user_resolver: Optional[Callable[[str], Optional[str]]] = None
) -> Flask:
    """
    Build the Flask app

    Args:
        generator_factory: Returns the generator used per request
        store_factory: Returns the match store used by the interest endpoint
        user_resolver: Maps a bearer token to a user id
    """
    generator_factory = generator_factory or DailyMatchGenerator
    store_factory = store_factory or MatchStore
    user_resolver = user_resolver or resolve_user_id

    app = Flask(__name__)
    cors = get_cors_settings()
    CORS(
        app,
        origins="*",
        send_wildcard=True,
        allow_headers=cors['allow_headers'],
        methods=cors['methods'],
    )

    @app.route('/generate-daily-matches', methods=['POST', 'OPTIONS'])
    def generate_daily_matches():
        if request.method == 'OPTIONS':
            return '', 200

        try:
            result = generator_factory().generate_daily_matches()
        except Exception as e:
            logger.error("Matching error", exc_info=True)
            return jsonify({'error': str(e) or 'Unknown error'}), 500

        return jsonify(result.to_response())

    @app.route('/matches/<match_id>/interest', methods=['POST', 'OPTIONS'])
    def record_interest(match_id):
        if request.method == 'OPTIONS':
            return '', 200

        token = extract_bearer_token(request.headers.get('Authorization'))
        user_id = user_resolver(token) if token else None
        if not user_id:
            return jsonify({'error': 'Not authenticated'}), 401

        body = request.get_json(silent=True) or {}
        interested = body.get('interested')
        if not isinstance(interested, bool):
            return jsonify({'error': "'interested' must be true or false"}), 400

        try:
            outcome = express_interest(store_factory(), match_id, user_id, interested)
        except MatchNotFoundError as e:
            return jsonify({'error': str(e)}), 404
        except NotMatchParticipantError as e:
            return jsonify({'error': str(e)}), 403
        except Exception as e:
            logger.error(f"Could not update interest on match {match_id}", exc_info=True)
            return jsonify({'error': str(e) or 'Unknown error'}), 500

        return jsonify({
            'success': True,
            'match': outcome['match'].to_response(),
            'mutual': outcome['mutual'],
        })

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    return app


app = create_app()


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=8000)
