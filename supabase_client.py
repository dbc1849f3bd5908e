"""
Supabase client configuration for daily match generation
"""
import os
from supabase import create_client, Client
from supabase.client import ClientOptions
from dotenv import load_dotenv

from config import get_store_timeout

# Load environment variables
load_dotenv()

# Supabase configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_SERVICE_KEY", "")


def _client_options() -> ClientOptions:
    """Every PostgREST round-trip is bounded by the configured store timeout"""
    return ClientOptions(postgrest_client_timeout=get_store_timeout())


def get_supabase_client() -> Client:
    """Get Supabase client with anon key (for verifying end-user tokens)"""
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise ValueError("Missing Supabase configuration. Check your .env file.")
    return create_client(SUPABASE_URL, SUPABASE_ANON_KEY, options=_client_options())


def get_supabase_admin_client() -> Client:
    """Get Supabase client with service role key (for match generation)"""
    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        raise ValueError("Missing Supabase admin configuration. Check your .env file.")
    return create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, options=_client_options())


# Singleton client instances
_client: Client = None
_admin_client: Client = None


def get_client() -> Client:
    """Get or create singleton Supabase client"""
    global _client
    if _client is None:
        _client = get_supabase_client()
    return _client


def get_admin_client() -> Client:
    """Get or create singleton Supabase admin client"""
    global _admin_client
    if _admin_client is None:
        _admin_client = get_supabase_admin_client()
    return _admin_client
