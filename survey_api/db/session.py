# survey_api/db/session.py

from supabase import create_client, Client
from survey_api.core.config import settings
import logging

def get_supabase() -> Client:
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY
    if not supabase_url or not supabase_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set when STORAGE_BACKEND=supabase")
    logging.info(f"Creating Supabase client with URL: {supabase_url}")
    supabase = create_client(supabase_url, supabase_key)
    return supabase
