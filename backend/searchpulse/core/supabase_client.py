import logging
from typing import Optional
from supabase import create_client, Client

logger = logging.getLogger(__name__)

def create_supabase_client(url: str, key: str) -> Optional[Client]:
    """Build the Supabase client owned by the application lifespan.

    Returns None when credentials are missing so the app can still start and
    serve TMDB routes; metric routes then answer 503.
    """
    if not url or not key:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set; search metrics are disabled")
        return None
    return create_client(url, key)
