"""Supabase client for the hosted auth service. Client is cached per process."""
import logging
from functools import lru_cache
from typing import Callable, Optional

from supabase import create_client, Client

from examprep.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    url = settings.supabase_url
    key = settings.supabase_key
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


class UserDirectory:
    """
    Resolves user ids and emails through the service's RPC functions.
    A failed lookup is logged and reported as None.
    """

    def __init__(self, client_factory: Callable[[], Client] = get_supabase):
        self.client_factory = client_factory

    def _rpc(self, function: str, params: dict) -> Optional[str]:
        try:
            response = self.client_factory().rpc(function, params).execute()
        except Exception as e:
            logger.warning("RPC %s failed: %s", function, e)
            return None
        return response.data or None

    def email_for(self, user_id: str) -> Optional[str]:
        return self._rpc("get_email_by_user_id", {"user_id": user_id})

    def id_for_email(self, email: str) -> Optional[str]:
        return self._rpc("get_user_id_by_email", {"email": email})


def get_user_directory() -> UserDirectory:
    """FastAPI dependency returning the directory backed by Supabase."""
    return UserDirectory()
