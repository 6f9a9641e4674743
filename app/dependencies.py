from typing import AsyncIterator, Callable

import httpx

from .config import settings, Settings
from .services.supabase_store import SupabaseCVStore

StoreFactory = Callable[[str], SupabaseCVStore]


def get_settings() -> Settings:
    return settings


def get_cv_store_factory() -> StoreFactory:
    """Builds a per-request store from the caller's Authorization header."""

    def factory(authorization: str) -> SupabaseCVStore:
        return SupabaseCVStore.from_authorization(authorization, settings)

    return factory


async def get_ai_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.ai_request_timeout) as client:
        yield client
