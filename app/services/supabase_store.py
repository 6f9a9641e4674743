import logging
from typing import Optional

from supabase import create_client, Client
from supabase.client import ClientOptions

from app.config import Settings
from app.constants import PROFILE_AI_SETTINGS_COLUMNS
from app.errors import AuthorizationError, CVParseError, StorageDownloadError
from app.models import AISettings

logger = logging.getLogger(__name__)


def bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return authorization.strip()


class SupabaseCVStore:
    """Storage and profile lookups for one request, acting as the caller."""

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_authorization(cls, authorization: str, settings: Settings) -> "SupabaseCVStore":
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise CVParseError("Supabase URL or anon key not configured")
        # Forward the caller's token so row-level security applies
        client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
            options=ClientOptions(headers={"Authorization": authorization}),
        )
        return cls(client, settings.cv_bucket)

    def get_user_id(self, access_token: str) -> str:
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.warning("Auth lookup failed: %s", e)
            raise AuthorizationError("Unauthorized") from e
        user = getattr(response, "user", None)
        if user is None:
            raise AuthorizationError("Unauthorized")
        return user.id

    def download_cv(self, file_path: str) -> bytes:
        try:
            data = self.client.storage.from_(self.bucket).download(file_path)
        except Exception as e:
            raise StorageDownloadError(f"Failed to download CV file: {e}") from e
        if not data:
            raise StorageDownloadError("Failed to download CV file: empty file")
        return data

    def get_ai_settings(self, user_id: str) -> AISettings:
        """AI columns of the caller's profile; defaults when the row cannot be read."""
        try:
            response = (
                self.client.table("profiles")
                .select(PROFILE_AI_SETTINGS_COLUMNS)
                .eq("user_id", user_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            # Server OPENAI_API_KEY still applies
            logger.error("Profile AI settings lookup failed for user %s: %s", user_id, e)
            return AISettings()
        row: Optional[dict] = getattr(response, "data", None) if response else None
        if not row:
            logger.warning("No profile row for user %s", user_id)
            return AISettings()
        return AISettings(**row)
