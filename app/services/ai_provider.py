import logging

from app.config import Settings
from app.errors import ProviderNotConfiguredError
from app.models import AIProvider, AISettings

logger = logging.getLogger(__name__)

KIMI = "kimi"
OPENAI = "openai"


def select_ai_provider(ai_settings: AISettings, settings: Settings) -> AIProvider:
    """
    Kimi K2 when the user prefers it, enabled it and stored a key; otherwise
    OpenAI with the user's key or the server's own.
    """
    kimi_key = ai_settings.kimi_api_key
    openai_key = ai_settings.openai_api_key or settings.openai_api_key
    prefer_kimi = (
        ai_settings.preferred_ai_provider == KIMI and ai_settings.kimi_enabled and kimi_key
    )

    if prefer_kimi:
        logger.info("Using Kimi K2 for parsing")
        return AIProvider(
            name=KIMI,
            api_url=settings.kimi_api_url,
            model=settings.kimi_model,
            api_key=kimi_key,
        )
    if openai_key:
        logger.info("Using OpenAI for parsing")
        return AIProvider(
            name=OPENAI,
            api_url=settings.openai_api_url,
            model=settings.openai_model,
            api_key=openai_key,
        )
    raise ProviderNotConfiguredError(
        "No AI API key configured. Please add your API key in the profile settings."
    )
