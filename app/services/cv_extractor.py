import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from app.errors import AIExtractionError
from app.models import AIProvider
from app.services.cv_prompt import (
    build_extraction_messages,
    build_work_experience_messages,
)

logger = logging.getLogger(__name__)

AI_REQUEST_FAILED = "Failed to parse CV with AI"
AI_INVALID_JSON = "Failed to parse extracted CV data"


def clean_model_output(text: str) -> str:
    """Removes markdown-style ```json and ``` fences from a model reply."""
    text = re.sub(r"^```(?:json)?\s*", "", text.strip())
    text = re.sub(r"\s*```$", "", text.strip())
    return text.strip()


def _message_content(response_json: Dict[str, Any]) -> str:
    choices = response_json.get("choices") or []
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    return message.get("content") or ""


async def request_chat_completion(
    client: httpx.AsyncClient,
    provider: AIProvider,
    messages: List[dict],
    temperature: float,
    max_tokens: int,
) -> httpx.Response:
    return await client.post(
        provider.api_url,
        headers={
            "Authorization": f"Bearer {provider.api_key}",
            "Content-Type": "application/json",
        },
        json={
            "model": provider.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        },
    )


def _has_work_experience(parsed: Dict[str, Any]) -> bool:
    work_experience = parsed.get("work_experience")
    return isinstance(work_experience, list) and len(work_experience) > 0


async def extract_work_experience(
    client: httpx.AsyncClient, provider: AIProvider, model_input: str
) -> Optional[List[Any]]:
    """Second, narrower pass asking only for work experience. Never raises."""
    try:
        response = await request_chat_completion(
            client,
            provider,
            build_work_experience_messages(model_input),
            temperature=0,
            max_tokens=3000,
        )
    except httpx.HTTPError as e:
        logger.error("Focused pass AI request error: %s", e)
        return None

    if not response.is_success:
        logger.error("Focused pass AI extraction error: %s", response.text)
        return None

    focused_text = ""
    try:
        focused_text = _message_content(response.json())
        focused = json.loads(clean_model_output(focused_text))
    except (json.JSONDecodeError, AttributeError, TypeError) as e:
        logger.error("Focused pass JSON parse error: %s Raw text: %s", e, focused_text[:500])
        return None

    if isinstance(focused, dict) and _has_work_experience(focused):
        logger.info("Focused pass extracted work_experience: %d", len(focused["work_experience"]))
        return focused["work_experience"]

    logger.info("Focused pass still returned empty work_experience")
    return None


async def extract_cv_fields(
    client: httpx.AsyncClient, provider: AIProvider, model_input: str
) -> Dict[str, Any]:
    """
    Asks the provider for the full CV schema. When that reply has no work
    experience, one focused follow-up request is made and merged in if it
    found any. No other retries.
    """
    try:
        response = await request_chat_completion(
            client,
            provider,
            build_extraction_messages(model_input),
            temperature=0.2,
            max_tokens=4000,
        )
    except httpx.HTTPError as e:
        logger.error("AI extraction request error: %s", e)
        raise AIExtractionError(AI_REQUEST_FAILED) from e

    if not response.is_success:
        logger.error("AI extraction error: %s", response.text)
        raise AIExtractionError(AI_REQUEST_FAILED)

    extracted_text = ""
    try:
        extracted_text = _message_content(response.json())
        parsed = json.loads(clean_model_output(extracted_text))
    except (json.JSONDecodeError, AttributeError, TypeError) as e:
        logger.error("JSON parse error: %s Raw text: %s", e, extracted_text[:500])
        raise AIExtractionError(AI_INVALID_JSON) from e

    if not isinstance(parsed, dict):
        logger.error("Model reply is not a JSON object: %s", extracted_text[:500])
        raise AIExtractionError(AI_INVALID_JSON)
    logger.info("Successfully parsed CV data")

    if not _has_work_experience(parsed):
        logger.info(
            "No work_experience extracted in first pass; running focused work-experience pass"
        )
        work_experience = await extract_work_experience(client, provider, model_input)
        if work_experience:
            parsed["work_experience"] = work_experience

    return parsed
