import asyncio
import json

import httpx
import pytest

from app.config import Settings
from app.errors import AIExtractionError, ProviderNotConfiguredError
from app.models import AIProvider, AISettings
from app.services.ai_provider import select_ai_provider
from app.services.cv_extractor import clean_model_output, extract_cv_fields
from app.services.cv_prompt import (
    WORK_EXPERIENCE_SYSTEM_PROMPT,
    build_model_input,
    choose_input_type,
)

PROVIDER = AIProvider(
    name="openai",
    api_url="https://api.openai.com/v1/chat/completions",
    model="gpt-4o-mini",
    api_key="sk-test",
)

JOB = {"company": "Acme", "title": "Engineer", "bullets": ["Built APIs"]}


def completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def run_extraction(replies):
    """Runs extract_cv_fields against queued provider replies; returns (result, requests)."""
    requests = []
    queue = list(replies)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, body = queue.pop(0)
        if isinstance(body, dict):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await extract_cv_fields(client, PROVIDER, "CV_TEXT (extracted):\nJane Doe")

    return asyncio.run(_run()), requests


# --- provider selection ---
def test_kimi_used_when_preferred_enabled_and_keyed():
    ai_settings = AISettings(preferred_ai_provider="kimi", kimi_enabled=True, kimi_api_key="kimi-key")
    provider = select_ai_provider(ai_settings, Settings(openai_api_key="server-key"))
    assert provider.name == "kimi"
    assert provider.api_key == "kimi-key"
    assert provider.api_url == "https://api.moonshot.ai/v1/chat/completions"
    assert provider.model == "kimi-k2-0711-preview"


def test_openai_when_kimi_disabled():
    ai_settings = AISettings(
        preferred_ai_provider="kimi", kimi_enabled=False, kimi_api_key="kimi-key", openai_api_key="user-key"
    )
    provider = select_ai_provider(ai_settings, Settings(openai_api_key="server-key"))
    assert provider.name == "openai"
    assert provider.api_key == "user-key"
    assert provider.model == "gpt-4o-mini"


def test_openai_falls_back_to_server_key():
    provider = select_ai_provider(AISettings(), Settings(openai_api_key="server-key"))
    assert provider.api_key == "server-key"


def test_no_provider_configured():
    with pytest.raises(ProviderNotConfiguredError, match="No AI API key configured"):
        select_ai_provider(AISettings(kimi_api_key="kimi-key"), Settings(openai_api_key=""))


# --- model input ---
def test_input_strategy():
    long_text = "experience " * 30
    assert choose_input_type(long_text, long_text, True) == "focused_text"
    assert choose_input_type("short", long_text, True) == "extracted_text"
    assert choose_input_type("", long_text, False) == "base64_snippet"
    assert choose_input_type("", "short", True) == "base64_snippet"


def test_base64_input_is_bounded():
    model_input = build_model_input("base64_snippet", "", "", b"\x00" * 60000, "application/pdf")
    header, snippet = model_input.split("\n", 1)
    assert header == "CV_BASE64_SNIPPET (application/pdf):"
    assert len(snippet) == 40000


def test_clean_model_output():
    assert clean_model_output('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_model_output('```\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_model_output(' {"a": 1} ') == '{"a": 1}'


# --- AI extraction ---
def test_single_pass_when_work_experience_present():
    reply = "```json\n" + json.dumps({"first_name": "Jane", "work_experience": [JOB]}) + "\n```"
    result, requests = run_extraction([(200, completion(reply))])

    assert result["first_name"] == "Jane"
    assert result["work_experience"] == [JOB]
    assert len(requests) == 1

    request = requests[0]
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["temperature"] == 0.2
    assert body["max_tokens"] == 4000


def test_focused_pass_fills_missing_work_experience():
    result, requests = run_extraction(
        [
            (200, completion(json.dumps({"first_name": "Jane", "work_experience": []}))),
            (200, completion(json.dumps({"work_experience": [JOB]}))),
        ]
    )

    assert result == {"first_name": "Jane", "work_experience": [JOB]}
    assert len(requests) == 2
    focused_body = json.loads(requests[1].content)
    assert focused_body["temperature"] == 0
    assert focused_body["max_tokens"] == 3000
    assert focused_body["messages"][0]["content"] == WORK_EXPERIENCE_SYSTEM_PROMPT


def test_focused_pass_failure_keeps_first_result():
    result, requests = run_extraction(
        [
            (200, completion(json.dumps({"first_name": "Jane"}))),
            (500, "upstream exploded"),
        ]
    )
    assert result == {"first_name": "Jane"}
    assert len(requests) == 2


def test_focused_pass_empty_result_is_not_merged():
    result, _ = run_extraction(
        [
            (200, completion(json.dumps({"work_experience": None}))),
            (200, completion("not json at all")),
        ]
    )
    assert result == {"work_experience": None}


def test_provider_error_is_generic_failure():
    with pytest.raises(AIExtractionError, match="Failed to parse CV with AI"):
        run_extraction([(401, {"error": {"message": "bad key"}})])


def test_malformed_reply_is_generic_failure():
    with pytest.raises(AIExtractionError, match="Failed to parse extracted CV data"):
        run_extraction([(200, completion("Sure! Here is the JSON you asked for"))])


def test_non_object_reply_is_generic_failure():
    with pytest.raises(AIExtractionError, match="Failed to parse extracted CV data"):
        run_extraction([(200, completion("[1, 2, 3]"))])
