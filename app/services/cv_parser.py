# app/services/cv_parser.py
import asyncio
import logging
from typing import Optional

import httpx

from app.config import Settings
from app.models import CVExtractionJob, ParseCVResponse, ParseDebugInfo
from app.parsers import extract_text_from_file, file_extension_for
from app.parsers.focus import get_work_experience_focused_text
from app.parsers.readability import create_readable_snippet, is_text_readable, mime_type_for
from app.services.ai_provider import select_ai_provider
from app.services.cv_extractor import extract_cv_fields
from app.services.cv_prompt import build_model_input, choose_input_type
from app.services.supabase_store import SupabaseCVStore

logger = logging.getLogger(__name__)


def prepare_extraction_job(file_path: str, data: bytes) -> CVExtractionJob:
    """Text extraction, readability check and input strategy for one downloaded file."""
    extension = file_extension_for(file_path)
    job = CVExtractionJob(
        file_path=file_path,
        file_extension=extension,
        mime_type=mime_type_for(extension),
        size=len(data),
    )
    logger.info("File type: %s Size: %d", extension, job.size)

    job.extracted_text = extract_text_from_file(data, extension)
    job.text_is_readable = is_text_readable(job.extracted_text)
    logger.info("Text readable check: %s", job.text_is_readable)

    # Focusing on work experience keeps the model from returning it empty
    if job.extracted_text and job.text_is_readable:
        job.focused_text = get_work_experience_focused_text(job.extracted_text)

    job.used_input_type = choose_input_type(
        job.focused_text, job.extracted_text, job.text_is_readable
    )
    logger.info("Focused text length: %d", len(job.focused_text))
    logger.info("Used input type: %s", job.used_input_type)
    return job


def build_debug_info(job: CVExtractionJob) -> ParseDebugInfo:
    return ParseDebugInfo(
        extracted_text_length=len(job.extracted_text),
        extracted_text_snippet=create_readable_snippet(job.extracted_text),
        file_extension=job.file_extension,
        used_input_type=job.used_input_type,
        focused_text_length=len(job.focused_text),
        provider=job.provider,
    )


async def parse_cv(
    store: SupabaseCVStore,
    user_id: str,
    file_path: str,
    http_client: httpx.AsyncClient,
    settings: Settings,
    debug: bool = False,
) -> ParseCVResponse:
    """
    Download -> extract text -> pick model input -> AI extraction.
    Errors propagate as CVParseError subclasses for the router to report.
    """
    logger.info("Parsing CV: %s", file_path)
    data = await asyncio.to_thread(store.download_cv, file_path)

    job = prepare_extraction_job(file_path, data)
    model_input = build_model_input(
        job.used_input_type, job.focused_text, job.extracted_text, data, job.mime_type
    )

    ai_settings = await asyncio.to_thread(store.get_ai_settings, user_id)
    provider = select_ai_provider(ai_settings, settings)
    job.provider = provider.name

    job.data = await extract_cv_fields(http_client, provider, model_input)

    debug_info: Optional[ParseDebugInfo] = build_debug_info(job) if debug else None
    return ParseCVResponse(success=True, data=job.data, debug=debug_info)
