from typing import Any, Dict

from fastapi import APIRouter, Body
from fastapi.responses import PlainTextResponse

from app.models import ProfileParseResult
from app.parsers.profile_only import generate_ats_text, parse_from_profile_page

router = APIRouter()


@router.post("/parse-profile", response_model=ProfileParseResult)
async def parse_profile_endpoint(profile: Any = Body(...)):
    """
    Build a normalized résumé document from profile fields only. Failures are
    reported in the body with success=false, never as an HTTP error.
    """
    return parse_from_profile_page(profile)


@router.post("/profile-ats-text", response_class=PlainTextResponse)
async def profile_ats_text_endpoint(profile: Dict[str, Any] = Body(...)):
    return generate_ats_text(profile)
