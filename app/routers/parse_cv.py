import asyncio
import json
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config import Settings
from app.constants import CORS_HEADERS
from app.dependencies import StoreFactory, get_ai_http_client, get_cv_store_factory, get_settings
from app.errors import AuthorizationError, CVParseError
from app.models import ParseCVRequest, ParseCVResponse
from app.services.cv_parser import parse_cv
from app.services.supabase_store import bearer_token

logger = logging.getLogger(__name__)

router = APIRouter()


def _failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content=ParseCVResponse(success=False, error=message).model_dump(exclude_none=True),
        status_code=status_code,
        headers=CORS_HEADERS,
    )


@router.options("/parse-cv")
async def parse_cv_preflight():
    return Response(headers=CORS_HEADERS)


@router.post("/parse-cv", response_model=ParseCVResponse)
async def parse_cv_endpoint(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    store_factory: StoreFactory = Depends(get_cv_store_factory),
    http_client: httpx.AsyncClient = Depends(get_ai_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Download an uploaded CV from storage and return the structured fields the
    AI provider extracted from it. Body: {cvFilePath, debug?}.
    """
    try:
        if not authorization:
            raise AuthorizationError("No authorization header")

        store = store_factory(authorization)
        user_id = await asyncio.to_thread(store.get_user_id, bearer_token(authorization))

        try:
            payload = ParseCVRequest.model_validate(await request.json())
        except (json.JSONDecodeError, ValidationError) as e:
            raise CVParseError(f"Invalid request body: {e}") from e
        if not payload.cv_file_path:
            raise CVParseError("CV file path is required")

        result = await parse_cv(
            store,
            user_id,
            payload.cv_file_path,
            http_client,
            settings,
            debug=payload.debug,
        )
        content = {"success": True, "data": result.data}
        if result.debug is not None:
            content["debug"] = result.debug.model_dump(by_alias=True)
        return JSONResponse(content=content, headers=CORS_HEADERS)
    except CVParseError as e:
        logger.error("Parse CV error: %s", e)
        return _failure(str(e), e.status_code)
    except Exception as e:
        logger.exception("Unexpected error in /parse-cv endpoint")
        return _failure(str(e), 400)
