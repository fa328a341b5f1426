"""Social media post generator endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ...schemas.posts import GeneratedPostModel, PostGenerationRequest, PostGenerationResponse
from ...services.posts import InvalidTopicError, generate_post

router = APIRouter(tags=["posts"])

logger = logging.getLogger(__name__)


@router.post("/generate-post", response_model=PostGenerationResponse, response_model_exclude_none=True)
def create_post(payload: PostGenerationRequest):
    try:
        post = generate_post(
            payload.topic,
            image_suggestion=payload.image_suggestion,
            platform=payload.platform,
        )
    except InvalidTopicError as exc:
        return JSONResponse(
            {"success": False, "error": str(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except Exception:
        logger.exception("Error generating social media post")
        return JSONResponse(
            {"success": False, "error": "Internal server error occurred while generating content"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return PostGenerationResponse(success=True, data=GeneratedPostModel(**post))
