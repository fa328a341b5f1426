"""Delivery manifest endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from ...config import settings
from ...services.manifest import ManifestError, ManifestInputError, generate_manifest

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
GENERIC_ERROR = "Error parsing form data"

router = APIRouter(tags=["manifest"])

logger = logging.getLogger(__name__)


@router.post("/upload_manifest", response_class=Response, status_code=status.HTTP_200_OK)
async def upload_manifest(
    customer_list: UploadFile | None = File(default=None, alias="customerList"),
) -> Response:
    """Convert an uploaded customer list workbook into a .docx delivery manifest."""
    try:
        if customer_list is None:
            raise ManifestInputError("Form field 'customerList' is required.")
        payload = await customer_list.read()
        manifest = await run_in_threadpool(generate_manifest, payload)
    except ManifestError:
        logger.exception("Manifest generation failed")
        return JSONResponse({"error": GENERIC_ERROR}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception("Unexpected error while generating manifest")
        return JSONResponse({"error": GENERIC_ERROR}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(
        content=manifest,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{settings.manifest_filename}"'},
    )
