"""Coex reconciliation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ...data.workbook_reader import WorkbookReadError
from ...services.reconciliation import ReconciliationNotImplementedError, reconcile_customer_lists

router = APIRouter(tags=["reconciliation"])

logger = logging.getLogger(__name__)


@router.post("/coex_upload")
async def upload_coex_files(
    coex_file: UploadFile | None = File(default=None, alias="coexFile"),
    grafana_file: UploadFile | None = File(default=None, alias="grafanaFile"),
) -> JSONResponse:
    """Accept Coex and Grafana exports for reconciliation (not available yet)."""
    coex_name = coex_file.filename if coex_file else None
    grafana_name = grafana_file.filename if grafana_file else None
    logger.info(f"Uploaded files: coexFile={coex_name}, grafanaFile={grafana_name}")

    try:
        if coex_file is None:
            raise WorkbookReadError("Form field 'coexFile' is required.")
        coex_payload = await coex_file.read()
        grafana_payload = await grafana_file.read() if grafana_file else None
        await run_in_threadpool(reconcile_customer_lists, coex_payload, grafana_payload)
    except WorkbookReadError:
        logger.exception("Coex upload could not be read")
        return JSONResponse(
            {"error": "Error parsing form data"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except ReconciliationNotImplementedError as exc:
        return JSONResponse(
            {"error": str(exc), "coexFile": coex_name, "grafanaFile": grafana_name},
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
        )
