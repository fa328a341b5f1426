"""Coex and Grafana customer list reconciliation."""

from __future__ import annotations

import logging
from typing import NoReturn

from ...data.workbook_reader import read_first_sheet_rows

logger = logging.getLogger(__name__)


class ReconciliationNotImplementedError(NotImplementedError):
    """Reconciliation of Coex and Grafana exports is not available yet."""


def reconcile_customer_lists(coex_payload: bytes, grafana_payload: bytes | None = None) -> NoReturn:
    """Read the uploads, then refuse: no matching rules exist yet.

    The Coex workbook is still parsed so that unreadable uploads are reported
    as input errors rather than as a missing feature.
    """
    rows = read_first_sheet_rows(coex_payload)
    for index, row in enumerate(rows, start=1):
        logger.debug(f"Coex row {index}: {row}")
    logger.info(
        f"Received Coex workbook with {len(rows)} rows and "
        f"{'a' if grafana_payload else 'no'} Grafana export"
    )
    raise ReconciliationNotImplementedError("Coex reconciliation is not implemented yet")
