"""Manifest document generation."""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ...data.workbook_reader import WorkbookReadError, read_first_sheet_rows
from ...models.domain import Customer
from ..outputs.docx_template import DocxTemplate
from .errors import ManifestInputError, RenderError
from .extractor import extract_customers
from .template_source import TemplateSource, get_template_source
from .titles import get_run_title

logger = logging.getLogger(__name__)


def render_manifest(run_title: str, customers: Sequence[Customer], template: bytes) -> bytes:
    """Bind ``runTitle`` and ``customers`` into the template and return the .docx bytes."""
    try:
        document = DocxTemplate(template, paragraph_loop=True, linebreaks=True)
        document.render(
            {
                "runTitle": run_title,
                "customers": [customer.to_template_context() for customer in customers],
            }
        )
        return document.to_bytes()
    except ValueError as exc:
        # TemplateError, or lxml rejecting text that is not XML compatible
        raise RenderError(f"Manifest template could not be rendered: {exc}") from exc


def generate_manifest(
    payload: bytes,
    *,
    moment: date | None = None,
    template_source: TemplateSource | None = None,
) -> bytes:
    """Turn an uploaded customer list workbook into a manifest document."""
    try:
        rows = read_first_sheet_rows(payload)
    except WorkbookReadError as exc:
        raise ManifestInputError(str(exc)) from exc

    customers = extract_customers(rows)
    run_title = get_run_title(moment)
    template = (template_source or get_template_source()).fetch()
    manifest = render_manifest(run_title, customers, template)
    logger.info(f"Generated manifest '{run_title}' with {len(customers)} customers ({len(manifest)} bytes)")
    return manifest
