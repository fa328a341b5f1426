from io import BytesIO
from typing import Callable, Sequence

import pytest
from docx import Document
from openpyxl import Workbook

CUSTOMER_LIST_HEADER = [
    None,
    None,
    "Contact ",
    "Phone",
    "Email",
    "Address",
    "Street",
    "Suburb",
    "State",
    "Postcode",
    "Member number ",
    "Notes",
    "240L",
    "110L",
    "660L",
    "1100L",
]


def build_workbook(rows: Sequence[Sequence[object]], header: Sequence[object] | None = None) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Run"
    worksheet.append(list(header if header is not None else CUSTOMER_LIST_HEADER))
    for row in rows:
        worksheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_manifest_template() -> bytes:
    """Title paragraph plus a table whose second row loops over customers."""
    document = Document()
    document.add_paragraph("{runTitle}")
    table = document.add_table(rows=2, cols=5)
    for cell, heading in zip(table.rows[0].cells, ["Company", "Contact", "Address", "Member", "Bins"]):
        cell.text = heading
    cells = table.rows[1].cells
    cells[0].text = "{#customers}{CompanyName}"
    cells[1].text = "{ContactName}"
    cells[2].text = "{Address.SingleLineAddress}"
    cells[3].text = "{MemberNumber}"
    cells[4].text = "{Bins}{/customers}"
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def save_document(document) -> bytes:
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def open_document(payload: bytes):
    return Document(BytesIO(payload))


@pytest.fixture
def workbook_factory() -> Callable[..., bytes]:
    return build_workbook


@pytest.fixture
def manifest_template() -> bytes:
    return build_manifest_template()
