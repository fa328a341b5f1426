"""Customer list rows to manifest records."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from ...data.workbook_reader import cell_to_text
from ...models.domain import Address, Customer, Row
from .errors import BinCountError

# Header text as it appears on the customer list, quirks included.
COMPANY_NAME_COLUMN = "__EMPTY_1"  # unlabeled second column
CONTACT_COLUMN = "Contact "
PHONE_COLUMN = "Phone"
EMAIL_COLUMN = "Email"
ADDRESS_COLUMN = "Address"
STREET_COLUMN = "Street"
SUBURB_COLUMN = "Suburb"
STATE_COLUMN = "State"
POSTCODE_COLUMN = "Postcode"
MEMBER_NUMBER_COLUMN = "Member number "
NOTES_COLUMN = "Notes"

# Priority order: the first populated column decides the bin count.
BIN_COLUMNS = ("240L", "110L", "660L", "1100L")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

logger = logging.getLogger(__name__)


def _text(row: Row, column: str) -> str:
    return cell_to_text(row.get(column))


def parse_leading_int(value: str) -> int | None:
    """Parse the integer prefix of ``value`` (``"3.7"`` -> 3, ``"2 bins"`` -> 2)."""
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def get_bin_count(row: Row) -> int:
    for column in BIN_COLUMNS:
        value = row.get(column)
        if value is None:
            continue
        raw = cell_to_text(value)
        count = parse_leading_int(raw)
        if count is None or count < 0:
            raise BinCountError(f"Column '{column}' has an invalid bin count: {raw!r}")
        return count
    return 0


def row_to_customer(row: Row) -> Customer:
    return Customer(
        company_name=_text(row, COMPANY_NAME_COLUMN),
        contact_name=_text(row, CONTACT_COLUMN),
        phone_number=_text(row, PHONE_COLUMN),
        email=_text(row, EMAIL_COLUMN),
        address=Address(
            single_line_address=_text(row, ADDRESS_COLUMN),
            street_address=_text(row, STREET_COLUMN),
            suburb=_text(row, SUBURB_COLUMN),
            state=_text(row, STATE_COLUMN),
            postcode=_text(row, POSTCODE_COLUMN),
        ),
        member_number=_text(row, MEMBER_NUMBER_COLUMN),
        notes=_text(row, NOTES_COLUMN),
        bins=get_bin_count(row),
    )


def filter_customers(customers: Iterable[Customer]) -> list[Customer]:
    """Drop spacer and heading rows: keep records with a company or contact name."""
    kept: list[Customer] = []
    for customer in customers:
        keep = customer.is_identified
        logger.debug(f"{'Keeping' if keep else 'Discarding'} row at '{customer.address.single_line_address}'")
        if keep:
            kept.append(customer)
    return kept


def extract_customers(rows: Sequence[Row]) -> list[Customer]:
    customers = filter_customers(row_to_customer(row) for row in rows)
    logger.info(f"Extracted {len(customers)} manifest customers from {len(rows)} rows")
    return customers
