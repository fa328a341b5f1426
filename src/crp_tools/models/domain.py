"""Domain models for delivery manifest records."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, Union

CellValue = Union[str, int, float, bool, datetime, date, time, None]
Row = Dict[str, CellValue]


@dataclass(frozen=True, slots=True)
class Address:
    """Postal address as captured on the customer list.

    The single-line form and the decomposed fields come from separate columns
    and are not reconciled with each other.
    """

    single_line_address: str = ""
    street_address: str = ""
    suburb: str = ""
    state: str = ""
    postcode: str = ""

    def to_template_context(self) -> dict[str, str]:
        return {
            "SingleLineAddress": self.single_line_address,
            "StreetAddress": self.street_address,
            "Suburb": self.suburb,
            "State": self.state,
            "Postcode": self.postcode,
        }


@dataclass(frozen=True, slots=True)
class Customer:
    """One line of a delivery manifest: a customer and the bins to collect."""

    company_name: str = ""
    contact_name: str = ""
    phone_number: str = ""
    email: str = ""
    address: Address = field(default_factory=Address)
    member_number: str = ""
    notes: str = ""
    bins: int = 0

    @property
    def is_identified(self) -> bool:
        return self.company_name != "" or self.contact_name != ""

    def to_template_context(self) -> dict[str, Any]:
        """Template field names are fixed by the manifest .docx template."""
        return {
            "CompanyName": self.company_name,
            "ContactName": self.contact_name,
            "PhoneNumber": self.phone_number,
            "Email": self.email,
            "Address": self.address.to_template_context(),
            "MemberNumber": self.member_number,
            "Notes": self.notes,
            "Bins": self.bins,
        }
