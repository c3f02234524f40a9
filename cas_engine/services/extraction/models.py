"""
Intermediate records produced by the extraction stages.

These never leave the engine: the formatter turns them into the pydantic
schema in cas_engine.domain.schemas. Amounts stay as unrounded Decimals here.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Tuple

from cas_engine.domain.schemas import SchemeType


class HoldingCategory(str, Enum):
    EQUITY = "equity"
    FUND = "fund"
    BOND = "bond"
    GOVERNMENT_SECURITY = "government_security"


@dataclass(frozen=True)
class AccountSection:
    """A validated account-definition region; [start, end) offsets into the document"""

    index: int
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class HoldingRecord:
    isin: str
    name: str
    units: Decimal
    free_balance: Decimal
    price: Decimal
    value: Decimal
    category: HoldingCategory


@dataclass(frozen=True)
class AccountFields:
    dp_id: str = ""
    dp_name: str = ""
    client_id: str = ""
    email: str = ""
    status: str = ""
    bo_type: str = ""
    bo_sub_status: str = ""
    bsda: str = ""
    nominee: str = ""


@dataclass(frozen=True)
class DematAccountRecord:
    fields: AccountFields
    bo_id: str
    demat_type: str
    holdings: Tuple[HoldingRecord, ...] = ()


@dataclass(frozen=True)
class SchemeRecord:
    isin: str
    name: str
    folio_ref: str
    units: Decimal
    nav: str
    invested: Decimal
    value: Decimal
    scheme_type: SchemeType


@dataclass(frozen=True)
class FolioRecord:
    amc: str
    folio_number: str
    registrar: str
    schemes: Tuple[SchemeRecord, ...] = ()


@dataclass(frozen=True)
class InvestorRecord:
    name: str = ""
    pan: str = ""
    address: str = ""
    email: str = ""
    mobile: str = ""
    cas_id: str = ""
    pincode: str = ""


@dataclass(frozen=True)
class StatementPeriodRecord:
    start: str = ""
    end: str = ""
