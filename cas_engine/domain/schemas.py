"""
Canonical output schema for an extracted consolidated account statement.

These models are the only artifact handed to callers. Every numeric leaf is
already rounded to 2 decimals by the formatter; string leaves default to "".
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ISIN_RE = re.compile(r"^[A-Z]{2}[A-Z0-9]{9}[0-9]$")
PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")


class CASModel(BaseModel):
    """Base model: immutable, enums stored as plain values"""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
    )


class IssuerType(str, Enum):
    CDSL = "CDSL"
    NSDL = "NSDL"
    CAMS = "CAMS"
    KFINTECH = "KFINTECH"
    UNKNOWN = "UNKNOWN"


class SchemeType(str, Enum):
    EQUITY = "equity"
    DEBT = "debt"
    HYBRID = "hybrid"


def _blank_unless(pattern: re.Pattern, value: Optional[str]) -> str:
    value = (value or "").strip().upper()
    return value if pattern.match(value) else ""


# Investor
class Investor(CASModel):
    name: str = ""
    pan: str = ""
    address: str = ""
    email: str = ""
    mobile: str = ""
    cas_id: str = ""
    pincode: str = ""

    @field_validator("pan", mode="before")
    @classmethod
    def validate_pan(cls, v):
        return _blank_unless(PAN_RE, v)


# Demat accounts
class HoldingAdditionalInfo(CASModel):
    market_price: float = 0.0
    free_balance: float = 0.0


class Holding(CASModel):
    isin: str = ""
    name: str = ""
    units: float = Field(default=0.0, ge=0)
    value: float = Field(default=0.0, ge=0)
    additional_info: HoldingAdditionalInfo = HoldingAdditionalInfo()

    @field_validator("isin", mode="before")
    @classmethod
    def validate_isin(cls, v):
        return _blank_unless(ISIN_RE, v)


class DematHoldings(CASModel):
    equities: List[Holding] = []
    demat_mutual_funds: List[Holding] = []
    corporate_bonds: List[Holding] = []
    government_securities: List[Holding] = []
    aifs: List[Holding] = []

    def all(self) -> List[Holding]:
        return (
            list(self.equities)
            + list(self.demat_mutual_funds)
            + list(self.corporate_bonds)
            + list(self.government_securities)
            + list(self.aifs)
        )


class DematAdditionalInfo(CASModel):
    status: str = "Active"
    bo_type: str = ""
    bo_sub_status: str = ""
    bsda: str = "NO"
    nominee: str = ""
    email: str = ""


class DematAccount(CASModel):
    dp_id: str = ""
    dp_name: str = ""
    bo_id: str = ""
    client_id: str = ""
    demat_type: str = "cdsl"
    holdings: DematHoldings = DematHoldings()
    additional_info: DematAdditionalInfo = DematAdditionalInfo()
    value: float = Field(default=0.0, ge=0)


# Mutual fund folios
class SchemeAdditionalInfo(CASModel):
    arn_code: Optional[str] = None
    investment_value: float = 0.0


class Scheme(CASModel):
    isin: str = ""
    name: str = ""
    nav: str = ""  # Display string as printed on the statement
    scheme_type: SchemeType = SchemeType.EQUITY
    units: float = Field(default=0.0, ge=0)
    value: float = Field(default=0.0, ge=0)
    additional_info: SchemeAdditionalInfo = SchemeAdditionalInfo()

    @field_validator("isin", mode="before")
    @classmethod
    def validate_isin(cls, v):
        return _blank_unless(ISIN_RE, v)


class MutualFundFolio(CASModel):
    amc: str = ""
    folio_number: str = ""
    registrar: str = ""
    schemes: List[Scheme] = []
    value: float = Field(default=0.0, ge=0)


# Insurance (placeholder, no issuer ruleset populates it yet)
class InsurancePolicy(CASModel):
    policy_number: str = ""
    name: str = ""
    value: float = Field(default=0.0, ge=0)


class Insurance(CASModel):
    life_insurance_policies: List[InsurancePolicy] = []


# Meta
class StatementPeriod(CASModel):
    from_: str = Field(default="", alias="from")
    to: str = ""


class StatementMeta(CASModel):
    cas_type: IssuerType = IssuerType.UNKNOWN
    generated_at: str = ""
    statement_period: StatementPeriod = StatementPeriod()


# Summary
class AccountClassSummary(CASModel):
    count: int = Field(default=0, ge=0)
    total_value: float = Field(default=0.0, ge=0)


class SummaryAccounts(CASModel):
    demat: AccountClassSummary = AccountClassSummary()
    mutual_funds: AccountClassSummary = AccountClassSummary()
    insurance: AccountClassSummary = AccountClassSummary()


class PortfolioSummary(CASModel):
    accounts: SummaryAccounts = SummaryAccounts()
    total_value: float = Field(default=0.0, ge=0)


class CASDocument(CASModel):
    """Root record produced once per statement"""

    investor: Investor = Investor()
    demat_accounts: List[DematAccount] = []
    mutual_funds: List[MutualFundFolio] = []
    insurance: Insurance = Insurance()
    meta: StatementMeta = StatementMeta()
    summary: PortfolioSummary = PortfolioSummary()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-shaped dict using the external field names ("from", not "from_")"""
        return self.model_dump(mode="json", by_alias=True)
