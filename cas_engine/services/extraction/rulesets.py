"""
Issuer rulesets: every pattern the generic pipeline needs, keyed by issuer.

Adding an issuer means adding a fingerprint and an IssuerRuleset here; the
segmenter, correlator, row parsers and aggregator stay the same.
"""

import re
from dataclasses import dataclass
from typing import Dict, Pattern, Tuple

from cas_engine.domain.schemas import IssuerType

# Shared building blocks
ISIN = r"[A-Z]{2}[A-Z0-9]{9}[0-9]"
NUM = r"\d[\d,]*(?:\.\d+)?"
DATE = r"\d{2}[-/](?:[A-Za-z]{3}|\d{2})[-/]\d{2,4}"

I = re.IGNORECASE
M = re.MULTILINE


@dataclass(frozen=True)
class IssuerFingerprint:
    """All phrases must be present (case-sensitive) for the issuer to match"""

    issuer: IssuerType
    phrases: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        return all(phrase in text for phrase in self.phrases)


# Checked in order; first match wins
FINGERPRINTS: Tuple[IssuerFingerprint, ...] = (
    IssuerFingerprint(IssuerType.CDSL, ("CDSL", "Central Depository Services")),
    IssuerFingerprint(IssuerType.NSDL, ("NSDL", "National Securities Depository")),
    IssuerFingerprint(IssuerType.CAMS, ("Computer Age Management Services",)),
    IssuerFingerprint(IssuerType.KFINTECH, ("KFintech",)),
    IssuerFingerprint(IssuerType.KFINTECH, ("Karvy",)),
)


@dataclass(frozen=True)
class IssuerRuleset:
    issuer: IssuerType
    demat_type: str

    # Account segmentation
    account_anchor: Pattern
    section_terminator: Pattern
    required_markers: Tuple[str, ...]
    excluded_markers: Tuple[str, ...]
    min_section_length: int
    account_fields: Tuple[Tuple[str, Pattern], ...]

    # Owner-id correlation and holdings
    owner_id_marker: Pattern
    owner_id_boundary: Pattern
    owner_id_locator: str
    no_holdings_marker: str
    holdings_table_markers: Tuple[str, ...]
    holding_row: Pattern
    equity_isin_prefixes: Tuple[str, ...]
    fund_isin_prefixes: Tuple[str, ...]
    equity_keywords: Tuple[str, ...]
    fund_keywords: Tuple[str, ...]

    # Mutual fund folios
    folio_section_anchor: Pattern
    amc_heading: Pattern
    folio_number: Pattern
    registrar: Pattern
    scheme_header: Pattern
    scheme_row: Pattern
    debt_keywords: Tuple[str, ...]
    hybrid_keywords: Tuple[str, ...]

    # Investor and statement meta
    relation_line: Pattern
    investor_name: Tuple[Pattern, ...]
    address_terminator: Pattern
    pan: Tuple[Pattern, ...]
    email: Tuple[Pattern, ...]
    mobile: Pattern
    cas_id: Pattern
    pincode_label: Pattern
    pincode: Pattern
    statement_period: Tuple[Pattern, ...]

    def locate_owner(self, owner_id: str) -> Pattern:
        """Pattern for the marker that opens this owner's holdings region"""
        return re.compile(self.owner_id_locator.format(owner_id=re.escape(owner_id)), I)


HOLDING_ROW = rf"""
    (?P<isin>{ISIN})\s+
    (?P<name>(?:(?!\b{ISIN}\b).)+?)\s+
    (?P<units>{NUM})\s+
    (?:-{{1,2}}\s+){{3}}
    (?P<free_balance>{NUM})\s+
    (?P<price>{NUM})\s+
    (?P<value>{NUM})
"""

SCHEME_ROW = rf"""
    ^[ \t]*(?P<name>[A-Z][^\n]*?)[ \t]+
    (?P<isin>[A-Z0-9]{{12}})[ \t]+
    (?P<folio>\d[\d/]*)[ \t]+
    (?P<units>{NUM})[ \t]+
    (?P<nav>{NUM})[ \t]+
    (?P<invested>{NUM})[ \t]+
    (?P<value>{NUM})(?=[ \t]|$)
"""

CDSL_RULESET = IssuerRuleset(
    issuer=IssuerType.CDSL,
    demat_type="cdsl",
    account_anchor=re.compile(r"DP\s+Name\s*:", I),
    section_terminator=re.compile(r"MF\s+Folios|Mutual\s+Fund", I),
    required_markers=("DP ID", "CLIENT ID", "Email Id", "BO Sub Status"),
    excluded_markers=(
        "STATEMENT OF TRANSACTIONS",
        "No Transaction during the period",
        "HOLDING STATEMENT",
    ),
    min_section_length=200,
    account_fields=(
        ("dp_name", re.compile(r"DP\s+Name\s*:\s*([^\n]+)", I)),
        ("dp_id", re.compile(r"DP\s+ID\s*:?\s*(\d+)", I)),
        ("client_id", re.compile(r"CLIENT\s+ID\s*:?\s*(\d+)", I)),
        ("email", re.compile(r"Email\s+Id\s*:?\s*(\S+@\S+)", I)),
        ("status", re.compile(r"Account\s+Status\s*:?\s*([A-Za-z]+)", I)),
        ("bo_type", re.compile(r"BO\s+Type\s*:?\s*([^\n]+)", I)),
        ("bo_sub_status", re.compile(r"BO\s+Sub\s+Status\s*:?\s*([^\n]+)", I)),
        ("bsda", re.compile(r"BSDA\s*:?\s*(YES|NO)\b", I)),
        ("nominee", re.compile(r"Nominee\s*:?\s*([^\n]+)", I)),
    ),
    owner_id_marker=re.compile(r"BO\s+ID\s*:?\s*(\d+)", I),
    owner_id_boundary=re.compile(r"\bBO\s+ID\b"),
    owner_id_locator=r"BO\s+ID\s*:?\s*{owner_id}(?!\d)",
    no_holdings_marker="Nil Holding",
    holdings_table_markers=("HOLDING STATEMENT", "Portfolio Value"),
    holding_row=re.compile(HOLDING_ROW, re.VERBOSE | re.DOTALL),
    equity_isin_prefixes=("INE",),
    fund_isin_prefixes=("INF",),
    equity_keywords=("equity", "shares"),
    fund_keywords=("etf", "fund"),
    folio_section_anchor=re.compile(r"MUTUAL\s+FUND\s+UNITS\s+HELD", I),
    amc_heading=re.compile(
        r"^[ \t]*([A-Z][A-Za-z&.'-]*(?:[ \t]+[A-Z][A-Za-z&.'-]*)*?)[ \t]+Mutual[ \t]+Fund[ \t]*$",
        I | M,
    ),
    folio_number=re.compile(r"Folio\s+No\s*:?\s*(\d[\d/]*)", I),
    registrar=re.compile(r"\bRTA\b\s*:?\s*([A-Z]+)"),
    scheme_header=re.compile(r"Scheme\s+Name\b[^\n]*", I),
    scheme_row=re.compile(SCHEME_ROW, re.VERBOSE | M),
    debt_keywords=("debt", "bond", "liquid", "money"),
    hybrid_keywords=("hybrid", "balanced"),
    relation_line=re.compile(
        r"^[ \t]*([A-Z][A-Za-z.']*(?:[ \t]+[A-Za-z.']+)*?)[ \t]+[SDW](?:[ \t]+|[ \t]*/[ \t]*)O[ \t]+[^\n]*$",
        M,
    ),
    investor_name=(
        re.compile(r"^[ \t]*([A-Z][A-Za-z.' ]+?)[ \t]+PAN\s*:", M),
        re.compile(r"single\s+name\s+of\s+([A-Z][A-Za-z.' ]+?)\s*\(", I),
    ),
    address_terminator=re.compile(r"PINCODE|Statement|YOUR", I),
    pan=(
        re.compile(r"PAN\s*:?\s*([A-Z]{5}[0-9]{4}[A-Z])\b"),
        re.compile(r"\b([A-Z]{5}[0-9]{4}[A-Z])\b"),
    ),
    email=(
        re.compile(r"Email\s+Id\s*:?\s*(\S+@\S+)", I),
        re.compile(r"([A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,})"),
    ),
    mobile=re.compile(r"Mobile\s+No\s*:?\s*([X0-9+]{10,})", I),
    cas_id=re.compile(r"CAS\s+ID\s*:?\s*([A-Z0-9]+)", I),
    pincode_label=re.compile(r"PINCODE\s*:?\s*(\d{6})\b", I),
    pincode=re.compile(r"\b(\d{6})\b"),
    statement_period=(
        re.compile(rf"(?:Statement\s+Period|Period)\s*:?\s*({DATE})\s*to\s*({DATE})", I),
        re.compile(rf"From\s*:?\s*({DATE})\s*To\s*:?\s*({DATE})", I),
    ),
)

RULESETS: Dict[IssuerType, IssuerRuleset] = {
    IssuerType.CDSL: CDSL_RULESET,
}
