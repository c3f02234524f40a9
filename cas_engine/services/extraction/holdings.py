"""
Holdings table parsing for one demat account.

CDSL prints each holding as a single row:

    ISIN  NAME  CURR.BAL  --  --  --  FREE BAL  MARKET PRICE  VALUE

The three dashed columns (frozen, pledged, earmarked balances) are empty for
ordinary holdings. Rows are read with one pattern over the whole region, so
names wrapped across lines still parse.
"""

import re
from typing import Optional, Tuple

from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics
from cas_engine.services.extraction.models import HoldingCategory, HoldingRecord
from cas_engine.services.extraction.normalizer import clean_text, parse_number
from cas_engine.services.extraction.rulesets import CDSL_RULESET, IssuerRuleset

STAGE = "holdings"


def categorize(isin: str, name: str, ruleset: IssuerRuleset = CDSL_RULESET) -> HoldingCategory:
    """
    Guess the holding category from the ISIN prefix and name keywords.

    No category column exists in the statement; unmatched rows are equity.
    """
    lowered = name.lower()
    if isin.startswith(ruleset.equity_isin_prefixes) or any(
        keyword in lowered for keyword in ruleset.equity_keywords
    ):
        return HoldingCategory.EQUITY
    if isin.startswith(ruleset.fund_isin_prefixes) or any(
        keyword in lowered for keyword in ruleset.fund_keywords
    ):
        return HoldingCategory.FUND
    return HoldingCategory.EQUITY


def holdings_region(text: str, owner_id: str, ruleset: IssuerRuleset) -> Optional[str]:
    """
    Text between this owner's id marker and the next id marker.

    The mutual fund section also closes the region so the last account does
    not run into folio rows.
    """
    if not owner_id:
        return None
    opening = ruleset.locate_owner(owner_id).search(text)
    if opening is None:
        return None

    end = len(text)
    for boundary in (ruleset.owner_id_boundary, ruleset.folio_section_anchor):
        match = boundary.search(text, opening.end())
        if match and match.start() < end:
            end = match.start()
    return text[opening.end():end]


def _to_holding(
    match: "re.Match[str]",
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> HoldingRecord:
    isin = match.group("isin")
    name = clean_text(match.group("name"))
    return HoldingRecord(
        isin=isin,
        name=name,
        units=parse_number(match.group("units"), diagnostics, "units"),
        free_balance=parse_number(match.group("free_balance"), diagnostics, "free_balance"),
        price=parse_number(match.group("price"), diagnostics, "market_price"),
        value=parse_number(match.group("value"), diagnostics, "value"),
        category=categorize(isin, name, ruleset),
    )


def parse_holdings(
    region: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> Tuple[HoldingRecord, ...]:
    """
    Holding rows of a region, in document order.

    A "Nil Holding" region has no rows. Otherwise both table markers must be
    present before any row is read.
    """
    if ruleset.no_holdings_marker in region:
        return ()

    missing = [marker for marker in ruleset.holdings_table_markers if marker not in region]
    if missing:
        diagnostics.record(
            DiagnosticKind.SECTION_NOT_FOUND, STAGE, "holdings_table", missing=missing
        )
        return ()

    return tuple(
        _to_holding(match, ruleset, diagnostics)
        for match in ruleset.holding_row.finditer(region)
    )


def extract_holdings(
    text: str,
    owner_id: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> Tuple[HoldingRecord, ...]:
    """Locate the owner's holdings region in the full text and parse it"""
    region = holdings_region(text, owner_id, ruleset)
    if region is None:
        diagnostics.record(
            DiagnosticKind.SECTION_NOT_FOUND, STAGE, "holdings_region", bo_id=owner_id
        )
        return ()
    return parse_holdings(region, ruleset, diagnostics)
