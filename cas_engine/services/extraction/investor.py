"""Investor details and statement period from the statement header"""

from typing import Optional, Sequence

from cas_engine.services.extraction.diagnostics import ExtractionDiagnostics
from cas_engine.services.extraction.models import InvestorRecord, StatementPeriodRecord
from cas_engine.services.extraction.normalizer import clean_text, parse_date
from cas_engine.services.extraction.rulesets import IssuerRuleset

STAGE = "investor"


def _first_group(patterns: Sequence, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_investor(
    text: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> InvestorRecord:
    """
    Investor record from the statement header.

    The name and address come from the "<NAME> S O <PARENT>" block: the
    address is every line after it up to the PINCODE / Statement line.
    """
    name = ""
    address = ""
    relation = ruleset.relation_line.search(text)
    if relation:
        name = clean_text(relation.group(1))
        tail = text[relation.end():]
        terminator = ruleset.address_terminator.search(tail)
        if terminator:
            address = clean_text(tail[:terminator.start()])
    else:
        name = clean_text(_first_group(ruleset.investor_name, text))
    if not name:
        diagnostics.miss(STAGE, "name")
    if not address:
        diagnostics.miss(STAGE, "address")

    pincode = _first_group((ruleset.pincode_label,), text) or _first_group(
        (ruleset.pincode,), address
    )
    if not pincode:
        diagnostics.miss(STAGE, "pincode")

    pan = _first_group(ruleset.pan, text) or ""
    if not pan:
        diagnostics.miss(STAGE, "pan")

    email = (_first_group(ruleset.email, text) or "").lower()
    if not email:
        diagnostics.miss(STAGE, "email")

    mobile = _first_group((ruleset.mobile,), text) or ""
    if "X" in mobile.upper():
        # Masked on the statement
        mobile = ""
    if not mobile:
        diagnostics.miss(STAGE, "mobile")

    cas_id = _first_group((ruleset.cas_id,), text) or ""
    if not cas_id:
        diagnostics.miss(STAGE, "cas_id")

    return InvestorRecord(
        name=name,
        pan=pan,
        address=address,
        email=email,
        mobile=mobile,
        cas_id=cas_id,
        pincode=pincode or "",
    )


def extract_statement_period(
    text: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> StatementPeriodRecord:
    for pattern in ruleset.statement_period:
        match = pattern.search(text)
        if match:
            return StatementPeriodRecord(start=parse_date(match.group(1)), end=parse_date(match.group(2)))
    diagnostics.miss("meta", "statement_period")
    return StatementPeriodRecord()
