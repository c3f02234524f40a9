"""Per-account extraction: fields, BO id and holdings for one section"""

from typing import Sequence

from cas_engine.services.extraction.correlator import assign_owner_id
from cas_engine.services.extraction.diagnostics import ExtractionDiagnostics
from cas_engine.services.extraction.holdings import extract_holdings
from cas_engine.services.extraction.models import AccountFields, AccountSection, DematAccountRecord
from cas_engine.services.extraction.normalizer import clean_text
from cas_engine.services.extraction.rulesets import IssuerRuleset

STAGE = "account_fields"


def extract_account_fields(
    section: AccountSection,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> AccountFields:
    values = {}
    for field_name, pattern in ruleset.account_fields:
        match = pattern.search(section.text)
        if match is None:
            diagnostics.miss(STAGE, field_name)
            continue
        values[field_name] = clean_text(match.group(1))

    if "email" in values:
        values["email"] = values["email"].lower()
    if "bsda" in values:
        values["bsda"] = values["bsda"].upper()
    return AccountFields(**values)


def parse_account(
    text: str,
    section: AccountSection,
    owner_ids: Sequence[str],
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> DematAccountRecord:
    """
    Build one account record.

    Reads only its own section plus the shared, read-only document text, so
    sections can be processed in any order or concurrently.
    """
    fields = extract_account_fields(section, ruleset, diagnostics)
    bo_id = assign_owner_id(section.index, owner_ids, fields, diagnostics)
    holdings = extract_holdings(text, bo_id, ruleset, diagnostics)
    return DematAccountRecord(
        fields=fields,
        bo_id=bo_id,
        demat_type=ruleset.demat_type,
        holdings=holdings,
    )
