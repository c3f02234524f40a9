"""
Beneficiary-owner id correlation.

BO ids are printed on the transaction pages, not inside the account-definition
blocks, so they are matched to accounts by position: the i-th distinct id in
the document belongs to the i-th accepted account section. This holds for the
CDSL layout but is a heuristic. An account whose positional id disagrees with
its own DP ID + CLIENT ID is flagged as an owner_id_mismatch diagnostic, and
accounts past the end of the id list fall back to DP ID + CLIENT ID.
"""

from typing import List, Optional, Sequence

from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics
from cas_engine.services.extraction.models import AccountFields
from cas_engine.services.extraction.rulesets import IssuerRuleset

STAGE = "correlate"


def collect_owner_ids(
    text: str,
    ruleset: IssuerRuleset,
    diagnostics: Optional[ExtractionDiagnostics] = None,
) -> List[str]:
    """All owner ids in first-seen order, without duplicates"""
    owner_ids = list(dict.fromkeys(m.group(1) for m in ruleset.owner_id_marker.finditer(text)))
    if not owner_ids and diagnostics is not None:
        diagnostics.record(DiagnosticKind.SECTION_NOT_FOUND, STAGE, "owner_id")
    return owner_ids


def assign_owner_id(
    index: int,
    owner_ids: Sequence[str],
    fields: AccountFields,
    diagnostics: ExtractionDiagnostics,
) -> str:
    """BO id for the account at `index`; "" when neither source is available"""
    composite = f"{fields.dp_id}{fields.client_id}"

    if index < len(owner_ids):
        owner_id = owner_ids[index]
        if fields.dp_id and fields.client_id and owner_id != composite:
            diagnostics.record(
                DiagnosticKind.OWNER_ID_MISMATCH,
                STAGE,
                "bo_id",
                assigned=owner_id,
                expected=composite,
            )
        return owner_id

    diagnostics.record(
        DiagnosticKind.OWNER_ID_FALLBACK,
        STAGE,
        "bo_id",
        available=len(owner_ids),
        fallback=composite,
    )
    return composite
