"""
Account section segmentation.

The account anchor ("DP Name :") recurs in transaction-history pages, so a
candidate region only counts as an account definition when it carries every
required field marker, none of the transaction-page markers, and enough text.
Rejected candidates are dropped and recorded, never raised.
"""

from typing import List, Optional

import structlog

from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics
from cas_engine.services.extraction.models import AccountSection
from cas_engine.services.extraction.rulesets import IssuerRuleset

logger = structlog.get_logger(__name__)

STAGE = "segment"


def rejection_reason(candidate: str, ruleset: IssuerRuleset) -> Optional[str]:
    """Why a candidate region is not an account definition, or None if it is"""
    for marker in ruleset.required_markers:
        if marker not in candidate:
            return f"missing_marker:{marker}"
    for marker in ruleset.excluded_markers:
        if marker in candidate:
            return f"excluded_marker:{marker}"
    if len(candidate.strip()) <= ruleset.min_section_length:
        return "too_short"
    return None


def segment_accounts(
    text: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> List[AccountSection]:
    """
    Carve the document into non-overlapping account-definition regions.

    Each region runs from an anchor to the next anchor, a section terminator,
    or the end of the text, whichever comes first. Accepted sections keep
    document order and are indexed from 0.
    """
    anchors = [match.start() for match in ruleset.account_anchor.finditer(text)]
    if not anchors:
        diagnostics.record(DiagnosticKind.SECTION_NOT_FOUND, STAGE, "account_section")
        return []

    sections: List[AccountSection] = []
    for position, start in enumerate(anchors):
        limit = anchors[position + 1] if position + 1 < len(anchors) else len(text)
        terminator = ruleset.section_terminator.search(text, start, limit)
        end = terminator.start() if terminator else limit
        candidate = text[start:end]

        reason = rejection_reason(candidate, ruleset)
        if reason:
            diagnostics.record(
                DiagnosticKind.SECTION_REJECTED,
                STAGE,
                "account_section",
                offset=start,
                reason=reason,
            )
            continue

        sections.append(AccountSection(index=len(sections), start=start, end=end, text=candidate))

    logger.info("account_sections_segmented", candidates=len(anchors), accepted=len(sections))
    return sections
