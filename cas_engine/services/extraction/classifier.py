"""Issuer detection from fingerprint phrases"""

from typing import Tuple

import structlog

from cas_engine.domain.schemas import IssuerType
from cas_engine.services.extraction.exceptions import UnsupportedIssuerError
from cas_engine.services.extraction.rulesets import FINGERPRINTS, RULESETS, IssuerRuleset

logger = structlog.get_logger(__name__)


def classify_issuer(text: str) -> IssuerType:
    """
    Return the first issuer whose fingerprint phrases all occur in the text.

    Fingerprints are checked in a fixed priority order. Text matching none
    of them is UNKNOWN.
    """
    for fingerprint in FINGERPRINTS:
        if fingerprint.matches(text):
            return fingerprint.issuer
    return IssuerType.UNKNOWN


def resolve_ruleset(text: str) -> Tuple[IssuerType, IssuerRuleset]:
    """
    Classify the document and pick its ruleset.

    Raises:
        UnsupportedIssuerError: Unknown issuer, or a known issuer with no ruleset
    """
    issuer = classify_issuer(text)
    if issuer == IssuerType.UNKNOWN:
        logger.warning("issuer_not_recognised")
        raise UnsupportedIssuerError(issuer=issuer.value)

    ruleset = RULESETS.get(issuer)
    if ruleset is None:
        logger.warning("issuer_without_ruleset", issuer=issuer.value)
        raise UnsupportedIssuerError(
            f"{issuer.value} statements are recognised but not supported yet",
            issuer=issuer.value,
        )

    logger.info("issuer_classified", issuer=issuer.value)
    return issuer, ruleset
