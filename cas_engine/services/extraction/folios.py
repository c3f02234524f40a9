"""
Mutual fund folio extraction.

The "MUTUAL FUND UNITS HELD" section lists folios grouped under one
"<AMC> Mutual Fund" heading each. A block carries its folio number and
registrar code, then a scheme table:

    Scheme Name  ISIN  Folio No  Units  NAV  Invested  Valuation
"""

import re
from typing import Iterator, List, Tuple

import structlog

from cas_engine.domain.schemas import ISIN_RE, SchemeType
from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics
from cas_engine.services.extraction.models import FolioRecord, SchemeRecord
from cas_engine.services.extraction.normalizer import clean_text, parse_number
from cas_engine.services.extraction.rulesets import CDSL_RULESET, IssuerRuleset

logger = structlog.get_logger(__name__)

STAGE = "folios"


def scheme_type(name: str, ruleset: IssuerRuleset = CDSL_RULESET) -> SchemeType:
    lowered = name.lower()
    if any(keyword in lowered for keyword in ruleset.debt_keywords):
        return SchemeType.DEBT
    if any(keyword in lowered for keyword in ruleset.hybrid_keywords):
        return SchemeType.HYBRID
    return SchemeType.EQUITY


def _split_blocks(section: str, ruleset: IssuerRuleset) -> Iterator[Tuple[str, str]]:
    """Yield (amc, block text) per AMC heading; one unnamed block if there are none"""
    headings = list(ruleset.amc_heading.finditer(section))
    if not headings:
        yield "", section
        return
    for position, heading in enumerate(headings):
        end = headings[position + 1].start() if position + 1 < len(headings) else len(section)
        yield clean_text(heading.group(1)), section[heading.end():end]


def _to_scheme(
    match: "re.Match[str]",
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> SchemeRecord:
    name = clean_text(match.group("name"))
    isin = match.group("isin")
    if not ISIN_RE.match(isin):
        diagnostics.miss(STAGE, "isin", scheme=name, raw=isin)
        isin = ""
    return SchemeRecord(
        isin=isin,
        name=name,
        folio_ref=match.group("folio"),
        units=parse_number(match.group("units"), diagnostics, "units"),
        nav=match.group("nav"),
        invested=parse_number(match.group("invested"), diagnostics, "investment_value"),
        value=parse_number(match.group("value"), diagnostics, "value"),
        scheme_type=scheme_type(name, ruleset),
    )


def parse_folio_block(
    amc: str,
    block: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
    table_open: bool = False,
) -> FolioRecord:
    """
    One folio from the text under its AMC heading.

    Scheme rows are read after the block's own table header. With
    table_open set, the header was printed once above the AMC headings and
    rows are read from the start of the block.
    """
    if not amc:
        diagnostics.miss(STAGE, "amc")

    header = ruleset.scheme_header.search(block)
    if header is None and not table_open:
        diagnostics.record(DiagnosticKind.SECTION_NOT_FOUND, STAGE, "scheme_table", amc=amc)
        schemes: Tuple[SchemeRecord, ...] = ()
    else:
        schemes = tuple(
            _to_scheme(match, ruleset, diagnostics)
            for match in ruleset.scheme_row.finditer(block, header.end() if header else 0)
        )

    folio_match = ruleset.folio_number.search(block)
    if folio_match:
        folio_number = folio_match.group(1)
    elif schemes:
        folio_number = schemes[0].folio_ref
    else:
        folio_number = ""
        diagnostics.miss(STAGE, "folio_number", amc=amc)

    registrar_match = ruleset.registrar.search(block)
    if registrar_match is None:
        diagnostics.miss(STAGE, "registrar", amc=amc)

    return FolioRecord(
        amc=amc,
        folio_number=folio_number,
        registrar=registrar_match.group(1) if registrar_match else "",
        schemes=schemes,
    )


def extract_folios(
    text: str,
    ruleset: IssuerRuleset,
    diagnostics: ExtractionDiagnostics,
) -> List[FolioRecord]:
    """
    All folios with at least one scheme, in document order.

    Runs over the whole document text independently of the demat accounts.
    """
    anchor = ruleset.folio_section_anchor.search(text)
    if anchor is None:
        diagnostics.record(DiagnosticKind.SECTION_NOT_FOUND, STAGE, "folio_section")
        return []

    section = text[anchor.end():]
    first_header = ruleset.scheme_header.search(section)
    first_heading = ruleset.amc_heading.search(section)
    table_open = first_header is not None and (
        first_heading is None or first_header.start() < first_heading.start()
    )

    folios = []
    for amc, block in _split_blocks(section, ruleset):
        folio = parse_folio_block(amc, block, ruleset, diagnostics, table_open=table_open)
        if not folio.schemes:
            diagnostics.record(
                DiagnosticKind.SECTION_REJECTED, STAGE, "folio", amc=amc, reason="no_schemes"
            )
            continue
        folios.append(folio)

    logger.info("folios_extracted", count=len(folios))
    return folios
