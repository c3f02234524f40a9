"""
Document extraction orchestrator.

Runs the linear pipeline over one statement's text:

    classify -> segment -> parse accounts (BO id + holdings)
             -> extract folios -> aggregate -> format

Only UnsupportedIssuerError and EmptyDocumentTextError stop a run. Every
other miss is recorded in the ExtractionDiagnostics and the affected field
or entity falls back to its empty value.
"""

import contextvars
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from cas_engine.core.config import settings
from cas_engine.domain.schemas import CASDocument
from cas_engine.services.extraction.accounts import parse_account
from cas_engine.services.extraction.aggregator import (
    build_account,
    build_document,
    build_folio,
    build_investor,
)
from cas_engine.services.extraction.classifier import resolve_ruleset
from cas_engine.services.extraction.correlator import collect_owner_ids
from cas_engine.services.extraction.diagnostics import ExtractionDiagnostics
from cas_engine.services.extraction.exceptions import (
    EmptyDocumentTextError,
    StatementExtractionError,
)
from cas_engine.services.extraction.folios import extract_folios
from cas_engine.services.extraction.investor import extract_investor, extract_statement_period
from cas_engine.services.extraction.models import AccountSection, DematAccountRecord
from cas_engine.services.extraction.rulesets import IssuerRuleset
from cas_engine.services.extraction.segmenter import segment_accounts
from cas_engine.services.pdf.text_extractor import text_extractor
from cas_engine.state_machines import ExtractionFlowMachine

logger = structlog.get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class CASExtractor:
    """
    Extracts a CASDocument from consolidated account statement text.

    Holds no per-document state, so one instance can serve concurrent
    callers. With `workers` > 1 accounts are parsed on a thread pool; the
    output keeps document order either way.
    """

    def __init__(
        self,
        workers: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.workers = workers if workers is not None else settings.account_workers
        self.clock = clock

    def extract(
        self,
        document_text: str,
        password: str = "",
        diagnostics: Optional[ExtractionDiagnostics] = None,
    ) -> CASDocument:
        """
        Extract one statement.

        Args:
            document_text: Full text of the statement
            password: Accepted for symmetry with the text extractor; unused here
            diagnostics: Collector for soft misses; a fresh one if omitted

        Raises:
            EmptyDocumentTextError: Text is blank
            UnsupportedIssuerError: Issuer unknown or without a ruleset
        """
        if diagnostics is None:
            diagnostics = ExtractionDiagnostics()

        extraction_id = uuid.uuid4().hex[:12]
        with structlog.contextvars.bound_contextvars(extraction_id=extraction_id):
            flow = ExtractionFlowMachine()
            try:
                document = self._run(document_text or "", flow, diagnostics)
            except StatementExtractionError as e:
                flow.mark_failed(e.error_code, e.message)
                raise
            except Exception as e:
                flow.mark_failed("INTERNAL_ERROR", str(e))
                raise

            logger.info(
                "statement_extracted",
                cas_type=document.meta.cas_type,
                demat_accounts=len(document.demat_accounts),
                mutual_funds=len(document.mutual_funds),
                total_value=document.summary.total_value,
                diagnostics=diagnostics.summary(),
            )
            return document

    def _run(
        self,
        text: str,
        flow: ExtractionFlowMachine,
        diagnostics: ExtractionDiagnostics,
    ) -> CASDocument:
        if not text.strip():
            raise EmptyDocumentTextError()

        issuer, ruleset = resolve_ruleset(text)
        flow.classify()

        sections = segment_accounts(text, ruleset, diagnostics)
        flow.segment()

        owner_ids = collect_owner_ids(text, ruleset, diagnostics)
        records = self._parse_accounts(text, sections, owner_ids, ruleset, diagnostics)
        flow.parse_accounts()

        folio_records = extract_folios(text, ruleset, diagnostics)
        flow.extract_folios()

        accounts = [build_account(record) for record in records]
        folios = [build_folio(record) for record in folio_records]
        flow.aggregate()

        document = build_document(
            investor=build_investor(extract_investor(text, ruleset, diagnostics)),
            accounts=accounts,
            folios=folios,
            issuer=issuer,
            generated_at=self.clock().strftime(TIMESTAMP_FORMAT),
            period=extract_statement_period(text, ruleset, diagnostics),
        )
        flow.format_output()
        return document

    def _parse_accounts(
        self,
        text: str,
        sections: Sequence[AccountSection],
        owner_ids: Sequence[str],
        ruleset: IssuerRuleset,
        diagnostics: ExtractionDiagnostics,
    ) -> List[DematAccountRecord]:
        # One child collector per account keeps event order stable under threads
        children = [diagnostics.bind(account_index=section.index) for section in sections]

        def work(section: AccountSection, child: ExtractionDiagnostics) -> DematAccountRecord:
            return parse_account(text, section, owner_ids, ruleset, child)

        if self.workers > 1 and len(sections) > 1:
            contexts = [contextvars.copy_context() for _ in sections]
            with ThreadPoolExecutor(max_workers=min(self.workers, len(sections))) as pool:
                records = list(
                    pool.map(
                        lambda ctx, section, child: ctx.run(work, section, child),
                        contexts,
                        sections,
                        children,
                    )
                )
        else:
            records = [work(section, child) for section, child in zip(sections, children)]

        for child in children:
            diagnostics.merge(child)
        return records


cas_extractor = CASExtractor()


def extract_statement(document_text: str, password: str = "") -> Dict[str, Any]:
    """
    Synchronous wrapper returning a plain dict.

    Returns:
        Dict with keys:
        - status: "success" or "error"
        - data: the extracted document if status is "success"
        - error_code / message: if status is "error"
    """
    try:
        document = cas_extractor.extract(document_text, password)
        return {"status": "success", "data": document.to_dict()}
    except StatementExtractionError as e:
        logger.warning("extract_statement_error", error_code=e.error_code, message=e.message)
        return {"status": "error", "error_code": e.error_code, "message": e.message}


def extract_pdf(pdf_bytes: bytes, password: str = "") -> CASDocument:
    """Text extraction with PyMuPDF followed by the extraction pipeline"""
    text = text_extractor.extract_text(pdf_bytes, password)
    return cas_extractor.extract(text, password)
