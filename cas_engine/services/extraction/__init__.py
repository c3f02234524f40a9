"""
CAS text extraction engine.

`cas_extractor.extract(text)` turns statement text into a CASDocument.
"""

from .diagnostics import DiagnosticEvent, DiagnosticKind, ExtractionDiagnostics
from .exceptions import (
    ERROR_MESSAGES,
    CorruptDocumentError,
    DecryptionError,
    EmptyDocumentTextError,
    FileTooLargeError,
    InvalidFileTypeError,
    StatementExtractionError,
    UnsupportedIssuerError,
)
from .orchestrator import CASExtractor, cas_extractor, extract_pdf, extract_statement

__all__ = [
    "CASExtractor",
    "cas_extractor",
    "extract_statement",
    "extract_pdf",
    "DiagnosticEvent",
    "DiagnosticKind",
    "ExtractionDiagnostics",
    "ERROR_MESSAGES",
    "StatementExtractionError",
    "UnsupportedIssuerError",
    "EmptyDocumentTextError",
    "DecryptionError",
    "CorruptDocumentError",
    "InvalidFileTypeError",
    "FileTooLargeError",
]
