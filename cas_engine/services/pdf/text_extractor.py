"""
PDF text extraction with PyMuPDF.

Decryption happens here, before the extraction engine sees any text.
"""

from typing import Optional

import fitz  # PyMuPDF
import structlog

from cas_engine.services.extraction.exceptions import CorruptDocumentError, DecryptionError

logger = structlog.get_logger(__name__)

PDF_MAGIC = b"%PDF"


class PyMuPDFTextExtractor:
    """Turns statement PDF bytes into plain text, one page after another"""

    def extract_text(self, pdf_bytes: bytes, password: Optional[str] = None) -> str:
        """
        Extract the text of every page, joined by newlines.

        Raises:
            CorruptDocumentError: Bytes are empty, not a PDF, or unreadable
            DecryptionError: Encrypted and the password is missing or wrong
        """
        if not pdf_bytes or not pdf_bytes.lstrip()[:4] == PDF_MAGIC:
            raise CorruptDocumentError("File does not look like a PDF")

        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            logger.warning("pdf_open_failed", error=str(e))
            raise CorruptDocumentError() from e

        try:
            if doc.needs_pass:
                if not password:
                    raise DecryptionError(needs_password=True)
                if not doc.authenticate(password):
                    raise DecryptionError()
            if doc.page_count == 0:
                raise CorruptDocumentError("PDF has no pages")

            pages = [page.get_text("text") for page in doc]
        finally:
            doc.close()

        logger.info("pdf_text_extracted", pages=len(pages))
        return "\n".join(pages)


text_extractor = PyMuPDFTextExtractor()
