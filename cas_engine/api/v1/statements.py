"""
API endpoint for parsing uploaded statement PDFs.
"""

import asyncio

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from cas_engine.core.config import settings
from cas_engine.services.extraction import (
    ERROR_MESSAGES,
    CASExtractor,
    FileTooLargeError,
    InvalidFileTypeError,
    StatementExtractionError,
    cas_extractor,
)
from cas_engine.services.pdf import PyMuPDFTextExtractor, text_extractor

logger = structlog.get_logger()

router = APIRouter(prefix="/statements", tags=["Statements"])

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}

# Error code -> HTTP status; anything else is 422
ERROR_STATUS_CODES = {
    "INVALID_FILE_TYPE": status.HTTP_400_BAD_REQUEST,
    "PASSWORD_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "INCORRECT_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "FILE_TOO_LARGE": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
}


def get_text_extractor() -> PyMuPDFTextExtractor:
    return text_extractor


def get_cas_extractor() -> CASExtractor:
    return cas_extractor


def error_response(exc: StatementExtractionError) -> JSONResponse:
    error_info = ERROR_MESSAGES.get(exc.error_code, ERROR_MESSAGES["INTERNAL_ERROR"])
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(
            exc.error_code, status.HTTP_422_UNPROCESSABLE_ENTITY
        ),
        content={
            "success": False,
            "error_code": exc.error_code,
            "error": exc.message,
            "title": error_info["title"],
            "help": error_info["help"],
        },
    )


@router.post("/parse")
async def parse_statement(
    pdf: UploadFile = File(..., description="CAS statement PDF"),
    password: str = Form("", description="PDF password, usually the PAN"),
    pdf_text_extractor: PyMuPDFTextExtractor = Depends(get_text_extractor),
    extractor: CASExtractor = Depends(get_cas_extractor),
):
    """
    Parse an uploaded CAS PDF into the canonical statement document.

    Returns `{success, data, filename}`; failures return `{success: false,
    error_code, error, title, help}` with a 400, 413 or 422 status.
    """
    try:
        pdf_bytes = await pdf.read()
        if len(pdf_bytes) > settings.max_upload_size_bytes:
            raise FileTooLargeError(
                f"File exceeds the {settings.max_upload_size_bytes // (1024 * 1024)}MB limit"
            )
        if pdf.content_type not in PDF_CONTENT_TYPES or not pdf_bytes.startswith(b"%PDF"):
            raise InvalidFileTypeError()

        logger.info("statement_upload_received", filename=pdf.filename, size_bytes=len(pdf_bytes))
        text = await asyncio.to_thread(
            pdf_text_extractor.extract_text, pdf_bytes, password or None
        )
        document = await asyncio.to_thread(extractor.extract, text, password)
    except StatementExtractionError as e:
        logger.warning(
            "statement_parse_failed",
            filename=pdf.filename,
            error_code=e.error_code,
            error=e.message,
        )
        return error_response(e)

    logger.info(
        "statement_parsed",
        filename=pdf.filename,
        demat_accounts=len(document.demat_accounts),
        mutual_funds=len(document.mutual_funds),
    )
    return {"success": True, "data": document.to_dict(), "filename": pdf.filename}
