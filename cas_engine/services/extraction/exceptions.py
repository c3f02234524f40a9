"""
Statement extraction exceptions for structured error handling.

Only the hard failures live here. Soft misses (absent sections, unmatched
fields, unparseable numbers) are recorded as diagnostics and never raised.
"""

from typing import Optional


class StatementExtractionError(Exception):
    """Base exception for extraction errors surfaced to callers"""

    def __init__(self, message: str, error_code: str):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class UnsupportedIssuerError(StatementExtractionError):
    """No known issuer fingerprint, or no ruleset registered for the issuer"""

    def __init__(
        self,
        message: str = "This statement is not in a supported issuer format",
        issuer: Optional[str] = None,
    ):
        super().__init__(message, error_code="UNSUPPORTED_ISSUER")
        self.issuer = issuer


class EmptyDocumentTextError(StatementExtractionError):
    """Document text is blank or whitespace-only"""

    def __init__(self, message: str = "No text could be extracted from the statement"):
        super().__init__(message, error_code="EMPTY_DOCUMENT_TEXT")


class DecryptionError(StatementExtractionError):
    """Document is encrypted and the password is missing or wrong"""

    def __init__(self, message: Optional[str] = None, needs_password: bool = False):
        if needs_password:
            super().__init__(
                message or "This statement is password-protected",
                error_code="PASSWORD_REQUIRED",
            )
        else:
            super().__init__(
                message or "Incorrect password for encrypted statement",
                error_code="INCORRECT_PASSWORD",
            )
        self.needs_password = needs_password


class CorruptDocumentError(StatementExtractionError):
    """Document bytes are damaged or not a readable PDF"""

    def __init__(self, message: str = "Statement file is corrupted or unreadable"):
        super().__init__(message, error_code="UNREADABLE_OR_CORRUPT")


class InvalidFileTypeError(StatementExtractionError):
    """Uploaded file is not a PDF"""

    def __init__(self, message: str = "File is not a valid PDF"):
        super().__init__(message, error_code="INVALID_FILE_TYPE")


class FileTooLargeError(StatementExtractionError):
    """Uploaded file exceeds the configured size limit"""

    def __init__(self, message: str = "File is too large"):
        super().__init__(message, error_code="FILE_TOO_LARGE")


# Error code to user-friendly message mapping
ERROR_MESSAGES = {
    "UNSUPPORTED_ISSUER": {
        "title": "Unsupported Statement Format",
        "message": "Only CDSL Consolidated Account Statements are supported right now.",
        "help": "Download your CAS from the CDSL website and upload the PDF as-is.",
    },
    "EMPTY_DOCUMENT_TEXT": {
        "title": "No Text Found",
        "message": "The statement did not contain any readable text.",
        "help": "Scanned statements are not supported. Please upload the original PDF.",
    },
    "PASSWORD_REQUIRED": {
        "title": "Password-Protected PDF",
        "message": "This statement is password-protected.",
        "help": "Enter the statement password (usually your PAN) and try again.",
    },
    "INCORRECT_PASSWORD": {
        "title": "Incorrect Password",
        "message": "The password provided could not unlock the statement.",
        "help": "CAS passwords are usually your PAN in upper case.",
    },
    "UNREADABLE_OR_CORRUPT": {
        "title": "Unreadable or Corrupted PDF",
        "message": "The PDF file appears to be damaged or corrupted.",
        "help": "Please try downloading a fresh copy of your statement and uploading again.",
    },
    "INVALID_FILE_TYPE": {
        "title": "Invalid File Type",
        "message": "The uploaded file is not a valid PDF document.",
        "help": "Please ensure you're uploading a PDF file, not a renamed document or image.",
    },
    "FILE_TOO_LARGE": {
        "title": "File Too Large",
        "message": "The uploaded file exceeds the maximum allowed size.",
        "help": "Statements are normally well under 10MB. Please check you picked the right file.",
    },
    "INTERNAL_ERROR": {
        "title": "Server Error",
        "message": "An unexpected error occurred while processing your statement.",
        "help": "Please try again. If the problem persists, contact support.",
    },
}
