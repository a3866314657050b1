"""Error taxonomy for the Lexi Simplify API.

Every error carries the HTTP status it maps to and a static message that is
safe to show to the end user. Upstream detail stays in the server log.
"""


class LexiError(Exception):
    """Base exception for all Lexi Simplify errors."""

    status_code = 500
    message = "An unexpected error occurred"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.message)
        self.detail = detail


# Input validation (400)

class MissingInputError(LexiError):
    """Raised when a required request field is absent."""

    status_code = 400
    message = "Missing required input."


class MissingFileError(MissingInputError):
    """Raised when /analyze is called without a file."""

    message = "No file uploaded."


class MissingQuestionError(MissingInputError):
    """Raised when /ask is missing its summary or question."""

    message = "Summary and question are required."


class NoReadableTextError(LexiError):
    """Raised when OCR produced nothing but whitespace."""

    status_code = 400
    message = "We couldn't find any readable text in your document. Please try a different file."


class FileTooLargeError(LexiError):
    """Raised when an upload exceeds the configured size limit."""

    status_code = 413
    message = "File too large."


# Identity (401)

class UnauthorizedError(LexiError):
    """Raised when the bearer token is missing or fails verification."""

    status_code = 401
    message = "Unauthorized"


class RecordNotFoundError(LexiError):
    """Raised when a saved analysis does not exist for the caller."""

    status_code = 404
    message = "Analysis not found."


# Upstream failures (500)

class UploadFailedError(LexiError):
    """Raised when the document could not be written to object storage."""

    message = "Upload failed."


class OcrFailedError(LexiError):
    """Raised when the OCR job could not be submitted, awaited or read back."""

    message = "Failed to extract text from document."


class AnalysisFailedError(LexiError):
    """Raised when document analysis fails for any other reason."""

    message = "Failed to analyze document."


class LlmInvocationError(AnalysisFailedError):
    """Raised when the language model call itself fails."""


class LlmParseError(AnalysisFailedError):
    """Raised when the language model output is not the expected JSON."""


class AnswerFailedError(LexiError):
    """Raised when a follow-up question could not be answered."""

    message = "Failed to get an answer."


class HistoryFetchError(LexiError):
    message = "Failed to fetch history."


class HistorySaveError(LexiError):
    message = "Failed to save analysis."


class HistoryClearError(LexiError):
    message = "Failed to clear history."


class ExportFailedError(LexiError):
    message = "Failed to export analysis."
