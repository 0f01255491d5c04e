class AnalysisError(Exception):
    """Base exception for document analysis failures."""


class AnalysisServiceError(AnalysisError):
    """The document analysis service rejected the submission or the operation failed."""


class AnalysisTimeoutError(AnalysisError):
    """The analysis operation did not finish within the configured deadline."""


class NoDocumentExtractedError(AnalysisError):
    """The analysis finished without any recognized document."""
