"""ADLENS — Error Types."""


class AdlensError(Exception):
    """Base class for errors surfaced by the campaign data pipeline."""

    kind = "unknown"


class RetrievalError(AdlensError):
    """Raised when the raw CSV payload cannot be fetched."""

    kind = "retrieval"

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class ParseError(AdlensError):
    """Raised when the payload cannot be turned into campaign records."""

    kind = "parse"


class PipelineBusyError(AdlensError):
    """Raised when a restart is requested while a fetch is in flight."""

    kind = "busy"
