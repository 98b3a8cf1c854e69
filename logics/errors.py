class AnalysisError(Exception):
    """Base class for every error raised by the analysis client."""


class ValidationError(AnalysisError):
    """
    A local precondition failed (no file chosen, columns left unclassified...).

    Raised before anything is sent to the service.

    Args:
        message: Text shown to the user.
        missing: Column names that still need a type, when relevant.
    """

    def __init__(self, message, missing=()):
        super().__init__(message)
        self.missing = list(missing)


class ServiceError(AnalysisError):
    """The service answered with an explicit ``error`` field."""


class TransportError(AnalysisError):
    """Network failure, timeout, or a response that could not be decoded."""


class ShapeError(AnalysisError, ValueError):
    """A matrix is empty or not rectangular."""
