"""Exceptions raised by the comparison engine."""


class ProdCompareError(Exception):
    """Base exception for all prod-compare errors."""


class SourceReadError(ProdCompareError):
    """An input buffer could not be read as the expected format.

    The underlying exception (if any) is kept on ``cause`` and is also
    chained via ``raise ... from``.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class MappingError(ProdCompareError):
    """The column mapping cannot be used for a join (configuration error)."""
