class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class FetchError(DomainError):
    """Raised when the spreadsheet could not be downloaded."""


class ParseError(DomainError):
    """Raised when the spreadsheet structure cannot be understood."""


class EmptyResultError(ParseError):
    """Raised when a spreadsheet parses but yields no valid student rows."""


class ConcurrencyError(DomainError):
    """Raised when a refresh is requested while another one is running."""


class CleanupError(DomainError):
    """Raised when a transient artifact cannot be removed."""
