"""
Custom exceptions for the stmtnorm core.

All stmtnorm-specific exceptions inherit from StmtNormError for easy catching.
Expected bad-data conditions (unparsable rows, degraded fields) are not
exceptions; they are recorded on the ParseResult instead.
"""


class StmtNormError(Exception):
    """Base exception for all stmtnorm errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FormatUnrecognizedError(StmtNormError):
    """Raised (or returned) when no strategy could extract any transaction."""

    def __init__(
        self,
        message: str = (
            "Statement format not recognized. Please ensure the data has Date, "
            "Description, and Amount (or Debit/Credit) columns"
        ),
        headers: list = None,
        code: str = "FORMAT_UNRECOGNIZED",
    ):
        super().__init__(message, code)
        self.headers = list(headers or [])


class EmptyInputError(StmtNormError):
    """Raised when parse() receives None, a non-string, or blank text."""

    def __init__(self, message: str = "No statement text to parse", code: str = "EMPTY_INPUT"):
        super().__init__(message, code)


class ValidationError(StmtNormError):
    """Transaction invariant violations."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code)
        self.field = field


class ConfigurationError(StmtNormError):
    """Invalid normalizer configuration."""

    def __init__(self, message: str, key: str = None, code: str = "CONFIG_ERROR"):
        super().__init__(message, code)
        self.key = key


class StatementReadError(StmtNormError):
    """Raised when a statement file cannot be read into text."""

    def __init__(self, path: str, reason: str, code: str = "READ_ERROR"):
        super().__init__(f"Could not read {path}: {reason}", code)
        self.path = path
        self.reason = reason
