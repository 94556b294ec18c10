# csaf_cli/exceptions.py

from typing import Any, Dict, Optional


class CsafCLIError(Exception):
    """Base class for all errors raised by the CSAF CLI."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ValidationError(CsafCLIError):
    """Input documents or arguments are malformed."""


class EmptyHistoryError(ValidationError):
    """The revision history is empty so no current version can be resolved."""


class UnsupportedVersionError(ValidationError):
    """The CSAF document declares a csaf_version this tool cannot import."""


class ConfigurationError(CsafCLIError):
    """Configuration such as label files or API URLs is unusable."""


class FileSystemError(CsafCLIError):
    """Reading or writing a file failed."""


class NetworkError(CsafCLIError):
    """A remote service could not be reached."""


class ApiError(CsafCLIError):
    """A remote service answered with an error."""
