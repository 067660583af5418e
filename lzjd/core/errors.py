"""
Error types for LZJD digest generation and comparison.

Every error raised by the library derives from LZJDError so the CLI can
report any failure with a single handler.
"""

from typing import Optional, Any, Dict


class LZJDError(Exception):
    """
    Base exception for all LZJD errors.

    Carries a message plus optional structured details for logging.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize LZJD error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceIOError(LZJDError):
    """Raised when an input source cannot be read or an output cannot be written."""

    def __init__(self, message: str,
                 path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.path = path
        self.details.update({'path': path})


class DigestDecodeError(LZJDError):
    """
    Raised when a persisted sketch payload cannot be decoded.

    Covers malformed base64 and payloads whose decoded length is not a
    multiple of 8 bytes.
    """


class DigestParseError(LZJDError):
    """Raised when a digest line does not have the ``lzjd:<name>:<payload>`` shape."""

    def __init__(self, message: str,
                 path: Optional[str] = None,
                 line_number: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize parse error.

        Args:
            message: Error message
            path: Digest file being read
            line_number: 1-based line number of the offending line
            details: Additional error context
        """
        super().__init__(message, details)
        self.path = path
        self.line_number = line_number

        self.details.update({
            'path': path,
            'line_number': line_number
        })


class ConfigurationError(LZJDError):
    """Raised for invalid settings or an invalid combination of inputs."""


class WorkerPoolError(ConfigurationError):
    """Raised when the worker pool cannot be configured."""

    def __init__(self, message: str,
                 workers: Optional[Any] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.workers = workers
        self.details.update({'workers': workers})
