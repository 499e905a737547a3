"""
Exceptions for Archive Retrieval.

Provides a hierarchy of exceptions for the failure modes of the
resolve -> cache -> fetch -> materialize pipeline.
"""

from typing import Optional


class NoaaArchiveError(Exception):
    """
    Base exception for archive retrieval failures.

    Attributes:
        message: Human-readable error description
        details: Additional context about the failure
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class AmbiguousSelectorError(NoaaArchiveError):
    """
    More than one mutually exclusive selector dimension was supplied.

    Raised before any I/O happens, e.g. when both ``storm`` and ``year``
    are passed to a storm query.

    Attributes:
        supplied: Names of the dimensions that were supplied
    """

    def __init__(self, supplied: list):
        message = (
            "You can only supply one of "
            + ", ".join(supplied)
            + " at a time"
        )
        super().__init__(message, {"supplied": list(supplied)})
        self.supplied = list(supplied)


class InvalidSelectorError(NoaaArchiveError):
    """
    A selector value is malformed (unknown basin, dataset, or plot type).

    Attributes:
        field: Name of the offending field
        value: The rejected value
    """

    def __init__(self, field: str, value, reason: Optional[str] = None):
        message = f"Invalid value for '{field}': {value!r}"
        if reason:
            message = f"{message}, {reason}"
        super().__init__(message, {"field": field})
        self.field = field
        self.value = value


class TransportError(NoaaArchiveError):
    """
    Network or remote server failure while retrieving a resource.

    Attributes:
        url: The remote URL being retrieved
        status: HTTP status or FTP reply code, when one was received
    """

    def __init__(
        self,
        url: str,
        reason: str,
        status: Optional[int] = None,
    ):
        message = f"Failed to retrieve {url}: {reason}"
        details = {}
        if status is not None:
            details["status"] = status
        super().__init__(message, details)
        self.url = url
        self.reason = reason
        self.status = status


class ArchiveNotFoundError(TransportError):
    """
    The remote resource (or a matching file in a listing) does not exist.
    """


class ParseError(NoaaArchiveError):
    """
    Cached bytes could not be parsed as tabular or geometry data.

    Rerunning the query with ``overwrite=True`` forces a refetch.

    Attributes:
        path: Local cache path that failed to parse
    """

    def __init__(self, path, reason: str):
        message = f"Could not parse {path}: {reason}"
        super().__init__(message, {"hint": "retry with overwrite=True"})
        self.path = path
        self.reason = reason


class RemovedParameterError(NoaaArchiveError):
    """
    The caller used a parameter that has been removed from the API.

    Attributes:
        parameter: Name of the removed parameter
    """

    def __init__(self, parameter: str, see: str):
        message = f"The parameter {parameter} has been removed, see {see}"
        super().__init__(message)
        self.parameter = parameter
