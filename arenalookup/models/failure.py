"""
Failure classification for the lookup server.

Every failure that can reach a client is a KnownError subclass carrying a
FailureKind and a user-appropriate message. Handlers turn these into reply
text; only start-up treats them as fatal.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Dataset failures
    LOAD_FAILED = "load_failed"
    REFRESH_FAILED = "refresh_failed"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def describe(self) -> str:
        """Single-line description suitable for a client reply."""
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class DatasetLoadError(KnownError):
    """
    Raised when the dataset file cannot be turned into a Dataset.

    Covers a missing file, undecodable JSON and JSON of the wrong shape.
    """

    def __init__(self, path: object, detail: str):
        self.path = path
        super().__init__(
            kind=FailureKind.LOAD_FAILED,
            message=f"unable to load card data from {path}",
            detail=detail,
            suggestion="Run `python -m arenalookup.jobs.refresh_data` to download it.",
        )


class DatasetRefreshError(KnownError):
    """Raised when downloading a fresh dataset fails."""

    def __init__(self, url: str, detail: str):
        self.url = url
        super().__init__(
            kind=FailureKind.REFRESH_FAILED,
            message=f"unable to download card data from {url}",
            detail=detail,
        )
