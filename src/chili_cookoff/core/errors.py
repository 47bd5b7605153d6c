"""Exception hierarchy for the chili cook-off service."""


class ChiliCookoffError(RuntimeError):
    """Base exception raised for service failures."""


class VoteStoreError(ChiliCookoffError):
    """Raised when the vote persistence layer cannot complete a read or write.

    This is an infrastructure failure, never a business rejection.
    """


class VoteSubmissionError(ChiliCookoffError):
    """Raised when an accepted vote could not be stored."""

    def __init__(self, message: str = "Failed to submit vote") -> None:
        super().__init__(message)


class EntryNotFoundError(ChiliCookoffError):
    """Raised when a chili entry does not exist."""


class EntryCodeGenerationError(ChiliCookoffError):
    """Raised when no unique entry code could be generated."""
