"""Resolution failure taxonomy.

Failures never escape a search session: they are converted into an invalid input state
carrying an InvalidReason. The HTTP API and CLI surface the same reasons.
"""

from enum import IntEnum


class InvalidReason(IntEnum):
    """Why a search input ended up invalid.

    name_not_found and lookup_failed are kept apart so a caller can offer a retry for
    transient failures; the search session itself never retries.
    """

    empty_input = 1
    name_not_found = 2
    lookup_failed = 3


class ResolutionFailure(Exception):
    """
    Exception raised when input cannot be resolved to a navigable identity.

    This exception class provides static methods for creating specific
    resolution failure instances with appropriate error messages.
    """

    def __init__(self, message: str, reason: InvalidReason) -> None:
        super().__init__(message)
        self.reason = reason

    @staticmethod
    def empty_input() -> "ResolutionFailure":
        """There was nothing to search for."""
        return ResolutionFailure(
            "error-resolve-1000 Empty search input", InvalidReason.empty_input
        )

    @staticmethod
    def name_not_found(name: str) -> "ResolutionFailure":
        """The name service has no address for the name."""
        return ResolutionFailure(
            f"error-resolve-1001 Name does not resolve: {name}",
            InvalidReason.name_not_found,
        )

    @staticmethod
    def lookup_failed(name: str, msg: str = "") -> "ResolutionFailure":
        """The name service call itself failed."""
        return ResolutionFailure(
            f"error-resolve-1002 Name lookup failed for {name}: {msg}",
            InvalidReason.lookup_failed,
        )
