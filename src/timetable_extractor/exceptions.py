"""Custom exceptions for Timetable Extractor."""


class TimetableExtractorError(Exception):
    """Base exception for all Timetable Extractor errors."""


class ConfigurationError(TimetableExtractorError):
    """Exception raised for configuration related errors."""


class UnsupportedInputError(TimetableExtractorError):
    """Exception raised when a document cannot be handled in the requested mode."""


class BackendError(TimetableExtractorError):
    """Exception raised when the extraction backend call fails.

    Covers authentication, quota, network and request errors. Never retried
    internally; callers decide whether to try another provider.
    """


class InvalidResponseError(TimetableExtractorError):
    """Base exception for backend replies that cannot yield timeblocks."""


class MalformedResponse(InvalidResponseError):
    """Exception raised when a backend reply is not parseable as JSON."""


class MissingTimeblocksArray(InvalidResponseError):
    """Exception raised when parsed JSON has no ``timeblocks`` array."""


class EmptyExtraction(InvalidResponseError):
    """Exception raised when the backend returned an empty ``timeblocks`` array."""

    def __init__(
        self,
        message: str = "No timeblocks extracted - the document may be too complex or unreadable",
    ) -> None:
        super().__init__(message)
