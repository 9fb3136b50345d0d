"""Custom exceptions used by the localization checker."""


class LocCheckerError(Exception):
    """Base class for checker failures."""


class InvalidConfigurationError(LocCheckerError):
    """Raised before any file is processed when the configuration is unusable."""


class SourceParseError(LocCheckerError):
    """Raised by the lexer/parser on malformed source; surfaced as a ParseFailure."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset


class ResourceFileError(LocCheckerError):
    """Raised when an existing resource file cannot be decoded."""


class EditConflictError(LocCheckerError):
    """Raised when an edit group overlaps edits that were already accepted."""


class SourceWriteError(LocCheckerError):
    """Raised when a rewritten source file cannot be persisted."""
