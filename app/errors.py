class SubtitleError(Exception):
    """Base class for errors that are shown to the user as a plain message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SubtitleError):
    """Required configuration (e.g. the API credential) is missing."""


class InputTypeError(SubtitleError):
    """Uploaded file is not an SRT file."""


class EmptyDocumentError(SubtitleError):
    """Translation was requested but there is no document content."""


class TranslationError(SubtitleError):
    """External translation call failed or returned unusable output."""


class ParseError(SubtitleError):
    """Translated text yielded zero valid subtitle entries."""


class EmptyTranslationError(ParseError):
    """Service answered a non-empty document with no content at all."""


class TranslationInProgressError(SubtitleError):
    """A translation is already running for the same session."""
