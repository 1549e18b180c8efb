"""
Exceptions raised by the ColorInsight services and wizard.
"""


class ColorInsightError(Exception):
    """Base class for all ColorInsight errors."""


class UploadValidationError(ColorInsightError):
    """The uploaded file was rejected before any external call."""


class PDFExtractionError(ColorInsightError):
    """Text could not be extracted from the uploaded document."""


class AIResponseError(ColorInsightError):
    """The AI service returned an empty, malformed or unexpected payload."""


class ExportError(ColorInsightError):
    """The report could not be written."""


class InvalidTransitionError(ColorInsightError):
    """A wizard action was requested from a state that does not allow it."""
