"""Exception hierarchy for the click annotator."""


class AnnotatorError(Exception):
    """Base class for annotator failures surfaced to the host."""


class GeometryError(AnnotatorError):
    """Raised when a coordinate mapping is attempted against an empty box."""


class SizeTrackerError(AnnotatorError):
    """Raised when the size tracker cannot observe the image widget."""


class ConfigError(AnnotatorError):
    """Raised for malformed configuration values."""
