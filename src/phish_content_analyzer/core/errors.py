"""Custom exceptions for the content analyzer."""


class AnalyzerError(Exception):
    """Base exception for application-level errors."""


class ConfigError(AnalyzerError):
    """Raised when configuration cannot be loaded or validated."""


class NormalizationError(AnalyzerError):
    """Raised when request content cannot be turned into analyzable text."""


class MalformedPayloadError(NormalizationError):
    """Raised when an image or email data URI is not valid."""


class CollaboratorFailureError(MalformedPayloadError):
    """Raised when OCR or the email reader fails on a payload."""


class ReasoningFailureError(AnalyzerError):
    """Raised when the reasoning backend errors or returns malformed output."""


class UnknownCapabilityError(AnalyzerError):
    """Raised when the reasoning backend asks for a tool that is not registered."""
