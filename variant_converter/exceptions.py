"""
Custom exceptions for the variant converter.

Fatal conditions derive from ConversionError and abort the run. Per-row
field problems raise InvalidFieldError, which only skips the row.
"""


class ConversionError(Exception):
    """Base exception for fatal conversion errors."""
    pass


class ConfigurationError(ConversionError):
    """Raised when options are missing, inconsistent, or unsupported."""
    pass


class ReferenceFetchError(ConversionError):
    """Raised when the reference sequence cannot serve a coordinate."""
    pass


class MalformedRowError(ConversionError):
    """Raised when a table row cannot be interpreted at all."""
    pass


class FilterExpressionError(ConfigurationError):
    """Raised when a site filter expression does not compile."""
    pass


class FormatterError(ConversionError):
    """Raised when a record cannot be rendered by the line formatter."""
    pass


class OutputWriteError(ConversionError):
    """Raised when an output stream rejects a write or fails to close."""
    pass


class InvalidFieldError(ValueError):
    """Raised by a column setter when a single field value is unusable."""
    pass
