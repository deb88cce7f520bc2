"""Domain exceptions for the import job."""


class EventImportError(Exception):
    """Base class for import errors."""


class ImportConfigurationError(EventImportError):
    """Raised at startup when required configuration is missing or invalid."""


class UnsafeIdentifierError(ImportConfigurationError):
    """Raised when a table or column name cannot be interpolated safely."""


class SourceUnavailableError(EventImportError):
    """Raised when the source table cannot be counted at startup."""


class CounterSeedError(EventImportError):
    """Raised when the fast offset counter cannot be seeded at startup."""


class QueryExecutionError(EventImportError):
    """Carried inside a failed query result; transient, retried per offset."""


class TransformationError(EventImportError):
    """Raised when a row cannot be turned into an event. Never retried."""


class UnknownTransformationError(TransformationError):
    """Raised when the configured transformation name is not registered."""


class AttachmentError(TransformationError):
    """Raised when an attachment a transformation needs is absent or unparsable."""


class EventSinkError(EventImportError):
    """Raised when an event sink cannot be configured."""


__all__ = [
    "AttachmentError",
    "CounterSeedError",
    "EventImportError",
    "EventSinkError",
    "ImportConfigurationError",
    "QueryExecutionError",
    "SourceUnavailableError",
    "TransformationError",
    "UnknownTransformationError",
    "UnsafeIdentifierError",
]
