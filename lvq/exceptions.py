"""
Error taxonomy for the LVQ pipeline.

Configuration and sampling errors are raised synchronously while a run is
being set up. Errors raised on the training worker are stored on the
ModelWrapper and re-raised by ModelWrapper.wait().
"""


class LVQError(Exception):
    """Base class for all pipeline errors."""
    pass


class ConfigurationError(LVQError, ValueError):
    """Raised when a training configuration violates one of its invariants."""
    pass


class InsufficientDataError(LVQError):
    """Raised when a sampling strategy cannot satisfy its quota."""
    pass


class UnknownLabelError(LVQError, LookupError):
    """Raised for a label id or label text outside the known mapping."""
    pass


class ObserverFailure(LVQError, RuntimeError):
    """Raised when a model state listener fails during a callback."""
    pass


class DataFormatError(LVQError, ValueError):
    """Raised when an input line cannot be parsed into a record."""
    pass
