"""Exception and warning types raised by polysplit."""


class PolysplitError(Exception):
    """Base class for all polysplit errors."""
    pass


class ConfigurationError(PolysplitError):
    """Raised when split parameters are out of range."""
    pass


class RepairError(PolysplitError):
    """Raised when an invalid polygon cannot be repaired."""
    pass


class FeatureSourceError(PolysplitError):
    """Raised when the input dataset, layer or id field cannot be used."""
    pass


class FeatureSinkError(PolysplitError):
    """Raised when the output dataset cannot be created or written."""
    pass


class SplitWarning(UserWarning):
    """Emitted for geometries the splitter skips or cannot bring under budget."""
    pass


__all__ = [
    'PolysplitError',
    'ConfigurationError',
    'RepairError',
    'FeatureSourceError',
    'FeatureSinkError',
    'SplitWarning',
]
