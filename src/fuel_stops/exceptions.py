class FuelStopError(Exception):
    """Base exception for fuel stop search errors."""


class ConfigurationError(FuelStopError):
    """Raised when a required provider credential or setting is missing."""


class ExternalProviderError(FuelStopError):
    """Raised when a Directions or Places call fails or returns non-success."""


class NoRouteFoundError(ExternalProviderError):
    """Raised when the Directions provider cannot produce a drivable route."""


class RecordParseError(FuelStopError):
    """Raised when a single place record cannot be normalized."""
