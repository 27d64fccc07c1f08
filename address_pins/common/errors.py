"""Domain errors and failure typing."""


class AddressPinsError(Exception):
    """Base class for application failures."""

    error_code = "ADDRESS_PINS_ERROR"


class ConfigError(AddressPinsError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ValidationError(AddressPinsError):
    """Raised when required form fields are missing."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing_fields)}")
        self.missing_fields = missing_fields


class GeocodeError(AddressPinsError):
    error_code = "GEOCODE_ERROR"


class GeocodeNoMatchError(GeocodeError):
    """Raised when an address resolves to zero candidates."""

    error_code = "GEOCODE_NO_MATCH"


class GeocodeServiceError(GeocodeError):
    """Raised when the geocoding backend is unreachable or misbehaves."""

    error_code = "GEOCODE_SERVICE_FAILURE"


class StoreError(AddressPinsError):
    error_code = "STORE_ERROR"


class StoreCorruptError(StoreError):
    """Raised when persisted data cannot be parsed as a record collection."""

    error_code = "STORE_CORRUPT"


class StoreWriteError(StoreError):
    error_code = "STORE_WRITE_FAILURE"


class LocationError(AddressPinsError):
    """Raised by location providers when no position is available."""

    error_code = "LOCATION_ERROR"


class WorkflowBusyError(AddressPinsError):
    """Raised when a workflow instance is submitted while already running."""

    error_code = "WORKFLOW_BUSY"
