class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidTimeFormatError(AppError, ValueError):
    """Raised when a wall-clock value is not a valid HH:MM string or minute offset."""
    def __init__(self, value: object):
        super().__init__(
            "Time must be in HH:MM 24-hour format",
            status_code=422,
            details={"value": str(value)},
        )


class InvalidIntervalError(AppError, ValueError):
    """Raised when an interval does not end strictly after it starts."""
    def __init__(self, start_minutes: int, end_minutes: int):
        super().__init__(
            "End time must be after start time",
            status_code=422,
            details={"start_minutes": start_minutes, "end_minutes": end_minutes},
        )


class SlotValidationError(AppError):
    """Raised when a slot draft or patch is missing required lesson/break fields."""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, status_code=422, details={"field": field})


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)


class SlotBusyError(AppError):
    """Raised when a slot already has a create/update/delete request in flight."""
    def __init__(self, slot_key: str):
        super().__init__(
            f"Schedule slot {slot_key} has a pending request",
            status_code=409,
            details={"slot": slot_key},
        )


class StorageFailure(AppError):
    """Opaque failure of the schedule storage collaborator (transport or backend)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=502, details=details)


class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
