"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Referenced entity does not exist."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class ValidationFailedException(AppException):
    """Missing or malformed input, or a rule the input breaks."""

    def __init__(self, message: str = "Validation failed"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class ConflictException(AppException):
    """Duplicate unique key (email, invoice number, slot)."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class InsufficientStockException(AppException):
    """Requested quantity exceeds what is in stock."""

    def __init__(self, message: str = "Insufficient stock"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class RateLimitException(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, message: str = "Rate limit exceeded"):
        """Initialize with 429 status code."""
        super().__init__(message, status_code=429)


class DoctorUnavailableException(ValidationFailedException):
    """Doctor has no availability window on the requested weekday."""

    def __init__(self, message: str = "Doctor not available on this day"):
        super().__init__(message)


class OutsideHoursException(ValidationFailedException):
    """Requested time falls outside every window of the day."""

    def __init__(self, message: str = "Selected time is outside doctor's hours"):
        super().__init__(message)


class SlotTakenException(ConflictException):
    """Another active booking already holds the slot."""

    def __init__(self, message: str = "Time slot already booked"):
        super().__init__(message)


class InvalidStatusTransitionException(ValidationFailedException):
    """Status change not allowed from the current status."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested
