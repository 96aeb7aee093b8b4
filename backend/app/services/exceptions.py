"""Domain exceptions for the event admin services."""


class EventAdminServiceError(Exception):
    """Base exception for all event admin service errors."""
    pass


class CustomerNotFoundError(EventAdminServiceError):
    """Registration does not exist."""
    pass


class EventLocationNotFoundError(EventAdminServiceError):
    """Event location does not exist."""
    pass


class InvalidEventLocationError(EventAdminServiceError):
    """Event location payload is empty or malformed."""
    pass


class SurveyResponseNotFoundError(EventAdminServiceError):
    """Survey response does not exist."""
    pass
