"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class SessionRequiredException(AppException):
    """No admin session is present for a protected page."""

    def __init__(self, message: str = "Sign in required"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class BackendUnavailableException(AppException):
    """The RoomSpa backend could not be reached or answered with garbage."""

    def __init__(self, message: str = "Backend unavailable"):
        """Initialize with 502 status code."""
        super().__init__(message, status_code=502)
