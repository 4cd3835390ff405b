class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing.

    Fatal at startup; never raised per request.
    """
    pass

class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass

class StoreUnavailableError(DatabaseError):
    """Raised when the resource store cannot be reached or queried."""
    pass

class UnauthenticatedError(AppError):
    """Raised by request dependencies when no caller identity is present."""
    pass

class AccessDeniedError(AppError):
    """Raised by request dependencies when the caller lacks privilege."""
    pass
