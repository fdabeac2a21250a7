"""Custom exception types for domain and API layers."""


class AppError(Exception):
    """Base app exception."""


class ValidationError(AppError):
    """Validation failure for user input or persisted values."""


class StorageError(AppError):
    """Persisted settings could not be written."""


class SettingsNotMigratedError(AppError):
    """Settings were read before the startup migration ran."""


class IntegrationError(AppError):
    """External integration call failure."""


class SubscriptionError(IntegrationError):
    """A connect or refresh round-trip against the subscription service failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
