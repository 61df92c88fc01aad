"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails (unsupported basis, malformed date, ...)."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class PriceNotFoundError(NotFoundError):
    """Raised when no price can be resolved for a symbol."""

    def __init__(self, symbol: str):
        super().__init__("Price", symbol)


class DependencyUnavailableError(AppError):
    """Raised when a price/FX collaborator is unconfigured or failing."""

    def __init__(self, message: str):
        super().__init__(message, code="DEPENDENCY_UNAVAILABLE")
