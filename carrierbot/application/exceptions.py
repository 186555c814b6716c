class ValidationError(ValueError):
    """Raised when user input fails a step's validation (phone, amount, date, time)."""
    pass


class GenerationError(RuntimeError):
    """Raised when the generative backend could not produce text after all attempts."""

    def __init__(self, message: str, last_error: Exception | None = None) -> None:
        super().__init__(message)
        self.last_error = last_error


class GenerativeBackendError(RuntimeError):
    """Raised by backend adapters. `category` drives retry classification."""

    category: str = "fatal"


class BackendOverloadedError(GenerativeBackendError):
    category = "overloaded"


class BackendRateLimitError(GenerativeBackendError):
    category = "rate_limited"


class BackendTransientError(GenerativeBackendError):
    category = "transient"


class LLMContractError(RuntimeError):
    """Raised when model output violates the expected format (bad JSON or missing data)."""
    pass


class CollaboratorError(RuntimeError):
    """Raised when an external collaborator (calendar) fails."""
    pass
