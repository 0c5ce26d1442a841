"""Error types shared across services."""


class ExternalServiceError(RuntimeError):
    """Raised when an external dependency is unreachable or returns an error."""

    service = "external service"


class ProfileStoreError(ExternalServiceError):
    """Profile store request failed."""

    service = "profile store"


class RecipeLookupError(ExternalServiceError):
    """Recipe catalog request failed."""

    service = "recipe catalog"


class ExerciseLookupError(ExternalServiceError):
    """Exercise catalog request failed."""

    service = "exercise catalog"


class GenerationError(ExternalServiceError):
    """Text generation backend request failed."""

    service = "generation backend"


class ProfileNotFoundError(LookupError):
    """Raised when an operation requires a profile that does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id
