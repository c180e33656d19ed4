class ContentError(Exception):
    """Base class for errors raised by the content app."""


class SlugGenerationError(ContentError):
    """Raised when no free slug is found within ``SLUG_MAX_ATTEMPTS`` candidates."""

    def __init__(self, model, base: str, attempts: int):
        self.model = model
        self.base = base
        self.attempts = attempts
        super().__init__(
            f"Could not find a free slug for {model.__name__} from '{base}' "
            f"after {attempts} attempts"
        )
