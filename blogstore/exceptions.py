"""
Domain error hierarchy for the content core.

Every error carries a stable ``code`` and the HTTP status the web layer
should answer with.  Storage failures are not wrapped here: SQLAlchemy and
driver exceptions propagate to the caller unchanged.
"""


class BlogStoreError(Exception):
    """Base class for all domain-level failures raised by blogstore."""

    def __init__(self, message: str, code: str, http_status: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def to_response(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ResourceNotFoundError(BlogStoreError):
    """A single required entity was looked up by id or slug and is missing."""

    def __init__(self, resource: str, identity: int | str) -> None:
        super().__init__(
            f"{resource} not found: {identity!r}", "NOT_FOUND", http_status=404
        )
        self.resource = resource
        self.identity = identity


class InvalidInputError(BlogStoreError):
    """Input rejected before any store was touched."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, "INVALID_INPUT", http_status=422)
        self.field = field


class ConflictOnCreateError(BlogStoreError):
    """
    A get-or-create lost a race on a unique slug and the retried lookup
    still found nothing.
    """

    def __init__(self, resource: str, slug: str) -> None:
        super().__init__(
            f"Could not create or find {resource} with slug {slug!r}",
            "CONFLICT_ON_CREATE",
            http_status=409,
        )
        self.resource = resource
        self.slug = slug
