class NotFoundError(LookupError):
    """Record is missing or belongs to another user."""


class AuthenticationError(Exception):
    """Credentials or session rejected."""
