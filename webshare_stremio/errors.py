class AddonError(Exception):
    """Base class for errors surfaced by the addon."""


class ProviderError(AddonError):
    """The Webshare API answered with a non-OK status or an unreadable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(AddonError):
    """Salting or login failed; retrying with the same credentials will not help."""


class ConfigError(AddonError):
    """User configuration embedded in the addon URL could not be decoded."""
