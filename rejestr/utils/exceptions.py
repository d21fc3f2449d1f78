"""
Fetcher exceptions.

Every error carries a human-readable message only; the CLI turns any of them
into exit code 1.
"""


class RegistryError(Exception):
    """Base class for fatal fetcher errors."""


class FetchError(RegistryError, IOError):
    """A page could not be fetched after all retry attempts."""


class InvalidResponseError(RegistryError, ValueError):
    """The registry API answered with a payload of unexpected shape."""
