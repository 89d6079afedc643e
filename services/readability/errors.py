# services/readability/errors.py
"""Exceptions raised by the readability services."""


class ReadabilityError(Exception):
    """Base class for every readability-specific error."""


class UnknownImageSize(ReadabilityError):
    """The dimension probe could not determine an image's size."""

    def __init__(self, url: str, reason: str = ""):
        message = f"Could not determine the size of image '{url}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url


class ProfileNotFoundError(KeyError):
    """Raised when a requested profile does not exist in readability.yaml."""

    def __init__(self, profile_name: str):
        super().__init__(f"Profile '{profile_name}' not found.")
        self.profile_name = profile_name
