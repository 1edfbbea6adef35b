"""
Exceptions raised by chaos.

Everything derives from ChaosError so the command line can report any of
them the same way.
"""


class ChaosError(Exception):
    """Base class for all chaos errors."""


class InvalidKeyLength(ChaosError, ValueError):
    """Raised when the master key is not exactly KEY_LEN bytes."""


class InvalidNonceLength(ChaosError, ValueError):
    """Raised when a salt is not exactly SALT_LEN bytes."""


class UnknownFormat(ChaosError, ValueError):
    """Raised for a format code outside 1-5."""


class Base64DecodeFailure(ChaosError, ValueError):
    """Raised when a stored base64 field cannot be decoded."""


class MalformedStoreDocument(ChaosError, ValueError):
    """Raised when the data file or one of its entries has the wrong shape."""


class TitleNotFound(ChaosError, LookupError):
    """Raised when a title is not in the store."""

    def __init__(self, title: str):
        super().__init__(title)
        self.title = title

    def __str__(self):
        return f"'{self.title}' does not exist."


class CommitFailure(ChaosError):
    """Raised when git could not record a change of the data file."""
