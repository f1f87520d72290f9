"""Exceptions raised by barkpush."""


class BarkError(Exception):
    """Base exception for barkpush."""

    pass


class ConfigurationError(BarkError, ValueError):
    """Raised when a message or client is misconfigured."""

    pass


class CryptoError(BarkError):
    """Base exception for failures of a cryptographic primitive."""

    pass


class SigningError(CryptoError):
    """Raised when a provider token cannot be signed."""

    pass


class EncryptionError(CryptoError):
    """Raised when a notification body cannot be encrypted."""

    pass
