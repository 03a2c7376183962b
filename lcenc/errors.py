"""Exception types raised by the LCEN codec."""


class FormatError(ValueError):
    """Raised when a stream does not carry a well-formed LCEN header."""


class AuthenticationOrCorruptionError(ValueError):
    """Raised when the cipher layer rejects the payload during decryption.

    CBC with PKCS#7 padding carries no integrity tag, so a wrong password and
    a damaged ciphertext cannot be told apart.
    """


class ResourceError(OSError):
    """Raised when an underlying stream or file cannot be opened, read or written."""


__all__ = ["FormatError", "AuthenticationOrCorruptionError", "ResourceError"]
