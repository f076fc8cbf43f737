"""Typed errors raised by the madzip core.

Every error extends :class:`MadZipError`, itself a :class:`ValueError`, so
callers that only expect ``ValueError`` from a bad archive keep working.
"""


class MadZipError(ValueError):
    """Base error for madzip."""


class MalformedStream(MadZipError):
    """Encoded bits do not describe a whole number of symbols for the tree."""


class MissingCode(MadZipError):
    """A byte was handed to the encoder without an entry in the code table.

    :ivar byte: The byte value that had no code.
    :type byte: int
    """

    def __init__(self, byte: int):
        super().__init__(f"No code for byte 0x{byte:02x}")
        self.byte = byte


class CorruptContainer(MadZipError):
    """Serialized container is truncated, inconsistent or has trailing data."""


class BadMagic(CorruptContainer):
    """Serialized container does not start with the madzip magic number."""


class UnsupportedVersion(MadZipError):
    """Serialized container uses a layout version this code cannot read."""
