"""
Base utilities for path file parsing.

This module provides the pieces shared by the record readers:
- ByteCursor: linear cursor over an in-memory file
- PathFileError and its subclasses: decode failures
"""


class PathFileError(ValueError):
    """Base class for path file decode failures."""


class TruncatedInputError(PathFileError):
    """A fixed-size read or skip ran past the end of the data."""

    def __init__(self, what: str, offset: int, required: int, available: int):
        self.what = what
        self.offset = offset
        self.required = required
        self.available = available
        super().__init__(
            f"Truncated input reading {what} at offset {offset}: "
            f"need {required} bytes, {available} available"
        )


class UnexpectedFileSizeError(PathFileError):
    """The cursor did not finish exactly at the end of the file."""

    def __init__(self, expected: int, found: int):
        self.expected = expected  # actual file length
        self.found = found  # cursor position after the last region
        super().__init__(f"Unexpected file size expected {expected} found {found}")


class ByteCursor:
    """
    Forward-only cursor over a byte buffer.

    Every read and skip is all-or-nothing: a short read raises
    TruncatedInputError and leaves the offset unchanged.

    Usage:
        cursor = ByteCursor(data)
        header_bytes = cursor.read(20, "header")
        cursor.skip(768, "filler")
        if not cursor.at_end:
            ...
    """

    def __init__(self, data: bytes, start_offset: int = 0):
        """
        Args:
            data: Complete file contents
            start_offset: Offset to start reading from (default 0)
        """
        self.data = data
        self.offset = start_offset

    def _require(self, size: int, what: str):
        available = self.remaining_bytes
        if size > available:
            raise TruncatedInputError(what, self.offset, size, available)

    def read(self, size: int, what: str = "data") -> bytes:
        """
        Read exactly size bytes.

        Args:
            size: Number of bytes
            what: Description used in the error message

        Returns:
            The bytes read
        """
        self._require(size, what)
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def skip(self, size: int, what: str = "data"):
        """Advance exactly size bytes without interpreting them."""
        self._require(size, what)
        self.offset += size

    @property
    def remaining_bytes(self) -> int:
        """Number of bytes remaining to be read."""
        return max(0, len(self.data) - self.offset)

    @property
    def at_end(self) -> bool:
        """True when the cursor sits exactly at the end of the data."""
        return self.offset == len(self.data)
