from __future__ import annotations

"""Exception hierarchy shared by the codec, lifecycle and conformance code.

Everything raised on purpose derives from `PQDigestError` so the CLI can turn
operational failures into a single exit status. A signature that does not
verify is never an exception; it is a `False` result.
"""


class PQDigestError(Exception):
    """Base class for operational errors."""


class EncodingError(PQDigestError):
    """Bytes or text could not be converted into a typed value."""


class KeyFormatError(EncodingError):
    """A fixed-length value had the wrong number of bytes."""

    def __init__(self, kind: str, expected: int, actual: int) -> None:
        super().__init__(f"{kind} must be exactly {expected} bytes, got {actual}")
        self.kind = kind
        self.expected = expected
        self.actual = actual


class HexFormatError(EncodingError):
    """Malformed hex text."""


class KeyFileError(PQDigestError):
    """A key, seed or signature file could not be read or written."""


class VectorFormatError(PQDigestError):
    """A conformance vector file is not valid JSON or lacks required fields."""


class NoApplicableGroups(PQDigestError):
    """A conformance run matched zero test groups."""


class UnsupportedParameterSet(PQDigestError):
    pass


class BackendUnavailable(PQDigestError):
    """The requested backend is not registered or could not be initialised."""


class UnsupportedOperation(PQDigestError):
    """The backend does not implement the requested operation."""
