from __future__ import annotations
from typing import Protocol, Tuple

"""Backend interface used by the lifecycle and conformance code.

Adapters implement this Protocol and register themselves into the global
registry. The CLI and the harness interact only with this interface, never
with the ML-DSA libraries directly.
"""

class SignatureBackend(Protocol):
    """ML-DSA-65 operations delegated to an external implementation.

    `sign` accepts either a 32-byte seed or a full secret key and signs
    deterministically. `verify` returns False for malformed input instead
    of raising. `thread_safe` is True only when one instance may be called
    from several threads at once.
    """
    name: str
    parameter_set: str
    thread_safe: bool
    def keygen_from_seed(self, seed: bytes) -> Tuple[bytes, bytes]: ...
    def sign(self, signing_material: bytes, message: bytes, context: bytes = b"") -> bytes: ...
    def verify(self, public_key: bytes, message: bytes, signature: bytes, context: bytes = b"") -> bool: ...
