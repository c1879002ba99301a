from __future__ import annotations
from typing import Tuple

from dilithium_py.ml_dsa import ML_DSA_65

from pqdigest import registry
from pqdigest.errors import KeyFormatError
from pqdigest.params import ML_DSA_65 as PARAMS


@registry.register("dilithium-py")
class DilithiumPy:
    """Pure-Python FIPS 204 implementation from the ``dilithium-py`` package."""

    name = "dilithium-py"
    parameter_set = PARAMS.label
    # dilithium_py keeps module-level SHAKE objects between absorb and squeeze
    thread_safe = False

    def __init__(self) -> None:
        self._impl = ML_DSA_65

    def keygen_from_seed(self, seed: bytes) -> Tuple[bytes, bytes]:
        if len(seed) != PARAMS.seed_len:
            raise KeyFormatError("seed", PARAMS.seed_len, len(seed))
        if hasattr(self._impl, "key_derive"):
            return self._impl.key_derive(bytes(seed))
        return self._impl._keygen_internal(bytes(seed))

    def _signing_key(self, signing_material: bytes) -> bytes:
        if len(signing_material) == PARAMS.seed_len:
            _, sk = self.keygen_from_seed(signing_material)
            return sk
        if len(signing_material) == PARAMS.secret_key_len:
            return bytes(signing_material)
        raise KeyFormatError("signing key", PARAMS.secret_key_len, len(signing_material))

    def sign(self, signing_material: bytes, message: bytes, context: bytes = b"") -> bytes:
        sk = self._signing_key(signing_material)
        return self._impl.sign(sk, bytes(message), ctx=bytes(context), deterministic=True)

    def verify(self, public_key: bytes, message: bytes, signature: bytes, context: bytes = b"") -> bool:
        if len(public_key) != PARAMS.public_key_len or len(signature) != PARAMS.signature_len:
            return False
        if len(context) > PARAMS.max_context_len:
            return False
        try:
            return bool(self._impl.verify(bytes(public_key), bytes(message), bytes(signature), ctx=bytes(context)))
        except Exception:
            # the library raises on encodings it cannot unpack; that is a rejection
            return False
