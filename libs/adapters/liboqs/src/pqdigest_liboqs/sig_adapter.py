from __future__ import annotations
from typing import Tuple

from pqdigest import registry
from pqdigest.errors import BackendUnavailable, KeyFormatError, UnsupportedOperation
from pqdigest.params import ML_DSA_65 as PARAMS

from ._util import try_import_oqs, pick_sig_algorithm

_oqs = try_import_oqs()


@registry.register("liboqs")
class LibOQS:
    """liboqs ML-DSA-65, used as an independent verifier.

    liboqs does not expose seeded ML-DSA key generation, so seed expansion
    and signing from a seed are unsupported. Signing with a full secret key
    works, but liboqs signs with hedged randomness.
    """

    name = "liboqs"
    parameter_set = PARAMS.label
    # every call opens its own OQS_SIG context
    thread_safe = True

    def __init__(self) -> None:
        if _oqs is None:
            raise BackendUnavailable("python-oqs/liboqs is not installed")
        self.alg = pick_sig_algorithm(_oqs, "PQDIGEST_LIBOQS_ALG", ["ML-DSA-65"])
        if not self.alg:
            raise BackendUnavailable("ML-DSA-65 is not enabled in the installed liboqs")

    def keygen(self) -> Tuple[bytes, bytes]:
        """Random liboqs keypair, used to cross-check that the default backend
        accepts signatures it did not produce. Not part of `SignatureBackend`."""
        with _oqs.Signature(self.alg) as s:
            pk = s.generate_keypair()
            sk = s.export_secret_key()
            return pk, sk

    def keygen_from_seed(self, seed: bytes) -> Tuple[bytes, bytes]:
        raise UnsupportedOperation("liboqs cannot derive ML-DSA keys from a seed")

    def sign(self, signing_material: bytes, message: bytes, context: bytes = b"") -> bytes:
        if len(signing_material) == PARAMS.seed_len:
            raise UnsupportedOperation("liboqs cannot sign from a seed; pass the full secret key")
        if len(signing_material) != PARAMS.secret_key_len:
            raise KeyFormatError("signing key", PARAMS.secret_key_len, len(signing_material))
        with _oqs.Signature(self.alg, secret_key=bytes(signing_material)) as s:
            if context:
                return s.sign_with_ctx_str(bytes(message), bytes(context))
            return s.sign(bytes(message))

    def verify(self, public_key: bytes, message: bytes, signature: bytes, context: bytes = b"") -> bool:
        if len(public_key) != PARAMS.public_key_len or len(signature) != PARAMS.signature_len:
            return False
        if len(context) > PARAMS.max_context_len:
            return False
        try:
            with _oqs.Signature(self.alg) as v:
                if context:
                    return bool(v.verify_with_ctx_str(bytes(message), bytes(signature), bytes(context), bytes(public_key)))
                return bool(v.verify(bytes(message), bytes(signature), bytes(public_key)))
        except Exception:
            return False
