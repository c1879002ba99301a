from __future__ import annotations

"""One hex-encoded (key, message, signature) sample for downstream fixtures.

Output lines are stable so shell scripts can ``eval`` or ``grep`` them:

    PK_HEX=0x...
    MSG_HASH=0x...
    SIG_HEX=0x...
"""

import os
from dataclasses import dataclass
from typing import Callable, List

from .codec import decode_digest, decode_signature, encode_hex
from .interfaces import SignatureBackend
from .lifecycle import generate_keypair

# 32-byte message standing in for a bytes32 digest
SAMPLE_MESSAGE = bytes([0xAB]) * 32


@dataclass(frozen=True)
class Sample:
    public_key: bytes
    message: bytes
    signature: bytes

    def lines(self) -> List[str]:
        return [
            f"PK_HEX={encode_hex(self.public_key)}",
            f"MSG_HASH={encode_hex(self.message)}",
            f"SIG_HEX={encode_hex(self.signature)}",
        ]


def generate_sample(
    backend: SignatureBackend,
    rng: Callable[[int], bytes] = os.urandom,
    message: bytes = SAMPLE_MESSAGE,
) -> Sample:
    digest = decode_digest(message)
    keypair, seed = generate_keypair(backend, rng)
    seed.wipe()
    sig = decode_signature(backend.sign(keypair.signing_key, digest))
    return Sample(public_key=keypair.verifying_key.to_bytes(), message=digest, signature=sig.to_bytes())
