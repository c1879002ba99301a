"""Fixed-length key material codec.

Every value crossing a file or hex boundary goes through one of the
``decode_*`` helpers, which check the exact byte length for ML-DSA-65:

    seed            32 bytes
    verifying key   1952 bytes
    signature       3309 bytes
    digest          32 bytes

The ``encode_*`` helpers are the inverses and never fail.
"""

from __future__ import annotations

import binascii
import hashlib
import re
from dataclasses import dataclass
from typing import Optional

from .errors import HexFormatError, KeyFormatError
from .params import DIGEST_SIZE, PUBLIC_KEY_SIZE, SEED_SIZE, SIGNATURE_SIZE

HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def decode_hex(text: str, expected_len: Optional[int] = None) -> bytes:
    """Decode hex text with an optional ``0x`` prefix.

    Raises `HexFormatError` on an odd number of digits, non-hex characters,
    or when ``expected_len`` is given and the decoded length differs.
    """
    s = text.strip()
    if s.startswith("0x") or s.startswith("0X"):
        s = s[2:]
    if not HEX_RE.match(s):
        raise HexFormatError(f"not hex: {s[:32]!r}")
    if len(s) % 2:
        raise HexFormatError(f"odd number of hex digits ({len(s)})")
    data = binascii.unhexlify(s)
    if expected_len is not None and len(data) != expected_len:
        raise HexFormatError(f"expected {expected_len} bytes of hex, got {len(data)}")
    return data


def encode_hex(data: bytes, prefix: bool = True) -> str:
    return ("0x" if prefix else "") + data.hex()


def _check_len(kind: str, data: bytes, expected: int) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"{kind} must be bytes, got {type(data).__name__}")
    if len(data) != expected:
        raise KeyFormatError(kind, expected, len(data))
    return bytes(data)


@dataclass(frozen=True)
class VerifyingKey:
    """ML-DSA-65 public key (1952 bytes)."""

    key_bytes: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_bytes", _check_len("verifying key", self.key_bytes, PUBLIC_KEY_SIZE))

    @classmethod
    def from_hex(cls, text: str) -> "VerifyingKey":
        return cls(decode_hex(text))

    def to_bytes(self) -> bytes:
        return self.key_bytes

    def fingerprint(self) -> str:
        """First 8 bytes of SHA-256 over the key, hex encoded."""
        return hashlib.sha256(self.key_bytes).digest()[:8].hex()

    def __repr__(self) -> str:
        return f"VerifyingKey(fingerprint={self.fingerprint()})"


@dataclass(frozen=True)
class Signature:
    """ML-DSA-65 signature (3309 bytes)."""

    sig_bytes: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "sig_bytes", _check_len("signature", self.sig_bytes, SIGNATURE_SIZE))

    @classmethod
    def from_hex(cls, text: str) -> "Signature":
        return cls(decode_hex(text))

    def to_bytes(self) -> bytes:
        return self.sig_bytes

    def __repr__(self) -> str:
        return f"Signature(length={len(self.sig_bytes)})"


class Seed:
    """32-byte key generation seed.

    The bytes live in a mutable buffer so they can be overwritten once the
    keypair has been derived. Use as a context manager to wipe on exit:

        with decode_seed(raw) as seed:
            kp = derive_keypair(backend, seed)

    Only this buffer is wiped. Copies made by `to_bytes`, the raw bytes read
    from disk, the backend's internal state and the expanded secret key in
    `KeyPair.signing_key` are immutable Python objects and are left to the
    garbage collector.
    """

    __slots__ = ("_buf",)

    def __init__(self, data: bytes) -> None:
        self._buf = bytearray(_check_len("seed", data, SEED_SIZE))

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def wipe(self) -> None:
        for i in range(len(self._buf)):
            self._buf[i] = 0

    @property
    def wiped(self) -> bool:
        return not any(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __eq__(self, other) -> bool:
        if isinstance(other, Seed):
            return self._buf == other._buf
        return NotImplemented

    __hash__ = None  # mutable

    def __enter__(self) -> "Seed":
        return self

    def __exit__(self, *exc) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return "Seed(<redacted>)"


def decode_verifying_key(data: bytes) -> VerifyingKey:
    return VerifyingKey(data)


def encode_verifying_key(key: VerifyingKey) -> bytes:
    return key.to_bytes()


def decode_seed(data: bytes) -> Seed:
    return Seed(data)


def encode_seed(seed: Seed) -> bytes:
    return seed.to_bytes()


def decode_signature(data: bytes) -> Signature:
    return Signature(data)


def encode_signature(sig: Signature) -> bytes:
    return sig.to_bytes()


def decode_digest(data: bytes) -> bytes:
    return _check_len("digest", data, DIGEST_SIZE)
