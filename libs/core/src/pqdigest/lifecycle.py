from __future__ import annotations

"""Key lifecycle operations: keygen, sign and verify over raw binary files.

File formats are raw bytes with no framing:

    pk.bin    verifying key, 1952 bytes
    sk.bin    seed, 32 bytes (the full secret key is never written)
    sig.bin   signature, 3309 bytes

All length checks happen before the backend is called, so a malformed input
surfaces as a `PQDigestError` and never as an ``Invalid`` verdict.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Tuple, Union

from .codec import (
    Seed,
    Signature,
    VerifyingKey,
    decode_digest,
    decode_hex,
    decode_seed,
    decode_signature,
    decode_verifying_key,
)
from .errors import KeyFileError, KeyFormatError
from .interfaces import SignatureBackend
from .params import DIGEST_SIZE, SECRET_KEY_SIZE, SEED_SIZE

log = logging.getLogger(__name__)

PUBLIC_KEY_FILENAME = "pk.bin"
SEED_FILENAME = "sk.bin"

RandomSource = Callable[[int], bytes]
PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class KeyPair:
    verifying_key: VerifyingKey
    signing_key: bytes

    def __post_init__(self) -> None:
        if len(self.signing_key) != SECRET_KEY_SIZE:
            raise KeyFormatError("signing key", SECRET_KEY_SIZE, len(self.signing_key))

    def __repr__(self) -> str:
        return f"KeyPair(verifying_key={self.verifying_key!r}, signing_key=<redacted>)"


@dataclass(frozen=True)
class KeygenResult:
    public_key_path: Path
    seed_path: Path
    verifying_key: VerifyingKey


def derive_keypair(backend: SignatureBackend, seed: Seed) -> KeyPair:
    """Deterministically expand a seed into a keypair.

    The backend receives an immutable copy of the seed and the returned
    signing key is immutable too; wiping ``seed`` afterwards clears only the
    `Seed` buffer.
    """
    pk, sk = backend.keygen_from_seed(seed.to_bytes())
    return KeyPair(verifying_key=decode_verifying_key(pk), signing_key=sk)


def generate_keypair(backend: SignatureBackend, rng: RandomSource = os.urandom) -> Tuple[KeyPair, Seed]:
    """Draw a fresh seed from ``rng`` and derive its keypair.

    Returns ``(KeyPair, Seed)``; the caller owns the seed and should wipe it.
    """
    seed = decode_seed(rng(SEED_SIZE))
    return derive_keypair(backend, seed), seed


def read_binary(path: PathLike, kind: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise KeyFileError(f"failed to read {kind} from {path}: {exc.strerror or exc}") from exc


def write_binary(path: PathLike, data: bytes, kind: str) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise KeyFileError(f"failed to write {kind} to {path}: {exc.strerror or exc}") from exc


def keygen(output_dir: PathLike, backend: SignatureBackend, rng: RandomSource = os.urandom) -> KeygenResult:
    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise KeyFileError(f"failed to create output directory {out}: {exc.strerror or exc}") from exc

    keypair, seed = generate_keypair(backend, rng)
    pk_path = out / PUBLIC_KEY_FILENAME
    sk_path = out / SEED_FILENAME
    with seed:
        write_binary(pk_path, keypair.verifying_key.to_bytes(), "public key")
        write_binary(sk_path, seed.to_bytes(), "seed")
    log.info("generated keypair %s in %s", keypair.verifying_key.fingerprint(), out)
    return KeygenResult(public_key_path=pk_path, seed_path=sk_path, verifying_key=keypair.verifying_key)


def sign(seed_file: PathLike, hash_hex: str, output_file: PathLike, backend: SignatureBackend) -> Signature:
    seed = decode_seed(read_binary(seed_file, "seed"))
    with seed:
        digest = decode_digest(decode_hex(hash_hex, DIGEST_SIZE))
        keypair = derive_keypair(backend, seed)
        sig = decode_signature(backend.sign(keypair.signing_key, digest))
    write_binary(output_file, sig.to_bytes(), "signature")
    log.info("signed %s with key %s", digest.hex(), keypair.verifying_key.fingerprint())
    return sig


def verify(key_file: PathLike, hash_hex: str, sig_file: PathLike, backend: SignatureBackend) -> bool:
    vk = decode_verifying_key(read_binary(key_file, "public key"))
    digest = decode_digest(decode_hex(hash_hex, DIGEST_SIZE))
    sig = decode_signature(read_binary(sig_file, "signature"))
    ok = backend.verify(vk.to_bytes(), digest, sig.to_bytes())
    log.info("verify %s against key %s: %s", digest.hex(), vk.fingerprint(), ok)
    return bool(ok)
