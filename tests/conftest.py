from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for rel in (
    "libs/core/src",
    "libs/adapters/dilithium/src",
    "libs/adapters/liboqs/src",
    "apps/cli/src",
):
    candidate = str(ROOT / rel)
    if candidate not in sys.path:
        sys.path.insert(0, candidate)

from pqdigest.backends import load_backend  # noqa: E402

SEED_AB = bytes([0xAB]) * 32
DIGEST_AB = bytes([0xAB]) * 32


class DummyBackend:
    """Fast stand-in: pk/sk are the seed repeated, a signature is the message tag."""

    name = "dummy"
    parameter_set = "ML-DSA-65"
    thread_safe = True

    def __init__(self) -> None:
        self.verify_calls = 0

    def keygen_from_seed(self, seed: bytes) -> tuple[bytes, bytes]:
        pk = (bytes(seed) * 62)[:1952]
        sk = (bytes(seed) * 126)[:4032]
        return pk, sk

    def sign(self, signing_material: bytes, message: bytes, context: bytes = b"") -> bytes:
        tag = (bytes(signing_material[:8]) + bytes(message) + bytes(context)) * 200
        return tag[:3309].ljust(3309, b"\x00")

    def verify(self, public_key: bytes, message: bytes, signature: bytes, context: bytes = b"") -> bool:
        self.verify_calls += 1
        return signature == self.sign(public_key[:8], message, context)


@pytest.fixture(scope="session")
def backend():
    return load_backend("dilithium-py")


@pytest.fixture
def dummy_backend() -> DummyBackend:
    return DummyBackend()


def _flip(data: bytes, index: int) -> bytes:
    buf = bytearray(data)
    buf[index] ^= 0x01
    return bytes(buf)


@pytest.fixture(scope="session")
def acvp_vectors(tmp_path_factory, backend):
    """ACVP-format keyGen/sigVer files produced with the default backend.

    Positive cases are signatures made by the backend; negative cases are
    tampered copies, so the expected outcome of each case is known.
    """
    out = tmp_path_factory.mktemp("acvp")

    seeds = [bytes([i]) * 32 for i in (1, 2, 3)]
    keygen_tests = []
    for tc_id, seed in enumerate(seeds, start=1):
        pk, sk = backend.keygen_from_seed(seed)
        keygen_tests.append({"tcId": tc_id, "seed": seed.hex().upper(), "pk": pk.hex().upper(), "sk": sk.hex().upper()})
    keygen = {
        "vsId": 0,
        "algorithm": "ML-DSA",
        "mode": "keyGen",
        "revision": "FIPS204",
        "testGroups": [
            {"tgId": 1, "testType": "AFT", "parameterSet": "ML-DSA-65", "tests": keygen_tests},
            {"tgId": 2, "testType": "AFT", "parameterSet": "ML-DSA-44", "tests": [
                {"tcId": 4, "seed": "00" * 32, "pk": "00", "sk": "00"},
            ]},
        ],
    }

    pk, sk = backend.keygen_from_seed(seeds[0])
    msg = bytes(range(32))
    ctx = b"pq-digest"
    sig_plain = backend.sign(sk, msg)
    sig_ctx = backend.sign(sk, msg, ctx)
    sig_empty = backend.sign(sk, b"")

    def case(tc_id, passed, pk_=pk, message=msg, context=b"", signature=sig_plain, reason=None):
        t = {
            "tcId": tc_id,
            "testPassed": passed,
            "pk": pk_.hex().upper(),
            "message": message.hex().upper(),
            "context": context.hex().upper(),
            "signature": signature.hex().upper(),
        }
        if reason:
            t["reason"] = reason
        return t

    external_pure = [
        case(1, True, reason="valid signature and message - signature should verify successfully"),
        case(2, True, context=ctx, signature=sig_ctx),
        case(3, False, context=b"other", signature=sig_ctx, reason="modified context"),
        case(4, False, signature=_flip(sig_plain, 100), reason="modified signature - z"),
        case(5, False, message=_flip(msg, 0), reason="modified message"),
        case(6, False, signature=sig_plain[:-1], reason="signature too short"),
        case(7, False, pk_=pk + b"\x00", reason="public key too long"),
        case(8, True, message=b"", signature=sig_empty),
    ]
    bogus = [case(99, True, signature=b"\x00" * 16)]
    sigver = {
        "vsId": 0,
        "algorithm": "ML-DSA",
        "mode": "sigVer",
        "revision": "FIPS204",
        "testGroups": [
            {"tgId": 1, "testType": "AFT", "parameterSet": "ML-DSA-65",
             "signatureInterface": "external", "preHash": "pure", "tests": external_pure},
            {"tgId": 2, "testType": "AFT", "parameterSet": "ML-DSA-65",
             "signatureInterface": "internal", "preHash": "pure", "externalMu": False, "tests": bogus},
            {"tgId": 3, "testType": "AFT", "parameterSet": "ML-DSA-65",
             "signatureInterface": "external", "preHash": "preHash", "tests": bogus},
            {"tgId": 4, "testType": "AFT", "parameterSet": "ML-DSA-87",
             "signatureInterface": "external", "preHash": "pure", "tests": bogus},
        ],
    }

    keygen_path = out / "keyGen.json"
    sigver_path = out / "sigVer.json"
    keygen_path.write_text(json.dumps(keygen), encoding="utf-8")
    sigver_path.write_text(json.dumps(sigver), encoding="utf-8")
    return {"dir": out, "keygen": keygen_path, "sigver": sigver_path}
