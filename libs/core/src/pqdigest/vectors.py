from __future__ import annotations

"""ACVP ML-DSA vector files (FIPS 204 keyGen / sigVer).

Only the fields the harness needs are kept. All hex is decoded while parsing;
malformed hex anywhere is a `VectorFormatError` because vector files are
trusted input. Byte lengths of ``pk`` and ``signature`` are *not* checked
here: wrong lengths are exactly what negative sigVer cases exercise.

Accepted layouts:

    {"testGroups": [...]}                      single ACVP object
    [{"acvVersion": ...}, {"testGroups": ...}]  ACVP envelope
    [{"tgId": ..., "tests": [...]}, ...]        bare group array
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .codec import decode_hex
from .errors import HexFormatError, VectorFormatError
from .params import DEFAULT_PARAMETER_SET, SEED_SIZE

log = logging.getLogger(__name__)

EXTERNAL_INTERFACE = "external"
PURE_PREHASH = "pure"


@dataclass(frozen=True)
class KeyGenCase:
    tc_id: int
    seed: bytes
    expected_pk: bytes
    expected_sk: bytes


@dataclass(frozen=True)
class KeyGenGroup:
    tg_id: Optional[int]
    parameter_set: str
    cases: Tuple[KeyGenCase, ...]


@dataclass(frozen=True)
class SigVerCase:
    tc_id: int
    expected_passed: bool
    pk: bytes
    message: bytes
    context: bytes
    signature: bytes
    reason: Optional[str] = None


@dataclass(frozen=True)
class SigVerGroup:
    tg_id: Optional[int]
    parameter_set: str
    signature_interface: str
    pre_hash: str
    cases: Tuple[SigVerCase, ...]


def read_vector_file(path: Union[str, Path]) -> Any:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise VectorFormatError(f"failed to read vector file {p}: {exc.strerror or exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise VectorFormatError(f"{p}: invalid JSON: {exc}") from exc


def _raw_groups(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        groups = data.get("testGroups")
    elif isinstance(data, list):
        envelope = next((item for item in data if isinstance(item, dict) and "testGroups" in item), None)
        groups = envelope["testGroups"] if envelope is not None else data
    else:
        groups = None
    if not isinstance(groups, list) or not all(isinstance(g, dict) for g in groups):
        raise VectorFormatError("vector file has no testGroups array")
    return groups


def _field(obj: Dict[str, Any], key: str, where: str) -> Any:
    if key not in obj:
        raise VectorFormatError(f"{where}: missing field {key!r}")
    return obj[key]


def _hex(obj: Dict[str, Any], key: str, where: str, default: Optional[str] = None) -> bytes:
    raw = obj.get(key, default)
    if raw is None:
        raise VectorFormatError(f"{where}: missing field {key!r}")
    if not isinstance(raw, str):
        raise VectorFormatError(f"{where}: field {key!r} is not a string")
    try:
        return decode_hex(raw)
    except HexFormatError as exc:
        raise VectorFormatError(f"{where}: bad {key} hex: {exc}") from exc


def _tests(group: Dict[str, Any], where: str) -> List[Dict[str, Any]]:
    tests = _field(group, "tests", where)
    if not isinstance(tests, list):
        raise VectorFormatError(f"{where}: 'tests' is not an array")
    return tests


def parse_keygen_groups(data: Any) -> List[KeyGenGroup]:
    groups: List[KeyGenGroup] = []
    for gi, g in enumerate(_raw_groups(data)):
        where = f"keyGen group {g.get('tgId', gi)}"
        cases = []
        for t in _tests(g, where):
            tc_id = _field(t, "tcId", where)
            case_where = f"{where} tcId={tc_id}"
            seed = _hex(t, "seed", case_where)
            if len(seed) != SEED_SIZE:
                raise VectorFormatError(f"{case_where}: seed must be {SEED_SIZE} bytes, got {len(seed)}")
            cases.append(KeyGenCase(
                tc_id=tc_id,
                seed=seed,
                expected_pk=_hex(t, "pk", case_where),
                expected_sk=_hex(t, "sk", case_where),
            ))
        groups.append(KeyGenGroup(
            tg_id=g.get("tgId"),
            parameter_set=str(_field(g, "parameterSet", where)),
            cases=tuple(cases),
        ))
    return groups


def parse_sigver_groups(data: Any) -> List[SigVerGroup]:
    groups: List[SigVerGroup] = []
    for gi, g in enumerate(_raw_groups(data)):
        where = f"sigVer group {g.get('tgId', gi)}"
        # older ACVP revisions carry pk on the group rather than on each test
        group_pk = g.get("pk")
        cases = []
        for t in _tests(g, where):
            tc_id = _field(t, "tcId", where)
            case_where = f"{where} tcId={tc_id}"
            passed = _field(t, "testPassed", case_where)
            if not isinstance(passed, bool):
                raise VectorFormatError(f"{case_where}: testPassed must be a boolean")
            cases.append(SigVerCase(
                tc_id=tc_id,
                expected_passed=passed,
                pk=_hex(t, "pk", case_where, default=group_pk),
                message=_hex(t, "message", case_where, default=""),
                context=_hex(t, "context", case_where, default=""),
                signature=_hex(t, "signature", case_where),
                reason=t.get("reason"),
            ))
        groups.append(SigVerGroup(
            tg_id=g.get("tgId"),
            parameter_set=str(_field(g, "parameterSet", where)),
            signature_interface=str(g.get("signatureInterface", "")),
            pre_hash=str(g.get("preHash", "")),
            cases=tuple(cases),
        ))
    return groups


def load_keygen_vectors(path: Union[str, Path]) -> List[KeyGenGroup]:
    return parse_keygen_groups(read_vector_file(path))


def load_sigver_vectors(path: Union[str, Path]) -> List[SigVerGroup]:
    return parse_sigver_groups(read_vector_file(path))


def applicable_keygen_groups(groups: Iterable[KeyGenGroup], parameter_set: str = DEFAULT_PARAMETER_SET) -> List[KeyGenGroup]:
    return [g for g in groups if g.parameter_set == parameter_set]


def applicable_sigver_groups(groups: Iterable[SigVerGroup], parameter_set: str = DEFAULT_PARAMETER_SET) -> List[SigVerGroup]:
    """External interface, pure mode: the verifier hashes the raw message itself."""
    selected = []
    for g in groups:
        if (
            g.parameter_set == parameter_set
            and g.signature_interface == EXTERNAL_INTERFACE
            and g.pre_hash == PURE_PREHASH
        ):
            selected.append(g)
        else:
            log.debug(
                "skipping sigVer group %s (%s, %s, %s)",
                g.tg_id, g.parameter_set, g.signature_interface, g.pre_hash,
            )
    return selected
