from __future__ import annotations

"""Replay ACVP ML-DSA-65 vectors against a backend.

Two checks are supported:

* keyGen: ``keygen_from_seed(seed)`` must reproduce the vector's pk and sk
  byte for byte.
* sigVer: ``verify(pk, message, signature, context)`` must return the
  vector's ``testPassed``. A pk or signature that does not fit the fixed-size
  encoding is a ``False`` outcome, not an error.

A run that matches zero groups raises `NoApplicableGroups`: an empty run
would otherwise report success without testing anything.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union
from xml.sax.saxutils import escape, quoteattr

from .codec import decode_signature, decode_verifying_key
from .errors import KeyFormatError, NoApplicableGroups
from .interfaces import SignatureBackend
from .params import DEFAULT_PARAMETER_SET
from .vectors import (
    KeyGenCase,
    KeyGenGroup,
    SigVerCase,
    SigVerGroup,
    applicable_keygen_groups,
    applicable_sigver_groups,
    load_keygen_vectors,
    load_sigver_vectors,
)

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class CaseResult:
    name: str
    ok: bool
    group_id: Optional[int] = None
    case_id: Optional[int] = None
    details: str = ""
    duration_ms: int = 0


@dataclass
class ConformanceReport:
    """Outcome of one vector file; ``diagnostics`` holds one line per mismatch."""

    kind: str
    parameter_set: str
    source: str = ""
    results: List[CaseResult] = field(default_factory=list)
    groups: int = 0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def mismatches(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def ok(self) -> bool:
        return self.mismatches == 0

    @property
    def diagnostics(self) -> List[str]:
        return [r.details for r in self.results if not r.ok]

    def summary(self) -> str:
        return (
            f"ACVP {self.kind} {self.parameter_set}: {self.total} vectors tested, "
            f"{self.mismatches} mismatches"
        )


def _effective_jobs(backend: SignatureBackend, jobs: int) -> int:
    """Backends that share hashing state across calls are replayed on one thread."""
    if jobs > 1 and not getattr(backend, "thread_safe", False):
        log.info("backend %s is not thread-safe; ignoring jobs=%d", getattr(backend, "name", "?"), jobs)
        return 1
    return jobs


def _run_all(fn: Callable[[T], R], items: Sequence[T], jobs: int) -> List[R]:
    """Map ``fn`` over ``items`` keeping input order, optionally on a thread pool."""
    if jobs <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=jobs) as ex:
        return list(ex.map(fn, items))


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


# ---------------- keyGen ----------------

def check_keygen_case(backend: SignatureBackend, group: KeyGenGroup, case: KeyGenCase) -> CaseResult:
    t0 = time.perf_counter()
    pk, sk = backend.keygen_from_seed(case.seed)
    pk_match = bytes(pk) == case.expected_pk
    sk_match = bytes(sk) == case.expected_sk
    ok = pk_match and sk_match
    details = "" if ok else (
        f"MISMATCH tgId={group.tg_id} tcId={case.tc_id}: "
        f"pk_match={pk_match}, sk_match={sk_match}"
    )
    return CaseResult(
        name=f"keyGen#{group.tg_id}/{case.tc_id}",
        ok=ok,
        group_id=group.tg_id,
        case_id=case.tc_id,
        details=details,
        duration_ms=_elapsed_ms(t0),
    )


def run_keygen_conformance(
    groups: Iterable[KeyGenGroup],
    backend: SignatureBackend,
    jobs: int = 1,
    parameter_set: str = DEFAULT_PARAMETER_SET,
    source: str = "",
) -> ConformanceReport:
    selected = applicable_keygen_groups(groups, parameter_set)
    if not selected:
        raise NoApplicableGroups(f"no {parameter_set} groups found in keyGen vectors {source}".rstrip())

    work: List[Tuple[KeyGenGroup, KeyGenCase]] = [(g, c) for g in selected for c in g.cases]
    results = _run_all(lambda gc: check_keygen_case(backend, gc[0], gc[1]), work, _effective_jobs(backend, jobs))
    report = ConformanceReport("keyGen", parameter_set, source=source, results=results, groups=len(selected))
    _log_report(report)
    return report


# ---------------- sigVer ----------------

def verify_vector(backend: SignatureBackend, case: SigVerCase) -> bool:
    """Fail-closed verification of one sigVer case."""
    try:
        vk = decode_verifying_key(case.pk)
        sig = decode_signature(case.signature)
    except KeyFormatError as exc:
        log.debug("tcId=%s: %s; treating as invalid", case.tc_id, exc)
        return False
    return bool(backend.verify(vk.to_bytes(), case.message, sig.to_bytes(), case.context))


def check_sigver_case(backend: SignatureBackend, group: SigVerGroup, case: SigVerCase) -> CaseResult:
    t0 = time.perf_counter()
    actual = verify_vector(backend, case)
    ok = actual == case.expected_passed
    details = "" if ok else (
        f"MISMATCH tgId={group.tg_id} tcId={case.tc_id}: "
        f"expected={case.expected_passed}, got={actual}, reason={case.reason!r}"
    )
    return CaseResult(
        name=f"sigVer#{group.tg_id}/{case.tc_id}",
        ok=ok,
        group_id=group.tg_id,
        case_id=case.tc_id,
        details=details,
        duration_ms=_elapsed_ms(t0),
    )


def run_sigver_conformance(
    groups: Iterable[SigVerGroup],
    backend: SignatureBackend,
    jobs: int = 1,
    parameter_set: str = DEFAULT_PARAMETER_SET,
    source: str = "",
) -> ConformanceReport:
    selected = applicable_sigver_groups(groups, parameter_set)
    if not selected:
        raise NoApplicableGroups(
            f"no {parameter_set} external/pure groups found in sigVer vectors {source}".rstrip()
        )

    work: List[Tuple[SigVerGroup, SigVerCase]] = [(g, c) for g in selected for c in g.cases]
    results = _run_all(lambda gc: check_sigver_case(backend, gc[0], gc[1]), work, _effective_jobs(backend, jobs))
    report = ConformanceReport("sigVer", parameter_set, source=source, results=results, groups=len(selected))
    _log_report(report)
    return report


# ---------------- files & reporting ----------------

def run_conformance(
    backend: SignatureBackend,
    keygen_path: Optional[Union[str, Path]] = None,
    sigver_path: Optional[Union[str, Path]] = None,
    jobs: int = 1,
) -> List[ConformanceReport]:
    """Replay whichever vector files are given; at least one is required."""
    if keygen_path is None and sigver_path is None:
        raise NoApplicableGroups("no vector files given")
    reports: List[ConformanceReport] = []
    if keygen_path is not None:
        groups = load_keygen_vectors(keygen_path)
        reports.append(run_keygen_conformance(groups, backend, jobs=jobs, source=str(keygen_path)))
    if sigver_path is not None:
        groups = load_sigver_vectors(sigver_path)
        reports.append(run_sigver_conformance(groups, backend, jobs=jobs, source=str(sigver_path)))
    return reports


def _log_report(report: ConformanceReport) -> None:
    for line in report.diagnostics:
        log.warning(line)
    log.info(report.summary())


def write_junit(reports: Sequence[ConformanceReport], out_path: Union[str, Path]) -> Path:
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n<testsuites>\n')
        for rep in reports:
            name = quoteattr(f"{rep.kind}:{rep.parameter_set}")
            f.write(f'  <testsuite name={name} tests="{rep.total}" failures="{rep.mismatches}">\n')
            for r in rep.results:
                f.write(
                    f'    <testcase classname={quoteattr(rep.source or rep.kind)} '
                    f'name={quoteattr(r.name)} time="{r.duration_ms / 1000:.3f}">'
                )
                if not r.ok:
                    f.write(f"<failure message={quoteattr(r.details)}>{escape(r.details)}</failure>")
                f.write("</testcase>\n")
            f.write("  </testsuite>\n")
        f.write("</testsuites>\n")
    return out
