from __future__ import annotations

"""Environment-driven settings.

    PQDIGEST_BACKEND      backend registry name (default: dilithium-py)
    PQDIGEST_JOBS         worker threads for conformance replay (default: 1)
    PQDIGEST_VECTOR_DIR   directory holding keyGen.json / sigVer.json
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

log = logging.getLogger(__name__)

DEFAULT_BACKEND = "dilithium-py"
KEYGEN_VECTOR_FILE = "keyGen.json"
SIGVER_VECTOR_FILE = "sigVer.json"


@dataclass(frozen=True)
class Settings:
    backend: str = DEFAULT_BACKEND
    jobs: int = 1
    vector_dir: Optional[Path] = None

    def vector_file(self, name: str) -> Optional[Path]:
        if self.vector_dir is None:
            return None
        return self.vector_dir / name


def _try_positive_int(raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning("ignoring non-integer value %r; using %d", raw, default)
        return default
    if value < 1:
        log.warning("ignoring non-positive value %r; using %d", raw, default)
        return default
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env_map = env if env is not None else os.environ
    backend = (env_map.get("PQDIGEST_BACKEND") or "").strip() or DEFAULT_BACKEND
    jobs = _try_positive_int(env_map.get("PQDIGEST_JOBS"), 1)
    raw_dir = (env_map.get("PQDIGEST_VECTOR_DIR") or "").strip()
    vector_dir = Path(raw_dir).expanduser() if raw_dir else None
    return Settings(backend=backend, jobs=jobs, vector_dir=vector_dir)
