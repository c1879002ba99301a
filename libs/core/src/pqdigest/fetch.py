from __future__ import annotations

"""Download the official ACVP ML-DSA vector files from usnistgov/ACVP-Server.

``internalProjection.json`` is used because it carries prompts and expected
results in one file (seed + pk + sk for keyGen, testPassed for sigVer).
"""

import logging
from pathlib import Path
from typing import Dict, Union
from urllib.request import urlopen

from .config import KEYGEN_VECTOR_FILE, SIGVER_VECTOR_FILE
from .errors import KeyFileError, PQDigestError

log = logging.getLogger(__name__)

ACVP_RAW_BASE = "https://raw.githubusercontent.com/usnistgov/ACVP-Server/master/gen-val/json-files"

VECTOR_SOURCES: Dict[str, str] = {
    KEYGEN_VECTOR_FILE: "ML-DSA-keyGen-FIPS204/internalProjection.json",
    SIGVER_VECTOR_FILE: "ML-DSA-sigVer-FIPS204/internalProjection.json",
}


def fetch_vectors(dest: Union[str, Path], base_url: str = ACVP_RAW_BASE, timeout: float = 60.0) -> Dict[str, Path]:
    out_dir = Path(dest)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise KeyFileError(f"failed to create {out_dir}: {exc.strerror or exc}") from exc

    written: Dict[str, Path] = {}
    for filename, rel in VECTOR_SOURCES.items():
        url = f"{base_url.rstrip('/')}/{rel}"
        log.info("[ACVP] downloading %s", url)
        try:
            with urlopen(url, timeout=timeout) as resp:
                data = resp.read()
        except OSError as exc:  # URLError, timeouts
            raise PQDigestError(f"failed to download {url}: {exc}") from exc
        target = out_dir / filename
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise KeyFileError(f"failed to write {target}: {exc.strerror or exc}") from exc
        written[filename] = target
    return written
