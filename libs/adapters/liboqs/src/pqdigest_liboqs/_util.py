from __future__ import annotations
import os
from typing import Optional, Sequence


def try_import_oqs():
    try:
        import oqs  # type: ignore
        return oqs
    except Exception:
        # liboqs-python raises RuntimeError when the shared library is missing
        return None


def pick_sig_algorithm(oqs_mod, env_var: str, candidates: Sequence[str]) -> Optional[str]:
    """
    Choose the liboqs mechanism name for ML-DSA-65 by attempting instantiation.
    Older liboqs builds only know the pre-standard "Dilithium3" name, whose
    encodings differ from FIPS 204, so it is not a candidate. Honors env
    override first.
    """
    order: list[str] = []
    env_val = os.getenv(env_var)
    if env_val:
        order.append(env_val)
    order += [c for c in candidates if c != env_val]
    for name in order:
        try:
            with oqs_mod.Signature(name):
                return name
        except Exception:
            continue
    return None
