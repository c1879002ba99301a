from __future__ import annotations
"""Fixed sizes for the supported ML-DSA parameter set.

Parameter sets are keyed by their ACVP label. Only ML-DSA-65 is registered;
the table exists so the label read from a vector file and the label a backend
reports can be resolved the same way.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Any

from .errors import UnsupportedParameterSet


@dataclass(frozen=True)
class ParameterSet:
    label: str             # ACVP parameterSet value, e.g. "ML-DSA-65"
    category: int          # NIST security category
    seed_len: int
    public_key_len: int
    secret_key_len: int
    signature_len: int
    digest_len: int = 32   # messages signed by the CLI are fixed digests
    max_context_len: int = 255
    aliases: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


PARAMETER_SETS: Dict[str, ParameterSet] = {}

def _add(param: ParameterSet) -> None:
    PARAMETER_SETS[param.label.lower()] = param
    for alias in param.aliases:
        PARAMETER_SETS[alias.lower()] = param


_add(ParameterSet(
    label="ML-DSA-65",
    category=3,
    seed_len=32,
    public_key_len=1952,
    secret_key_len=4032,
    signature_len=3309,
    aliases=("ML_DSA_65", "Dilithium3"),
))

DEFAULT_PARAMETER_SET = "ML-DSA-65"


def get_parameter_set(label: str = DEFAULT_PARAMETER_SET) -> ParameterSet:
    try:
        return PARAMETER_SETS[(label or "").lower()]
    except KeyError:
        raise UnsupportedParameterSet(f"unsupported parameter set: {label!r}") from None


ML_DSA_65 = get_parameter_set("ML-DSA-65")

SEED_SIZE = ML_DSA_65.seed_len
PUBLIC_KEY_SIZE = ML_DSA_65.public_key_len
SECRET_KEY_SIZE = ML_DSA_65.secret_key_len
SIGNATURE_SIZE = ML_DSA_65.signature_len
DIGEST_SIZE = ML_DSA_65.digest_len
