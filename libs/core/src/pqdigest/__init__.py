
from .errors import (
    PQDigestError,
    EncodingError,
    KeyFormatError,
    HexFormatError,
    KeyFileError,
    VectorFormatError,
    NoApplicableGroups,
    UnsupportedParameterSet,
    BackendUnavailable,
    UnsupportedOperation,
)
from .interfaces import SignatureBackend
from .registry import registry
from .params import ParameterSet, get_parameter_set, DEFAULT_PARAMETER_SET
from .codec import (
    Seed,
    Signature,
    VerifyingKey,
    decode_hex,
    encode_hex,
    decode_seed,
    encode_seed,
    decode_signature,
    encode_signature,
    decode_verifying_key,
    encode_verifying_key,
    decode_digest,
)
from .backends import load_backend

__version__ = "0.1.0"

__all__ = [
    "PQDigestError",
    "EncodingError",
    "KeyFormatError",
    "HexFormatError",
    "KeyFileError",
    "VectorFormatError",
    "NoApplicableGroups",
    "UnsupportedParameterSet",
    "BackendUnavailable",
    "UnsupportedOperation",
    "SignatureBackend",
    "registry",
    "ParameterSet",
    "get_parameter_set",
    "DEFAULT_PARAMETER_SET",
    "Seed",
    "Signature",
    "VerifyingKey",
    "decode_hex",
    "encode_hex",
    "decode_seed",
    "encode_seed",
    "decode_signature",
    "encode_signature",
    "decode_verifying_key",
    "encode_verifying_key",
    "decode_digest",
    "load_backend",
]
