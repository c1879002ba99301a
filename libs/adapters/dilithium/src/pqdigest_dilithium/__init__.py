"""dilithium-py backed ML-DSA-65 adapter.

Importing this package registers the ``dilithium-py`` backend.
"""

# Trigger registration side-effects
from . import backend as _backend  # noqa: F401

__all__: list[str] = []
