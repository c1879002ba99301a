from __future__ import annotations
"""Adapter bootstrap and backend selection."""

import importlib
import importlib.util
import logging
from typing import Optional

from .config import Settings, load_settings
from .interfaces import SignatureBackend
from .registry import registry

log = logging.getLogger(__name__)

ADAPTER_MODULES = ("pqdigest_dilithium", "pqdigest_liboqs")

_LOADED = False


def load_adapters() -> None:
    """Import adapter packages so they register their backends.

    Missing packages are skipped; an adapter that fails on import is logged
    and skipped so the remaining backends stay usable.
    """
    global _LOADED
    if _LOADED:
        return
    for mod in ADAPTER_MODULES:
        if importlib.util.find_spec(mod) is None:
            log.debug("adapter %s not installed", mod)
            continue
        try:
            importlib.import_module(mod)
        except Exception as exc:
            log.warning("adapter %s failed to import: %s", mod, exc)
    _LOADED = True


def load_backend(name: Optional[str] = None, settings: Optional[Settings] = None) -> SignatureBackend:
    load_adapters()
    if name is None:
        name = (settings or load_settings()).backend
    backend = registry.create(name)
    log.debug("using backend %s (%s)", name, getattr(backend, "parameter_set", "?"))
    return backend
