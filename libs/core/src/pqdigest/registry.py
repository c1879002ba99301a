from __future__ import annotations
from typing import Any, Callable, Dict, List

from .errors import BackendUnavailable


class _BackendRegistry:
    """Name -> backend class mapping filled by adapter packages on import."""

    def __init__(self) -> None:
        self._items: Dict[str, Any] = {}

    def register(self, name: str) -> Callable[[Any], Any]:
        def _inner(backend_cls: Any) -> Any:
            self._items[name] = backend_cls
            return backend_cls
        return _inner

    def get(self, name: str) -> Any:
        try:
            return self._items[name]
        except KeyError:
            known = ", ".join(sorted(self._items)) or "none"
            raise BackendUnavailable(f"unknown backend {name!r} (registered: {known})") from None

    def create(self, name: str) -> Any:
        backend_cls = self.get(name)
        try:
            return backend_cls()
        except BackendUnavailable:
            raise
        except Exception as exc:
            raise BackendUnavailable(f"backend {name!r} failed to initialise: {exc}") from exc

    def names(self) -> List[str]:
        return sorted(self._items)

    def list(self) -> Dict[str, Any]:
        return dict(self._items)


registry = _BackendRegistry()
