"""Adapter package for liboqs-backed ML-DSA-65.

Importing the package registers the ``liboqs`` backend when python-oqs is
importable; otherwise nothing is registered.
"""

from ._util import try_import_oqs

if try_import_oqs() is not None:
    # Trigger registration side-effects
    from . import sig_adapter as _sig_adapter  # noqa: F401

__all__: list[str] = []
