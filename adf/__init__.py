from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.3.0"

_LAZY_EXPORTS = {
    "reconcile": ("adf.ledger.reconcile", "reconcile"),
    "build_transaction": ("adf.service", "build_transaction"),
    "load_account_form": ("adf.service", "load_account_form"),
}

__all__ = ["__version__", "reconcile", "build_transaction", "load_account_form"]


def __getattr__(name: str) -> Any:
    if name in _LAZY_EXPORTS:
        module_name, attr_name = _LAZY_EXPORTS[name]
        module = import_module(module_name)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'adf' has no attribute '{name}'")
