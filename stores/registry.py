from __future__ import annotations

from typing import Any, Callable, Dict

from config.settings import Settings


_REGISTRY: Dict[str, Callable[[Settings], Any]] = {}


def register(name: str, factory: Callable[[Settings], Any]) -> None:
    _REGISTRY[name] = factory


def get_store(name: str, settings: Settings):
    if name not in _REGISTRY:
        raise KeyError(f"Unknown store backend: {name}")
    return _REGISTRY[name](settings)


def available_stores() -> Dict[str, Any]:
    return dict(_REGISTRY)
