
from __future__ import annotations
from typing import Dict, Callable, Any, List

_REGISTRY: Dict[str, Callable[..., Any]] = {}

def register(name: str):
    def _decorator(factory: Callable[..., Any]):
        if name in _REGISTRY and _REGISTRY[name] is not factory:
            raise KeyError(f"A policy is already registered under '{name}'")
        _REGISTRY[name] = factory
        return factory
    return _decorator

def get(name: str) -> Callable[..., Any]:
    if name not in _REGISTRY:
        raise KeyError(f"No policy registered under '{name}' (known: {', '.join(available())})")
    return _REGISTRY[name]

def available() -> List[str]:
    return sorted(_REGISTRY)
