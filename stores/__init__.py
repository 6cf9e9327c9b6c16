from . import api_store, memory_store, sqlite_store  # noqa: F401 ensure registration
from .registry import available_stores, get_store

__all__ = [
    "available_stores",
    "get_store",
]
