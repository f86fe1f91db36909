"""
Data-layer failures.

Routers never see raw OSError/JSONDecodeError; the store wraps them so the
app-level handlers in `api/main.py` can map each class to one status code.
A lookup miss is not an error here: store reads return None and the router
answers 404.
"""

from __future__ import annotations


class StoreError(RuntimeError):
    pass


class StorageError(StoreError):
    pass


class RecordValidationError(StoreError):
    pass
