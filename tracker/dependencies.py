"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
import os

from fastapi import Depends

from tracker.config import get_settings
from tracker.db import SqlStorageBackend
from tracker.storage import FileStorageBackend, StorageBackend
from tracker.stores import Tracker

logger = logging.getLogger(__name__)

_storage_backend: StorageBackend | None = None


def get_storage_backend() -> StorageBackend:
    """
    Return the process-wide storage backend selected by configuration.
    """
    global _storage_backend
    if _storage_backend:
        return _storage_backend

    settings = get_settings()
    if settings.storage_backend == "sql":
        if not settings.database_url:
            os.makedirs(settings.data_dir, exist_ok=True)
        _storage_backend = SqlStorageBackend(settings.resolved_database_url())
    else:
        _storage_backend = FileStorageBackend(settings.data_dir)
    logger.info("Using %s storage backend", settings.storage_backend)
    return _storage_backend


def get_tracker(backend: StorageBackend = Depends(get_storage_backend)) -> Tracker:
    return Tracker(backend)
