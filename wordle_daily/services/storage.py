"""
Storage Service

Key-value stores for persisted game blobs and the writer that keeps
slow or failing writes away from gameplay.
"""

import datetime
import logging
import queue
import threading
from typing import Dict, Optional, Protocol

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

logger = logging.getLogger('wordle_game.storage')


class KeyValueStore(Protocol):
    """Anything with string get/set can hold game state."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store, used for development and tests."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)


class MongoStore:
    """
    MongoDB-backed store.

    Each key is one document: {"_id": key, "value": blob, "updated_at": datetime}.
    """

    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = "wordle_game",
                 collection=None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database holding the game_states collection
            collection: Pre-built collection to use instead of connecting
        """
        self.client = None
        if collection is None:
            if not mongo_uri:
                raise ValueError("MongoDB URI is required when no collection is supplied")
            self.client = MongoClient(mongo_uri, server_api=ServerApi('1'))
            # Fail fast on a bad connection string
            self.client.admin.command('ping')
            logger.info("Connected to MongoDB database '%s'", db_name)
            collection = self.client[db_name].game_states
        self.collection = collection

    def get(self, key: str) -> Optional[str]:
        document = self.collection.find_one({"_id": key})
        if document is None:
            return None
        return document.get("value")

    def set(self, key: str, value: str) -> None:
        self.collection.replace_one(
            {"_id": key},
            {"_id": key, "value": value, "updated_at": datetime.datetime.utcnow()},
            upsert=True
        )

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


_STOP = object()


class StateWriter:
    """
    Front for a KeyValueStore used by the game service.

    In asynchronous mode saves are queued to a single background thread so
    they land in order without blocking the caller. Failures on either path
    are logged, never raised.
    """

    def __init__(self, store: KeyValueStore, asynchronous: bool = True):
        self.store = store
        self.asynchronous = asynchronous
        self._queue: "queue.Queue" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except Exception as e:
            logger.warning("Could not read saved game %s: %s", key, e)
            return None

    def save(self, key: str, blob: str) -> None:
        if not self.asynchronous:
            self._write(key, blob)
            return
        self._ensure_worker()
        self._queue.put((key, blob))

    def flush(self) -> None:
        """Block until every queued write has been attempted."""
        if self._thread is not None:
            self._queue.join()

    def close(self) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is not None:
            self._queue.put(_STOP)
            thread.join()

    def _write(self, key: str, blob: str) -> None:
        try:
            self.store.set(key, blob)
        except Exception as e:
            logger.error("Could not save game %s: %s", key, e)

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name="state-writer", daemon=True)
                self._thread.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                key, blob = item
                self._write(key, blob)
            finally:
                self._queue.task_done()


def build_store(config_class) -> KeyValueStore:
    """Create the store selected by STORAGE_BACKEND."""
    backend = getattr(config_class, 'STORAGE_BACKEND', 'memory')
    if backend == 'mongo':
        return MongoStore(config_class.MONGO_URI, config_class.MONGO_DB)
    if backend == 'memory':
        return MemoryStore()
    raise ValueError(f"Unknown storage backend: {backend}")
