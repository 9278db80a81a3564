# tsm/persistence/store.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import base64
import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from tsm.interfaces.protocols import KeyValueStore, StateCodec

logger = logging.getLogger(__name__)


class InMemoryStore:
    """
    Process-local key-value store. Safe to share between threads.
    """

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def keys(self):
        with self._lock:
            return list(self._data)


class JsonFileStore:
    """
    Key-value store backed by a single JSON document on disk. Values are kept
    base64-encoded. Every `set` rewrites the file through a temporary file and
    an atomic rename.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            encoded = self._read().get(key)
        if encoded is None:
            return None
        return base64.b64decode(encoded)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            data = self._read()
            data[key] = base64.b64encode(value).decode("ascii")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, sort_keys=True)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        logger.debug("Wrote key %s to %s", key, self.path)


@dataclass(frozen=True)
class PersistenceConfig:
    """
    Where and how an engine saves its current state.

    :param store: The key-value store; defaults to a fresh InMemoryStore.
    :param key_prefix: Prefix joined with the state's persistence key by a dot.
    :param codec: State <-> bytes codec; defaults to a JsonStateCodec for the
        type of the state being saved or restored.
    """

    store: KeyValueStore = field(default_factory=InMemoryStore)
    key_prefix: str = "com.statemachine"
    codec: Optional[StateCodec] = None

    def key_for(self, persistence_key: str) -> str:
        return f"{self.key_prefix}.{persistence_key}"
