# tsm/persistence/serializer.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import dataclasses
import json
import logging
from enum import Enum
from typing import Any, Optional

from tsm.core.errors import PersistenceError
from tsm.interfaces.protocols import Persistable, StateCodec
from tsm.persistence.store import PersistenceConfig

logger = logging.getLogger(__name__)


class JsonStateCodec:
    """
    Encodes states as UTF-8 JSON.

    - Enum members are stored by member name.
    - Objects with ``to_dict()`` are stored as that dict and rebuilt with
      ``state_type.from_dict()``.
    - Dataclass instances are stored with ``dataclasses.asdict`` and rebuilt
      with ``state_type(**data)``.
    - Anything else must already be JSON-serializable.
    """

    def __init__(self, state_type: Optional[type] = None) -> None:
        self.state_type = state_type

    def encode(self, state: Any) -> bytes:
        if isinstance(state, Enum):
            payload = state.name
        elif hasattr(state, "to_dict"):
            payload = state.to_dict()
        elif dataclasses.is_dataclass(state) and not isinstance(state, type):
            payload = dataclasses.asdict(state)
        else:
            payload = state
        return json.dumps(payload, sort_keys=True).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        payload = json.loads(data.decode("utf-8"))
        state_type = self.state_type
        if state_type is None:
            return payload
        if issubclass(state_type, Enum):
            return state_type[payload]
        if hasattr(state_type, "from_dict"):
            return state_type.from_dict(payload)
        if dataclasses.is_dataclass(state_type):
            return state_type(**payload)
        return state_type(payload)


def _codec_for(config: PersistenceConfig, state: Any) -> StateCodec:
    return config.codec if config.codec is not None else JsonStateCodec(type(state))


def storage_key(config: PersistenceConfig, state: Any) -> str:
    """
    Build the store key for `state`.

    :raises PersistenceError: If the state has no `persistence_key`.
    """
    if not isinstance(state, Persistable) or not isinstance(state.persistence_key, str):
        raise PersistenceError(f"State {state!r} does not provide a string persistence_key")
    return config.key_for(state.persistence_key)


def save_state(config: PersistenceConfig, state: Any) -> str:
    """
    Encode `state` and write it to the configured store.

    :return: The key the state was written under.
    :raises PersistenceError: If encoding or the store write fails.
    """
    key = storage_key(config, state)
    try:
        data = _codec_for(config, state).encode(state)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Could not encode state {state!r}: {e}", key=key) from e
    try:
        config.store.set(key, data)
    except Exception as e:
        raise PersistenceError(f"Could not write key {key}: {e}", key=key) from e
    logger.debug("Persisted state under %s (%d bytes)", key, len(data))
    return key


def restore_state(config: PersistenceConfig, state: Any) -> Optional[Any]:
    """
    Read the value stored under the key of `state` and decode it.

    The key is derived from the state currently held, so a restore brings back
    whatever was last saved for that key.

    :return: The decoded state, or None when nothing is stored.
    :raises PersistenceError: If the store read or decoding fails.
    """
    key = storage_key(config, state)
    try:
        data = config.store.get(key)
    except Exception as e:
        raise PersistenceError(f"Could not read key {key}: {e}", key=key) from e
    if data is None:
        logger.debug("Nothing persisted under %s", key)
        return None
    try:
        return _codec_for(config, state).decode(data)
    except (TypeError, ValueError, KeyError) as e:
        raise PersistenceError(f"Could not decode value stored under {key}: {e}", key=key) from e
