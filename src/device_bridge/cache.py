"""
In-process device status cache.

Entries are keyed by device number. Host device ids are a separate namespace
and only map onto a number; clearing a number makes every id that pointed at
it resolve to nothing. Entries live until cleared or overwritten, there is no
expiry.

Safe for concurrent use from threads and coroutines: keys are spread over
shards, each guarded by its own lock, so mutations of one key are serialized
while distinct keys rarely contend.
"""

import threading
import time
from typing import Optional

from device_bridge.models.device import DeviceItem

DEFAULT_SHARDS = 16


class DeviceStatus:
    ONLINE = "1"
    OFFLINE = "0"


class CacheEntry:
    __slots__ = ("identity", "status", "ids", "updated_at")

    def __init__(self, identity: Optional[DeviceItem] = None, status: Optional[str] = None):
        self.identity = identity
        self.status = status
        self.ids: set[str] = set()  # host device ids mapped onto this number
        self.updated_at = time.monotonic()

    def __repr__(self) -> str:
        return f"CacheEntry(identity={self.identity!r}, status={self.status!r}, ids={sorted(self.ids)!r})"


class _Shard:
    __slots__ = ("lock", "entries", "ids")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: dict[str, CacheEntry] = {}  # device_number -> entry
        self.ids: dict[str, str] = {}  # device_id -> device_number


class DeviceStatusCache:
    def __init__(self, shards: int = DEFAULT_SHARDS):
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._shards = [_Shard() for _ in range(shards)]

    def _shard(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def put(self, device_id: str, identity: DeviceItem) -> None:
        """Record a device's identity and map its host id onto its number.

        The id index is written before the entry, so a concurrent clear of the
        number can never leave an id pointing at an entry that forgot it.
        """
        number = identity.device_number
        id_shard = self._shard(device_id)
        with id_shard.lock:
            previous = id_shard.ids.get(device_id)
            id_shard.ids[device_id] = number
        if previous is not None and previous != number:
            old_shard = self._shard(previous)
            with old_shard.lock:
                old = old_shard.entries.get(previous)
                if old is not None:
                    old.ids.discard(device_id)

        shard = self._shard(number)
        with shard.lock:
            entry = shard.entries.get(number)
            if entry is None:
                entry = shard.entries[number] = CacheEntry(identity=identity)
            else:
                entry.identity = identity
                entry.updated_at = time.monotonic()
            entry.ids.add(device_id)

    def get_by_id(self, device_id: str) -> Optional[DeviceItem]:
        id_shard = self._shard(device_id)
        with id_shard.lock:
            number = id_shard.ids.get(device_id)
        if number is None:
            return None
        shard = self._shard(number)
        with shard.lock:
            entry = shard.entries.get(number)
            return entry.identity.model_copy() if entry and entry.identity else None

    def set_status(self, device_number: str, status: str) -> None:
        shard = self._shard(device_number)
        with shard.lock:
            entry = shard.entries.get(device_number)
            if entry is None:
                shard.entries[device_number] = CacheEntry(status=status)
            else:
                entry.status = status
                entry.updated_at = time.monotonic()

    def get_status(self, device_number: str) -> Optional[str]:
        shard = self._shard(device_number)
        with shard.lock:
            entry = shard.entries.get(device_number)
            return entry.status if entry else None

    def clear_by_number(self, device_number: str) -> None:
        """Drop the entry for a device number and every host id mapped onto it.

        Clearing an unknown number is a no-op.
        """
        shard = self._shard(device_number)
        with shard.lock:
            entry = shard.entries.pop(device_number, None)
        if entry is None:
            return
        for device_id in entry.ids:
            id_shard = self._shard(device_id)
            with id_shard.lock:
                if id_shard.ids.get(device_id) == device_number:
                    del id_shard.ids[device_id]

    def id_count(self) -> int:
        """Number of host ids currently mapped onto a device number."""
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.ids)
        return total

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total
