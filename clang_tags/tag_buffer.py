from .tags import TagRecord

INITIAL_CAPACITY = 16


class TagBuffer:
    """
    Append-only byte buffer that holds one file's worth of tag records.

    A single buffer is reused for every file of a run: `snapshot_and_reset()`
    hands out the bytes written so far and rewinds the write cursor, but the
    storage that was already allocated is kept for the next file.

    Storage doubles (as many times as needed) whenever a write does not fit,
    so appends are amortized O(1) and nothing is ever truncated.
    """

    def __init__(self, initial_capacity: int = INITIAL_CAPACITY):
        if initial_capacity <= 0:
            raise ValueError("initial_capacity must be positive")
        self._bytes = bytearray(initial_capacity)
        self._write_offset = 0

    @property
    def capacity(self) -> int:
        return len(self._bytes)

    @property
    def write_offset(self) -> int:
        return self._write_offset

    def __len__(self) -> int:
        return self._write_offset

    def _grow_for(self, size: int):
        capacity = self.capacity
        while capacity - self._write_offset < size:
            capacity *= 2
        if capacity != self.capacity:
            self._bytes.extend(bytes(capacity - self.capacity))

    def append(self, data: bytes):
        size = len(data)
        self._grow_for(size)
        self._bytes[self._write_offset:self._write_offset + size] = data
        self._write_offset += size

    def append_record(self, record: TagRecord):
        self.append(record.to_bytes())

    def snapshot_and_reset(self) -> bytes:
        """Returns the bytes written since the last reset and rewinds the buffer."""
        snapshot = bytes(self._bytes[:self._write_offset])
        self._write_offset = 0
        return snapshot
