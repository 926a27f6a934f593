"""
Random-access byte sources for uploads.

The upload workers read disjoint ranges of the same source concurrently,
so implementations must allow ``read_at`` from several threads at once.
"""

import os
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteSource(Protocol):
    """Protocol for a source readable at arbitrary offsets."""

    def read_at(self, offset: int, size: int) -> bytes:
        """
        Read ``size`` bytes starting at ``offset``.

        Returns:
            Exactly ``size`` bytes unless the source ends first.
        """
        ...


class BytesSource:
    """In-memory source."""

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)

    def __len__(self) -> int:
        return len(self._data)

    def read_at(self, offset: int, size: int) -> bytes:
        return bytes(self._data[offset : offset + size])


class FileSource:
    """
    File-backed source using positional reads.

    ``os.pread`` does not move a shared file position, so concurrent reads
    at different offsets do not interfere.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._fd: int | None = None

    def __enter__(self) -> "FileSource":
        self._fd = os.open(self._path, os.O_RDONLY)
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def size(self) -> int:
        if self._fd is not None:
            return os.fstat(self._fd).st_size
        return self._path.stat().st_size

    def read_at(self, offset: int, size: int) -> bytes:
        if self._fd is None:
            msg = "FileSource not opened. Use 'with' first."
            raise RuntimeError(msg)
        chunks = []
        remaining = size
        while remaining > 0:
            data = os.pread(self._fd, remaining, offset)
            if not data:
                break
            chunks.append(data)
            offset += len(data)
            remaining -= len(data)
        return b"".join(chunks)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
