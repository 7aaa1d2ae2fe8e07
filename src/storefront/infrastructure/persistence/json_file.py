"""File handling shared by the JSON repositories.

Several processes can work on one data directory (every CLI call is its
own process), so each read and each load-modify-write cycle runs under an
inter-process lock file next to the data file. Writes go to a temp file
in the same directory and are moved into place with ``os.replace``;
readers see either the old file or the new one, never a partial write.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock

RECORD_LOCK_STRIPES = 16


class JsonFile:
    """A JSON list on disk, guarded for threads and for processes.

    ``locked()`` is re-entrant within a thread, so a repository method can
    hold it across ``load()`` and ``write()``, which take it themselves.
    """

    def __init__(self, path: Path, record_lock_stripes: int = RECORD_LOCK_STRIPES) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(f"{path}.lock")
        # A fixed set of lock files; record keys hash onto them.
        self._record_locks = [
            FileLock(f"{path}.record-{n:02d}.lock") for n in range(record_lock_stripes)
        ]
        self._ensure()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._thread_lock, self._file_lock:
            yield

    def record_lock(self, key: object) -> FileLock:
        """Inter-process lock for one record, held across a read-modify-write.

        ``zlib.crc32`` gives every process the same lock file for a key;
        the built-in ``hash`` of a str differs between processes.
        """
        stripe = zlib.crc32(str(key).encode("utf-8")) % len(self._record_locks)
        return self._record_locks[stripe]

    def load(self) -> list[dict]:
        with self.locked():
            return json.loads(self.path.read_text(encoding="utf-8"))

    def write(self, records: list[dict]) -> None:
        with self.locked():
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(json.dumps(records, indent=2) + "\n")
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def _ensure(self) -> None:
        with self.locked():
            if not self.path.exists():
                self.write([])
