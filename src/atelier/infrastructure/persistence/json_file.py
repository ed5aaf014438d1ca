"""A JSON array on disk with atomic read-modify-write.

Every repository method that mutates state runs inside ``transaction()``.
The transaction holds two locks for the same path: a thread lock shared by
all ``JsonFile`` objects in this process, and an OS file lock on a sidecar
``<name>.lock`` file so the API server and CLI invocations running as
separate processes take turns too.  Readers take the same locks, so nobody
sees a half-applied update.  The file is replaced in one ``os.replace``
step.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from atelier.domain.exceptions import InfrastructureError

LOCK_TIMEOUT_SECONDS = 10.0

_LOCKS: dict[Path, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _thread_lock_for(path: Path) -> threading.RLock:
    with _LOCKS_GUARD:
        lock = _LOCKS.get(path)
        if lock is None:
            lock = _LOCKS[path] = threading.RLock()
        return lock


class JsonFile:

    def __init__(self, file_path: Path, lock_timeout: float = LOCK_TIMEOUT_SECONDS) -> None:
        self._path = file_path.resolve()
        self._thread_lock = _thread_lock_for(self._path)
        self._lock_timeout = lock_timeout
        self._file_lock = FileLock(str(self._path) + ".lock")
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> list[dict]:
        with self._locked():
            return self._load()

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """Yield the records; persist them if the block exits cleanly.

        A block that leaves the records unchanged does not rewrite the file.
        """
        with self._locked():
            records = self._load()
            before = copy.deepcopy(records)
            yield records
            if records != before:
                self._persist(records)

    # --- Locking --------------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._thread_lock:
            try:
                self._file_lock.acquire(timeout=self._lock_timeout)
            except Timeout as exc:
                raise InfrastructureError(
                    f"Timed out waiting for the lock on {self._path.name}"
                ) from exc
            try:
                yield
            finally:
                self._file_lock.release()

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> list[dict]:
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise InfrastructureError(f"Cannot read {self._path.name}: {exc}") from exc

    def _persist(self, records: list[dict]) -> None:
        payload = json.dumps(records, indent=2) + "\n"
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise InfrastructureError(f"Cannot write {self._path.name}: {exc}") from exc

    def _ensure_file(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InfrastructureError(f"Cannot create {self._path.parent}: {exc}") from exc
        with self._locked():
            if not self._path.exists():
                try:
                    self._path.write_text("[]", encoding="utf-8")
                except OSError as exc:
                    raise InfrastructureError(
                        f"Cannot create {self._path.name}: {exc}"
                    ) from exc
