"""Run-level lock preventing two rate updates from executing at once."""

from __future__ import annotations

import fcntl
import os
from pathlib import Path
from typing import IO

from fx_cyprus.exceptions import RunLockHeldError
from fx_cyprus.utils.logger import get_logger

LOGGER = get_logger(__name__)


class RunLock:
    """Non-blocking exclusive ``flock`` on a lock file.

    A second holder fails immediately with :class:`RunLockHeldError`; it never
    waits for the first run to finish.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._handle: IO[str] | None = None

    @property
    def held(self) -> bool:
        return self._handle is not None

    def acquire(self) -> None:
        if self._handle is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(self.path, "a+", encoding="utf-8")
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as exc:
            handle.close()
            raise RunLockHeldError(self.path) from exc
        handle.seek(0)
        handle.truncate()
        handle.write(str(os.getpid()))
        handle.flush()
        self._handle = handle
        LOGGER.debug("Acquired run lock %s", self.path)

    def release(self) -> None:
        if self._handle is None:
            return
        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None
        LOGGER.debug("Released run lock %s", self.path)

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


__all__ = ["RunLock"]
