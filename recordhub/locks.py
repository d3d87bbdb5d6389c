"""
Named file locks serializing read-modify-write on a store key.

Keys look like lock:store:saas_users. A lock is a file created with
O_EXCL inside the locks directory; waiters poll until it disappears or
the timeout elapses. A lock left behind by a dead process, or older than
the timeout, is broken so a crash does not wedge the key.
"""

from __future__ import annotations

import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from .utils.logger import get_logger

logger = get_logger(__name__)

LOCK_TIMEOUT_SECONDS = 30
LOCK_POLL_INTERVAL = 0.05
LOCK_STALE_SECONDS = 30


def _lock_path(locks_dir: Path, key: str) -> Path:
    safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
    locks_dir.mkdir(parents=True, exist_ok=True)
    return locks_dir / f"{safe}.lock"


def _pid_alive(pid: int) -> bool:
    if os.name != "posix":
        # Signal 0 is not a liveness probe outside POSIX
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def _is_stale(path: Path, max_age_seconds: float) -> bool:
    """True when the holder pid is gone or the lock outlived max_age_seconds"""
    try:
        age = time.time() - path.stat().st_mtime
        content = path.read_text().strip()
    except FileNotFoundError:
        return False
    if age >= max_age_seconds:
        return True
    if content.isdigit():
        return not _pid_alive(int(content))
    return False


def _break_lock(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


@contextmanager
def acquire_lock(
    locks_dir: Path,
    key: str,
    timeout_seconds: float = LOCK_TIMEOUT_SECONDS,
    stale_after_seconds: float = LOCK_STALE_SECONDS,
) -> Generator[None, None, None]:
    """
    Acquire a named lock. Blocks until acquired or raises TimeoutError.
    Not reentrant: a holder must not acquire the same key again.
    An existing lock whose pid is dead, or older than stale_after_seconds,
    is removed and acquisition retried.
    """
    path = _lock_path(locks_dir, key)
    start = time.monotonic()
    while True:
        try:
            fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            if _is_stale(path, stale_after_seconds):
                logger.warning("Breaking stale lock", key=key)
                _break_lock(path)
                continue
            if (time.monotonic() - start) >= timeout_seconds:
                raise TimeoutError(f"Could not acquire lock {key} within {timeout_seconds}s")
            time.sleep(LOCK_POLL_INTERVAL)
            continue
        try:
            os.write(fd, str(os.getpid()).encode())
        finally:
            os.close(fd)
        break

    try:
        yield
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


def lock_key_store(key: str) -> str:
    return f"lock:store:{key}"
