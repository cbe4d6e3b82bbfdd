"""File I/O primitives: whole-file reads, plain writes and atomic replace."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from .errors import IoReadError, IoWriteError, WriteStep

logger = logging.getLogger(__name__)

STAGING_SUFFIX = ".otp-staging"
_DEFAULT_MODE = 0o644


def read_bytes(path: Path) -> bytes:
    """Read the whole file at *path* into memory."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise IoReadError(path, exc) from exc
    logger.debug("Read %d bytes from %s", len(data), path)
    return data


def staging_path(target: Path) -> Path:
    # Same directory as the target so the final rename never crosses filesystems.
    return target.with_name(target.name + STAGING_SUFFIX)


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


def _close_quietly(fd: int, path: Path) -> None:
    # Only used once a write error is already propagating.
    try:
        os.close(fd)
    except OSError:
        logger.debug("Failed to close %s", path, exc_info=True)


def write_new(path: Path, data: bytes) -> None:
    """Create or truncate *path* and write *data*. Not atomic."""
    try:
        fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _DEFAULT_MODE)
    except OSError as exc:
        raise IoWriteError(path, WriteStep.CREATE, exc) from exc
    try:
        _write_all(fd, data)
    except OSError as exc:
        _close_quietly(fd, path)
        raise IoWriteError(path, WriteStep.WRITE, exc) from exc
    try:
        os.close(fd)
    except OSError as exc:
        raise IoWriteError(path, WriteStep.FLUSH, exc) from exc
    logger.debug("Wrote %d bytes to %s", len(data), path)


def _target_mode(target: Path) -> int:
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return _DEFAULT_MODE
    except OSError as exc:
        raise IoWriteError(target, WriteStep.CREATE, exc) from exc


def _stage(tmp: Path, data: bytes, mode: int) -> None:
    """Write *data* to *tmp* and make it durable. Never touches the target."""
    try:
        fd = os.open(str(tmp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    except OSError as exc:
        raise IoWriteError(tmp, WriteStep.CREATE, exc) from exc

    step = WriteStep.CREATE
    try:
        if hasattr(os, "fchmod"):
            # O_CREAT ignores mode for an existing leftover and applies umask.
            os.fchmod(fd, mode)
        step = WriteStep.WRITE
        _write_all(fd, data)
        step = WriteStep.SYNC
        os.fsync(fd)
    except OSError as exc:
        _close_quietly(fd, tmp)
        raise IoWriteError(tmp, step, exc) from exc

    try:
        os.close(fd)
    except OSError as exc:
        raise IoWriteError(tmp, WriteStep.FLUSH, exc) from exc


def replace_in_place(target: Path, data: bytes) -> None:
    """Atomically replace the contents of *target* with *data*.

    The bytes go to a staging file beside the target, are fsynced and
    closed, and only then renamed over the target. If any step before the
    rename fails the target is left untouched and the staging file is left
    behind un-renamed; the next run truncates it.
    """
    tmp = staging_path(target)
    mode = _target_mode(target)

    logger.debug("Staging %d bytes for %s in %s", len(data), target, tmp)
    _stage(tmp, data, mode)

    try:
        os.replace(tmp, target)
    except OSError as exc:
        raise IoWriteError(target, WriteStep.RENAME, exc) from exc
    logger.debug("Renamed %s onto %s", tmp, target)

    _sync_directory(target.parent)


def _sync_directory(directory: Path) -> None:
    """Make a completed rename durable. The target is already committed here."""
    if os.name == "nt":
        return
    try:
        dir_fd = os.open(str(directory), os.O_RDONLY)
    except OSError:
        logger.warning("Could not open %s to sync the rename", directory, exc_info=True)
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        logger.warning("Could not sync directory %s after rename", directory, exc_info=True)
    finally:
        os.close(dir_fd)
