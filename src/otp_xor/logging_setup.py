"""Logging for the otp-xor command, driven by the run configuration."""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from .config import RunConfig

_PACKAGE = "otp_xor"
_FILE_HANDLER = "otp_xor.file"
_STDERR_HANDLER = "otp_xor.stderr"
_OWN_HANDLERS = frozenset({_FILE_HANDLER, _STDERR_HANDLER})
_LOG_BYTES = 1 * 1024 * 1024
_LOG_BACKUPS = 3


def _file_handler(log_file: Path) -> logging.Handler | None:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_LOG_BYTES,
            backupCount=_LOG_BACKUPS,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"otp-xor: WARNING: could not open log file {log_file}: {exc}", file=sys.stderr)
        return None
    handler.set_name(_FILE_HANDLER)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s pid=%(process)d [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def _stderr_handler() -> logging.Handler:
    # Failures are printed by the CLI itself; stderr only carries warnings
    # such as a directory sync that failed after a committed rename.
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_STDERR_HANDLER)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter("otp-xor: %(message)s"))
    return handler


def configure(run_config: RunConfig, *, reconfigure: bool = False) -> logging.Logger:
    """Set up the otp_xor package logger from *run_config* and return it.

    ``run_config.log_file`` receives every record the logger lets through;
    ``run_config.debug`` lowers that threshold from INFO to DEBUG. A second
    call is a no-op unless *reconfigure* is True, in which case only the
    handlers installed here are replaced.
    """
    pkg_logger = logging.getLogger(_PACKAGE)
    own = [h for h in pkg_logger.handlers if h.get_name() in _OWN_HANDLERS]
    if own and not reconfigure:
        return pkg_logger
    for handler in own:
        pkg_logger.removeHandler(handler)
        handler.close()

    pkg_logger.setLevel(logging.DEBUG if run_config.debug else logging.INFO)
    file_handler = _file_handler(run_config.log_file)
    if file_handler is not None:
        pkg_logger.addHandler(file_handler)
    pkg_logger.addHandler(_stderr_handler())
    pkg_logger.propagate = False

    pkg_logger.debug("Logging to %s (debug=%s)", run_config.log_file, run_config.debug)
    return pkg_logger
