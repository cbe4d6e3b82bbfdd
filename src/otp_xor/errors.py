"""Error taxonomy for otp-xor.

Library code raises these; only the CLI entrypoint reports them and picks
the exit status.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class WriteStep(str, Enum):
    CREATE = "create"
    WRITE = "write"
    FLUSH = "flush"
    SYNC = "sync"
    RENAME = "rename"


class OtpXorError(Exception):
    exit_code = 1


class UsageError(OtpXorError):
    exit_code = 2


class ConfigError(OtpXorError):
    def __init__(self, path: Path, cause: str) -> None:
        super().__init__(f"invalid config file {path}: {cause}")
        self.path = path
        self.cause = cause


class IoReadError(OtpXorError):
    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"cannot read {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class IoWriteError(OtpXorError):
    def __init__(self, path: Path, step: WriteStep, cause: OSError) -> None:
        super().__init__(f"cannot write {path} ({step.value} failed): {cause.strerror or cause}")
        self.path = path
        self.step = step
        self.cause = cause


class KeyTooShort(OtpXorError):
    def __init__(self, key_len: int, input_len: int) -> None:
        super().__init__(f"key is shorter than input ({key_len} < {input_len} bytes)")
        self.key_len = key_len
        self.input_len = input_len
