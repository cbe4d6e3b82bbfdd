"""One-time-pad XOR of files with an atomic in-place write path."""

from .combiner import combine
from .errors import (
    ConfigError,
    IoReadError,
    IoWriteError,
    KeyTooShort,
    OtpXorError,
    UsageError,
    WriteStep,
)
from .file_io import read_bytes, replace_in_place, staging_path, write_new

__all__ = [
    "ConfigError",
    "IoReadError",
    "IoWriteError",
    "KeyTooShort",
    "OtpXorError",
    "UsageError",
    "WriteStep",
    "combine",
    "read_bytes",
    "replace_in_place",
    "staging_path",
    "write_new",
]
