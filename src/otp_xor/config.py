"""otp-xor run configuration.

Config files:
  - Global:  ~/.config/otp-xor/config.json
  - Project: .otp-xor.json (current working directory)

Merge order: global → project → environment variables → command-line flags.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILENAME = "key.key"
CONFIG_DIR = Path.home() / ".config" / "otp-xor"
DEFAULT_LOG_FILE = CONFIG_DIR / "otp-xor.log"
PROJECT_CONFIG_NAME = ".otp-xor.json"

_KNOWN_KEYS = frozenset({"key_filename", "debug", "log_file"})

_ENV_OVERRIDES: list[tuple[str, str]] = [
    ("key_filename", "OTP_XOR_KEY_FILE"),
    ("debug", "OTP_XOR_DEBUG"),
    ("log_file", "OTP_XOR_LOG_FILE"),
]


@dataclass(frozen=True)
class RunConfig:
    key_filename: Path = field(default_factory=lambda: Path(DEFAULT_KEY_FILENAME))
    debug: bool = False
    log_file: Path = DEFAULT_LOG_FILE

    def key_path(self, cwd: Path | None = None) -> Path:
        """Resolve the key file; relative names are taken from *cwd*."""
        if self.key_filename.is_absolute():
            return self.key_filename
        return (cwd or Path.cwd()) / self.key_filename

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def global_config_path() -> Path:
    return CONFIG_DIR / "config.json"


def project_config_path(cwd: Path | None = None) -> Path:
    return (cwd or Path.cwd()) / PROJECT_CONFIG_NAME


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigError(path, "top-level value must be an object")
    return data


def _parse_bool(value: Any) -> bool | None:
    """Accept JSON booleans and "true"/"false" strings; anything else is ignored."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    logger.warning("Invalid debug value %r; ignoring", value)
    return None


def _apply_env_overrides(merged: Dict[str, Any]) -> None:
    """Environment variables override all config sources."""
    for config_key, env_var in _ENV_OVERRIDES:
        val = os.environ.get(env_var)
        if val:
            if config_key == "debug":
                debug = _parse_bool(val)
                if debug is not None:
                    merged[config_key] = debug
            else:
                merged[config_key] = val


def _to_run_config(merged: Dict[str, Any]) -> RunConfig:
    for key in merged.keys() - _KNOWN_KEYS:
        logger.debug("Ignoring unknown config key %r", key)

    cfg = RunConfig()
    if merged.get("key_filename"):
        cfg = replace(cfg, key_filename=Path(str(merged["key_filename"])))
    debug = _parse_bool(merged.get("debug"))
    if debug is not None:
        cfg = replace(cfg, debug=debug)
    if merged.get("log_file"):
        cfg = replace(cfg, log_file=Path(str(merged["log_file"])).expanduser())
    return cfg


def load_config(cwd: Path | None = None) -> RunConfig:
    """Load merged config: global → project → env vars."""
    merged: Dict[str, Any] = {**_read_json(global_config_path())}
    merged.update(_read_json(project_config_path(cwd)))
    _apply_env_overrides(merged)
    return _to_run_config(merged)
