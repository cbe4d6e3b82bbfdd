from __future__ import annotations

import logging

import pytest

from otp_xor.logging_setup import _PACKAGE


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch):
    """Keep config and log files out of the real home directory."""
    monkeypatch.setattr("otp_xor.config.CONFIG_DIR", tmp_path / "global-config")
    monkeypatch.setenv("OTP_XOR_LOG_FILE", str(tmp_path / "logs" / "otp-xor.log"))
    for var in ("OTP_XOR_KEY_FILE", "OTP_XOR_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    yield
    pkg = logging.getLogger(_PACKAGE)
    for handler in pkg.handlers:
        handler.close()
    pkg.handlers.clear()
    pkg.setLevel(logging.NOTSET)
    pkg.propagate = True
