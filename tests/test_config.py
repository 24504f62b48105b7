"""Tests for Settings loading."""

import pytest
from pydantic import ValidationError

from rrdcached.config import Settings
from rrdcached.protocol.constants import DEFAULT_TIMEOUT


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("ADDRESS", "UNIX", "TIMEOUT", "LOG_LEVEL"):
            monkeypatch.delenv(f"RRDCACHED_{name}", raising=False)
        s = Settings(_env_file=None)
        assert s.address == "localhost"
        assert s.unix is False
        assert s.timeout == DEFAULT_TIMEOUT
        assert s.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RRDCACHED_ADDRESS", "/run/rrdcached.sock")
        monkeypatch.setenv("RRDCACHED_UNIX", "true")
        monkeypatch.setenv("RRDCACHED_TIMEOUT", "2.5")
        monkeypatch.setenv("RRDCACHED_LOG_LEVEL", "debug")
        s = Settings(_env_file=None)
        assert s.address == "/run/rrdcached.sock"
        assert s.unix is True
        assert s.timeout == 2.5
        assert s.log_level == "DEBUG"

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RRDCACHED_ADDRESS", raising=False)
        env = tmp_path / "client.conf"
        env.write_text("RRDCACHED_ADDRESS=rrd.example.org:1234\nOTHER_SETTING=x\n")
        s = Settings(_env_file=str(env))
        assert s.address == "rrd.example.org:1234"

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(ValidationError, match="timeout must be positive"):
            Settings(timeout=timeout, _env_file=None)
