"""Tests for environment-driven configuration."""

from __future__ import annotations

import importlib
from collections.abc import Generator

import pytest

from ethermint_proxy import config


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch, None, None]:
    """Clear proxy variables and restore the module after the test."""
    for name in (
        "PROXY_UPSTREAM_URL",
        "PROXY_DATABASE_PATH",
        "PROXY_PORT",
        "PROXY_POLL_INTERVAL",
        "PROXY_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    monkeypatch.undo()
    importlib.reload(config)


class TestDefaults:
    """Tests for values used when nothing is set."""

    def test_defaults(self, reload_config: pytest.MonkeyPatch) -> None:
        """Unset variables fall back to the devnet defaults."""
        importlib.reload(config)

        assert config.UPSTREAM_URL == "http://ethermint0:8545"
        assert config.DATABASE_PATH == "proxy.db"
        assert config.PORT == 8080
        assert config.POLL_INTERVAL == 4.0
        assert config.REQUEST_TIMEOUT == 10.0


class TestOverrides:
    """Tests for environment overrides."""

    def test_all_overrides(self, reload_config: pytest.MonkeyPatch) -> None:
        """Each variable replaces its default."""
        reload_config.setenv("PROXY_UPSTREAM_URL", "http://localhost:8545")
        reload_config.setenv("PROXY_DATABASE_PATH", "/data/proxy.db")
        reload_config.setenv("PROXY_PORT", "8545")
        reload_config.setenv("PROXY_POLL_INTERVAL", "2.5")
        reload_config.setenv("PROXY_REQUEST_TIMEOUT", "3")

        importlib.reload(config)

        assert config.UPSTREAM_URL == "http://localhost:8545"
        assert config.DATABASE_PATH == "/data/proxy.db"
        assert config.PORT == 8545
        assert config.POLL_INTERVAL == 2.5
        assert config.REQUEST_TIMEOUT == 3.0

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("PROXY_PORT", "http"),
            ("PROXY_PORT", "0"),
            ("PROXY_PORT", "70000"),
            ("PROXY_POLL_INTERVAL", "soon"),
            ("PROXY_POLL_INTERVAL", "0"),
            ("PROXY_REQUEST_TIMEOUT", "-1"),
        ],
    )
    def test_invalid_values_rejected(
        self,
        reload_config: pytest.MonkeyPatch,
        name: str,
        value: str,
    ) -> None:
        """Malformed numbers fail at import."""
        reload_config.setenv(name, value)

        with pytest.raises(ValueError, match=name):
            importlib.reload(config)
