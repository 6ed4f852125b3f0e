"""Tests for ColSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from colctl.config.discovery import CONFIG_ENV_VAR
from colctl.config.settings import ColSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv("COLCTL_SERVER__PORT", raising=False)
    monkeypatch.delenv("COLCTL_SERVER__HOST", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = ColSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.no_interact is False
        assert settings.server_address == ("localhost", 8080)
        assert settings.transport.timeout == 10.0

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ColSettings.from_cli(start=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "colctl.toml").write_text('[server]\nhost = "db.local"\nport = 5000\n')
        settings = ColSettings.from_cli(start=tmp_path)
        assert settings.server_address == ("db.local", 5000)
        assert settings.config_path == (tmp_path / "colctl.toml").resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[console]\necho_script = false\n")
        settings = ColSettings.from_cli(config_path=str(custom), start=tmp_path)
        assert settings.console.echo_script is False
        assert settings.config_path == custom

    def test_invalid_toml_is_click_error(self, tmp_path: Path) -> None:
        (tmp_path / "colctl.toml").write_text("[server\n")
        with pytest.raises(click.ClickException):
            ColSettings.from_cli(start=tmp_path)


class TestCliOverrides:
    def test_flags(self, tmp_path: Path) -> None:
        settings = ColSettings.from_cli(start=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True

    def test_port_override_keeps_toml_host(self, tmp_path: Path) -> None:
        (tmp_path / "colctl.toml").write_text('[server]\nhost = "db.local"\nport = 5000\n')
        settings = ColSettings.from_cli(start=tmp_path, port=6000)
        assert settings.server_address == ("db.local", 6000)

    def test_timeout_override(self, tmp_path: Path) -> None:
        (tmp_path / "colctl.toml").write_text("[transport]\npoll_interval = 0.05\n")
        settings = ColSettings.from_cli(start=tmp_path, timeout=1.5)
        assert settings.transport.timeout == 1.5
        assert settings.transport.poll_interval == 0.05


class TestEnvVars:
    def test_nested_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLCTL_SERVER__PORT", "7777")
        settings = ColSettings.from_cli(start=tmp_path)
        assert settings.server.port == 7777

    def test_cli_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLCTL_SERVER__HOST", "env.local")
        settings = ColSettings.from_cli(start=tmp_path, host="cli.local")
        assert settings.server.host == "cli.local"
