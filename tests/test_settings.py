"""Tests for settings and socket path resolution."""

import json

import pytest

from unixdock import DockerClient
from unixdock.settings import DEFAULT_SOCKET_PATH, Settings, resolve_socket_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("DOCKER_HOST", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))


class TestSettings:
    """Settings load/save."""

    def test_defaults(self, tmp_path):
        """Without a file the built-in defaults apply."""
        settings = Settings(str(tmp_path / "missing.json"))
        assert settings.get("docker_socket_path") == ""
        assert settings.get("timeout") is None
        assert settings.get("log_level") == "WARNING"

    def test_user_settings_path(self, tmp_path):
        """The user file lives under XDG_CONFIG_HOME."""
        assert Settings.get_user_settings_path() == str(tmp_path / "config" / "unixdock" / "settings.json")

    def test_file_overrides_defaults(self, tmp_path):
        """Values from the file are merged over defaults."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"timeout": 30, "extra": 1}))
        settings = Settings(str(path))
        assert settings.get("timeout") == 30
        assert settings.get("extra") == 1
        assert settings.get("log_level") == "WARNING"

    def test_invalid_file(self, tmp_path, caplog):
        """An unreadable file falls back to defaults with a warning."""
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        settings = Settings(str(path))
        assert settings.get("timeout") is None
        assert "Could not load settings" in caplog.text

    def test_non_object_file(self, tmp_path, caplog):
        """A JSON file that is not an object is ignored."""
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        assert Settings(str(path)).get("log_level") == "WARNING"
        assert "not a JSON object" in caplog.text

    def test_save_and_reload(self, tmp_path):
        """Saved settings are read back, creating parent directories."""
        path = tmp_path / "nested" / "settings.json"
        settings = Settings(str(path))
        settings.set("docker_socket_path", "/tmp/x.sock")
        settings.save()
        assert Settings(str(path)).get("docker_socket_path") == "/tmp/x.sock"


class TestResolveSocketPath:
    """resolve_socket_path precedence."""

    def test_explicit_wins(self, monkeypatch):
        """An explicit path beats everything else."""
        monkeypatch.setenv("DOCKER_HOST", "unix:///env.sock")
        assert resolve_socket_path("unix:///explicit.sock") == "/explicit.sock"

    def test_docker_host(self, monkeypatch):
        """unix:// DOCKER_HOST is used when no path is given."""
        monkeypatch.setenv("DOCKER_HOST", "unix:///run/user/1000/docker.sock")
        assert resolve_socket_path() == "/run/user/1000/docker.sock"

    def test_tcp_docker_host_ignored(self, monkeypatch, caplog):
        """Non-unix DOCKER_HOST values are ignored with a warning."""
        monkeypatch.setenv("DOCKER_HOST", "tcp://127.0.0.1:2375")
        monkeypatch.setattr("unixdock.settings.platform.system", lambda: "Linux")
        assert resolve_socket_path() == DEFAULT_SOCKET_PATH
        assert "only unix://" in caplog.text

    def test_settings_file(self, tmp_path):
        """The settings file is used before the platform default."""
        settings = Settings(str(tmp_path / "s.json"))
        settings.set("docker_socket_path", "/srv/docker.sock")
        assert resolve_socket_path(settings=settings) == "/srv/docker.sock"

    def test_platform_default(self, monkeypatch):
        """Linux falls back to /var/run/docker.sock."""
        monkeypatch.setattr("unixdock.settings.platform.system", lambda: "Linux")
        assert resolve_socket_path() == DEFAULT_SOCKET_PATH

    def test_client_uses_settings(self, tmp_path):
        """DockerClient takes socket path and timeout from settings."""
        settings = Settings(str(tmp_path / "s.json"))
        settings.set("docker_socket_path", "/srv/docker.sock")
        settings.set("timeout", 12)
        client = DockerClient(settings=settings)
        assert client.socket_path == "/srv/docker.sock"
        assert client.http.timeout == 12
