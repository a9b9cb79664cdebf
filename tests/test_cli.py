"""Tests for the command-line front end."""

import json
from urllib.parse import unquote

import pytest

from unixdock.cli import run_cli


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.delenv("DOCKER_HOST", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))


def cli(engine, *args):
    return run_cli([*args, "--socket", engine.socket_path])


class TestImagesCommands:
    """Image actions."""

    def test_images(self, engine, capsys):
        """images prints one row per tag."""
        engine.respond("GET", "/images/json", 200, [
            {"Id": "sha256:0123456789abcdef", "RepoTags": ["a:1", "a:2"], "Size": 2500000},
        ])
        assert cli(engine, "images") == 0
        out = capsys.readouterr().out
        assert "a:1" in out and "a:2" in out
        assert "0123456789ab" in out
        assert "2.5MB" in out

    def test_images_filters(self, engine):
        """Repeated --filter values for one key are grouped."""
        engine.respond("GET", "/images/json", 200, [])
        assert cli(engine, "images", "--filter", "label=a", "--filter", "label=b", "--filter", "dangling=true") == 0
        value = engine.last.query.split("=", 1)[1]
        assert json.loads(unquote(value)) == {"label": ["a", "b"], "dangling": ["true"]}

    def test_unknown_filter(self, engine):
        """Unknown filter keys exit with status 1."""
        assert cli(engine, "images", "--filter", "bogus=1") == 1
        assert engine.requests == []

    def test_inspect(self, engine, capsys):
        """inspect prints the details as JSON with wire keys."""
        engine.respond("GET", "/images/alpine/json", 200, {"Id": "sha256:1", "Os": "linux"})
        assert cli(engine, "inspect", "alpine") == 0
        assert json.loads(capsys.readouterr().out)["Os"] == "linux"

    def test_rm(self, engine, capsys):
        """rm reports untagged and deleted references."""
        engine.respond("DELETE", "/images/abc", 200, [{"Untagged": "abc:latest"}, {"Deleted": "sha256:abc"}])
        assert cli(engine, "rm", "abc", "--force") == 0
        out = capsys.readouterr().out
        assert "Untagged: abc:latest" in out
        assert "Deleted: sha256:abc" in out
        assert engine.last.query == "force=true&noprune=false"

    def test_api_error_exit_status(self, engine, caplog):
        """Engine errors are logged and exit with status 1."""
        engine.respond("DELETE", "/images/abc", 404, {"message": "No such image: abc"})
        assert cli(engine, "rm", "abc") == 1
        assert "No such image: abc" in caplog.text

    def test_tag(self, engine, capsys):
        """tag passes --repo and --tag and confirms on stdout."""
        engine.respond("POST", "/images/abc/tag", 201, b"")
        assert cli(engine, "tag", "abc", "--repo", "me/abc", "--tag", "v1") == 0
        assert engine.last.query == "repo=me/abc&tag=v1"
        assert "Tagged abc as me/abc:v1" in capsys.readouterr().out

    def test_search(self, engine, capsys):
        """search sends filters and prints results."""
        engine.respond("GET", "/images/search", 200, [
            {"name": "nginx", "description": "web", "is_official": True, "is_automated": False, "star_count": 9},
        ])
        assert cli(engine, "search", "nginx", "--official", "--stars", "3") == 0
        assert "nginx" in capsys.readouterr().out
        assert "filters=" in engine.last.query

    def test_build(self, engine, tmp_path, capsys):
        """build prints stream output and sends build args."""
        (tmp_path / "Dockerfile").write_text("FROM alpine\n")
        engine.respond("POST", "/build", 200, b'{"stream":"Step 1/1 : FROM alpine\\n"}\n')
        assert cli(engine, "build", str(tmp_path), "-t", "app:1", "--build-arg", "V=1") == 0
        assert "Step 1/1 : FROM alpine" in capsys.readouterr().out
        assert engine.last.query.startswith("t=app:1&buildargs=")

    def test_save(self, engine, tmp_path, capsys):
        """save writes the exported tarball and confirms on stdout."""
        engine.respond("GET", "/images/alpine/get", 200, b"TAR")
        target = tmp_path / "out.tar"
        assert cli(engine, "save", "alpine", "-o", str(target)) == 0
        assert target.read_bytes() == b"TAR"
        assert f"Saved alpine to {target}" in capsys.readouterr().out

    def test_missing_name(self, engine):
        """Actions needing a name reject a missing one."""
        with pytest.raises(SystemExit):
            cli(engine, "inspect")

    def test_images_rejects_name(self, engine):
        """images has no sub-commands, so a stray NAME is an error."""
        with pytest.raises(SystemExit):
            cli(engine, "images", "ls")
        assert engine.requests == []

    def test_push_requires_registry(self, engine):
        """push needs --registry."""
        with pytest.raises(SystemExit):
            cli(engine, "push", "app")

    def test_unreachable_socket(self, socket_dir):
        """An unreachable socket exits with status 1."""
        assert run_cli(["images", "--socket", f"{socket_dir}/none.sock"]) == 1
