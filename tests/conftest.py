"""
Shared fixtures: fake HTTP session, fake repo-add/pacman executor, configs
"""

import subprocess
from pathlib import Path

import pytest
import requests

from prismrepo.common.config_loader import ConfigLoader
from prismrepo.models import Channel

GITLAB = "https://gitlab.example.com"


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, content=b"", json_data=None, fail_after_first_chunk=False):
        self.status_code = status_code
        self.content = content
        self._json = json_data
        self.fail_after_first_chunk = fail_after_first_chunk

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._json is None:
            raise ValueError("no JSON")
        return self._json

    def iter_content(self, chunk_size=1):
        if self.fail_after_first_chunk:
            yield self.content[:4]
            raise requests.exceptions.ConnectionError("connection reset")
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]


class FakeSession:
    """
    Routes GET requests by URL.

    A route is a FakeResponse, an exception instance (raised), or a
    callable receiving the query params and returning a FakeResponse.
    Unknown URLs answer 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, stream=False, timeout=None):
        self.calls.append((url, dict(params or {})))
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(404)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(params or {})
        return route

    def urls(self):
        return [url for url, _ in self.calls]


def paged(releases, per_page=100):
    """Route serving releases page by page, then an empty page"""
    def handler(params):
        page = int(params.get("page", 1))
        size = int(params.get("per_page", per_page))
        start = (page - 1) * size
        return FakeResponse(200, json_data=releases[start:start + size])
    return handler


def releases_url(project_id):
    return f"{GITLAB}/api/v4/projects/{project_id}/releases"


def make_release(name, created_at, assets):
    return {
        "name": name,
        "tag_name": name,
        "created_at": created_at,
        "assets": {"links": [{"name": n, "url": u} for n, u in assets]},
    }


PACMAN_INFO = """Name            : {name}
Version         : 1.0-1
Description     : Test package {name}
Architecture    : x86_64
URL             : https://example.com
Licenses        : MIT
Groups          : None
Depends On      : glibc  bash
Build Date      : Mon 01 Jan 2024 12:00:00 PM UTC
"""


class FakeExecutor:
    """
    Stands in for ShellExecutor.

    repo-add writes the database archive listing the given packages;
    pacman -Qip prints package info unless the file starts with b"BROKEN".
    """

    def __init__(self, fail_repo_add=False, missing_repo_add=False):
        self.fail_repo_add = fail_repo_add
        self.missing_repo_add = missing_repo_add
        self.calls = []

    def run_command(self, cmd, cwd=None, capture=True, check=True, extra_env=None):
        cmd = [str(c) for c in cmd]
        self.calls.append((cmd, cwd))

        if cmd[0] == "repo-add":
            if self.missing_repo_add:
                raise FileNotFoundError(2, "No such file or directory", "repo-add")
            if self.fail_repo_add:
                raise subprocess.CalledProcessError(1, cmd, "", "==> ERROR: invalid package")
            db_name, packages = cmd[1], cmd[2:]
            base = db_name[:-len(".db.tar.gz")]
            Path(cwd, db_name).write_text("\n".join(packages))
            Path(cwd, f"{base}.files.tar.gz").write_text("\n".join(packages))
            return subprocess.CompletedProcess(cmd, 0, "", "")

        if cmd[:2] == ["pacman", "-Qip"]:
            path = Path(cmd[2])
            if path.read_bytes().startswith(b"BROKEN"):
                raise subprocess.CalledProcessError(1, cmd, "", "error: could not load package")
            name = path.name.split("-")[0]
            return subprocess.CompletedProcess(cmd, 0, PACMAN_INFO.format(name=name), "")

        raise AssertionError(f"unexpected command {cmd}")

    def commands(self, tool):
        return [cmd for cmd, _ in self.calls if cmd[0] == tool]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def make_config(tmp_path, monkeypatch):
    """Build a RepoConfig rooted in tmp_path"""
    for var in ("GITLAB_TOKEN", "CI_PROJECT_ID", "GITLAB_URL", "FORCE_REBUILD"):
        monkeypatch.delenv(var, raising=False)

    def factory(channel=Channel.STABLE, token="secret", **kwargs):
        testing = channel is Channel.TESTING
        arch_dir = tmp_path / ("testing/x86_64" if testing else "x86_64")
        params = dict(
            repo_name="prismlinux",
            architecture="x86_64",
            repo_arch_dir=str(arch_dir),
            api_dir=str(tmp_path / "api"),
            gitlab_token=token,
            gitlab_url=GITLAB,
            testing=testing,
            packages_config_file=str(tmp_path / "packages_config.yaml"),
        )
        params.update(kwargs)
        return ConfigLoader.build_repo_config(**params)

    return factory
