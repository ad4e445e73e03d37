"""
Tests for the repo-add database rebuild
"""

import os
from pathlib import Path

import pytest

from conftest import FakeExecutor
from prismrepo.common.errors import DatabaseError, FilesystemError
from prismrepo.models import Channel
from prismrepo.repo.database_manager import DatabaseManager


@pytest.fixture
def stable(make_config):
    repo_config = make_config()
    repo_config.repo_arch_dir.mkdir(parents=True)
    return repo_config


def test_repo_add_runs_in_channel_directory(stable, fake_executor):
    (stable.repo_arch_dir / "b-1-1-x86_64.pkg.tar.zst").write_bytes(b"b")
    (stable.repo_arch_dir / "a-1-1-x86_64.pkg.tar.zst").write_bytes(b"a")
    cwd_before = os.getcwd()

    count = DatabaseManager(stable, fake_executor).generate_database()

    assert count == 2
    cmd, cwd = fake_executor.calls[0]
    assert cmd == ["repo-add", "prismlinux.db.tar.gz", "a-1-1-x86_64.pkg.tar.zst", "b-1-1-x86_64.pkg.tar.zst"]
    assert cwd == stable.repo_arch_dir
    assert os.getcwd() == cwd_before


def test_symlinks_point_at_versioned_archives(stable, fake_executor):
    (stable.repo_arch_dir / "a-1-1-x86_64.pkg.tar.zst").write_bytes(b"a")

    DatabaseManager(stable, fake_executor).generate_database()

    db_link = stable.repo_arch_dir / "prismlinux.db"
    files_link = stable.repo_arch_dir / "prismlinux.files"
    assert db_link.is_symlink() and os.readlink(db_link) == "prismlinux.db.tar.gz"
    assert files_link.is_symlink() and os.readlink(files_link) == "prismlinux.files.tar.gz"
    assert db_link.read_text() == "a-1-1-x86_64.pkg.tar.zst"


def test_empty_repository_gets_placeholder_archives(stable, fake_executor):
    (stable.repo_arch_dir / "prismlinux.db.tar.gz").write_text("stale database")

    count = DatabaseManager(stable, fake_executor).generate_database()

    assert count == 0
    assert fake_executor.calls == []
    assert (stable.repo_arch_dir / "prismlinux.db.tar.gz").read_bytes() == b""
    assert (stable.repo_arch_dir / "prismlinux.files.tar.gz").read_bytes() == b""
    assert (stable.repo_arch_dir / "prismlinux.db").is_symlink()


def test_previous_symlinks_are_replaced(stable, fake_executor):
    os.symlink("elsewhere.db.tar.gz", stable.repo_arch_dir / "prismlinux.db")

    DatabaseManager(stable, fake_executor).generate_database()

    assert os.readlink(stable.repo_arch_dir / "prismlinux.db") == "prismlinux.db.tar.gz"


def test_testing_channel_uses_its_own_base_name(make_config, fake_executor):
    testing = make_config(channel=Channel.TESTING)
    testing.repo_arch_dir.mkdir(parents=True)
    (testing.repo_arch_dir / "a-2-1-x86_64.pkg.tar.zst").write_bytes(b"a")

    DatabaseManager(testing, fake_executor).generate_database()

    assert fake_executor.calls[0][0][1] == "prismlinux-testing.db.tar.gz"
    assert (testing.repo_arch_dir / "prismlinux-testing.files").is_symlink()


def test_repo_add_failure_is_fatal(stable):
    (stable.repo_arch_dir / "a-1-1-x86_64.pkg.tar.zst").write_bytes(b"a")
    with pytest.raises(DatabaseError, match="invalid package"):
        DatabaseManager(stable, FakeExecutor(fail_repo_add=True)).generate_database()


def test_missing_repo_add_is_fatal(stable):
    (stable.repo_arch_dir / "a-1-1-x86_64.pkg.tar.zst").write_bytes(b"a")
    with pytest.raises(DatabaseError):
        DatabaseManager(stable, FakeExecutor(missing_repo_add=True)).generate_database()


def test_symlink_failure_is_only_a_warning(stable, fake_executor, monkeypatch, caplog):
    def refuse(src, dst):
        raise OSError("symlinks not supported")

    monkeypatch.setattr(os, "symlink", refuse)

    assert DatabaseManager(stable, fake_executor).generate_database() == 0
    assert "Failed to create symlink prismlinux.db" in caplog.text


def refuse_unlink_of(monkeypatch, blocked_name):
    real_unlink = Path.unlink

    def unlink(self, missing_ok=False):
        if self.name == blocked_name:
            raise PermissionError("read-only")
        return real_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", unlink)


def test_undeletable_archive_is_fatal_before_repo_add(stable, fake_executor, monkeypatch):
    (stable.repo_arch_dir / "a-1-1-x86_64.pkg.tar.zst").write_bytes(b"a")
    (stable.repo_arch_dir / "prismlinux.db.tar.gz").write_text("stale database")
    refuse_unlink_of(monkeypatch, "prismlinux.db.tar.gz")

    with pytest.raises(FilesystemError, match="prismlinux.db.tar.gz"):
        DatabaseManager(stable, fake_executor).generate_database()
    assert fake_executor.calls == []


def test_undeletable_symlink_is_only_a_warning(stable, fake_executor, monkeypatch, caplog):
    os.symlink("prismlinux.db.tar.gz", stable.repo_arch_dir / "prismlinux.db")
    refuse_unlink_of(monkeypatch, "prismlinux.db")

    assert DatabaseManager(stable, fake_executor).generate_database() == 0
    assert "Failed to remove prismlinux.db" in caplog.text
    assert (stable.repo_arch_dir / "prismlinux.db.tar.gz").read_bytes() == b""
