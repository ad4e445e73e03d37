"""
Database manager for repository database operations
"""

import os
import subprocess
import logging
from pathlib import Path
from typing import List, Optional

from prismrepo import config
from prismrepo.common.config_loader import RepoConfig
from prismrepo.common.errors import DatabaseError, FilesystemError
from prismrepo.common.shell_executor import ShellExecutor
from prismrepo.repo.reconciler import list_local_packages

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Regenerates the pacman database of one channel from the files on disk"""

    def __init__(self, repo_config: RepoConfig, executor: Optional[ShellExecutor] = None):
        self.repo_config = repo_config
        self.repo_arch_dir = Path(repo_config.repo_arch_dir)
        self.executor = executor or ShellExecutor(repo_config.debug)

    def remove_database_files(self) -> List[str]:
        """
        Remove versioned archives and symlinks of this channel's base name.

        A leftover archive would be patched by repo-add instead of rebuilt,
        so failing to remove one is fatal; a stale symlink is only a warning.

        Raises:
            FilesystemError: a .db.tar.gz / .files.tar.gz archive cannot be removed
        """
        archives = (self.repo_config.db_name, self.repo_config.files_name)
        removed = []
        for name in self.repo_config.database_files:
            path = self.repo_arch_dir / name
            if not (path.exists() or path.is_symlink()):
                continue
            try:
                path.unlink()
            except OSError as e:
                if name in archives:
                    raise FilesystemError(f"failed to remove database archive {name}: {e}") from e
                logger.warning(f"⚠️ Failed to remove {name}: {e}")
                continue
            logger.debug(f"  -> Removed database file: {name}")
            removed.append(name)
        return removed

    def _run_repo_add(self, packages: List[str]):
        cmd = config.REPO_ADD_COMMAND + [self.repo_config.db_name] + packages
        show_output = self.repo_config.debug or self.repo_config.verbose
        try:
            self.executor.run_command(cmd, cwd=self.repo_arch_dir, capture=not show_output, check=True)
        except FileNotFoundError as e:
            raise DatabaseError(f"failed to run repo-add: {e}") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or '').strip()
            raise DatabaseError(f"failed to run repo-add (exit {e.returncode}){': ' + detail if detail else ''}") from e
        except subprocess.TimeoutExpired as e:
            raise DatabaseError(f"repo-add timed out after {e.timeout} seconds") from e

    def _write_empty_database(self):
        for name in (self.repo_config.db_name, self.repo_config.files_name):
            try:
                (self.repo_arch_dir / name).write_bytes(b'')
            except OSError as e:
                raise FilesystemError(f"failed to write empty database {name}: {e}") from e

    def _refresh_symlinks(self):
        links = (
            (self.repo_config.db_link, self.repo_config.db_name),
            (self.repo_config.files_link, self.repo_config.files_name),
        )
        for link_name, target in links:
            link = self.repo_arch_dir / link_name
            try:
                if link.exists() or link.is_symlink():
                    link.unlink()
                os.symlink(target, link)
            except OSError as e:
                logger.warning(f"⚠️ Failed to create symlink {link_name} -> {target}: {e}")

    def generate_database(self) -> int:
        """
        Rebuild the database in full from the package files on disk.

        Returns:
            Number of packages in the database

        Raises:
            FilesystemError: channel directory unreadable
            DatabaseError: repo-add failed while packages are present
        """
        logger.debug(f"Removing old database files for: {self.repo_config.db_base_name}")
        self.remove_database_files()

        packages = [p.name for p in list_local_packages(self.repo_arch_dir)]

        if packages:
            self._run_repo_add(packages)
            logger.info(f"Updated repository database {self.repo_config.db_name} with {len(packages)} packages")
        else:
            self._write_empty_database()
            logger.info("Created empty repository database")

        self._refresh_symlinks()
        return len(packages)
