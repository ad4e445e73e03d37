"""
Cleanup Manager Module - Resets a channel without touching the configuration

Used by the clean command: removes every package file, the database
archives and symlinks, and writes empty metadata.
"""

import logging
from pathlib import Path
from typing import List

from prismrepo.common.config_loader import RepoConfig
from prismrepo.common.errors import FilesystemError
from prismrepo.repo.database_manager import DatabaseManager
from prismrepo.repo.metadata_extractor import MetadataExtractor
from prismrepo.repo.reconciler import list_local_packages

logger = logging.getLogger(__name__)


class CleanupManager:
    """Removes all repository content of one channel"""

    def __init__(self, repo_config: RepoConfig):
        self.repo_config = repo_config
        self.repo_arch_dir = Path(repo_config.repo_arch_dir)

    def remove_all_packages(self) -> List[str]:
        """
        Delete every package file in the channel directory.

        A missing directory means there is nothing to clean.

        Raises:
            FilesystemError: directory unreadable or a file cannot be deleted
        """
        logger.info("Removing all package files...")
        if not self.repo_arch_dir.exists():
            logger.info("Repository directory doesn't exist, nothing to clean.")
            return []

        removed = []
        for path in list_local_packages(self.repo_arch_dir):
            logger.debug(f"  -> Removing package: {path.name}")
            try:
                path.unlink()
            except OSError as e:
                raise FilesystemError(f"failed to remove package {path.name}: {e}") from e
            removed.append(path.name)

        logger.info(f"Removed {len(removed)} package files")
        return removed

    def remove_repository_database(self) -> List[str]:
        """Delete database archives and symlinks"""
        logger.info("Removing repository database files...")
        if not self.repo_arch_dir.exists():
            return []
        removed = DatabaseManager(self.repo_config).remove_database_files()
        logger.info(f"Removed {len(removed)} database files")
        return removed

    def create_empty_packages_json(self):
        """Write [] to the channel's metadata file"""
        logger.info("Creating empty API files...")
        MetadataExtractor(self.repo_config).write_outputs([])
        logger.info(f"Created empty {self.repo_config.api_file.name}")

    def clean(self):
        self.remove_all_packages()
        self.remove_repository_database()
        self.create_empty_packages_json()
