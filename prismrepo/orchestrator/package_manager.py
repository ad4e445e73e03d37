"""
Package Manager Module - Main orchestrator for the sync, clean and status modes
"""

import logging
import time
from pathlib import Path
from typing import Optional

import requests

from prismrepo import config
from prismrepo.common.config_loader import ConfigLoader, RepoConfig
from prismrepo.common.errors import FilesystemError, RepositoryError
from prismrepo.common.format_utils import format_size
from prismrepo.common.shell_executor import ShellExecutor
from prismrepo.repo.cleanup_manager import CleanupManager
from prismrepo.repo.database_manager import DatabaseManager
from prismrepo.repo.metadata_extractor import MetadataExtractor
from prismrepo.repo.package_set import build_desired_set
from prismrepo.repo.reconciler import Reconciler, list_local_packages
from prismrepo.sources.gitlab_client import GitLabClient
from prismrepo.sources.release_selector import ReleaseSelector
from prismrepo.sources.source_resolver import SourceResolver

logger = logging.getLogger(__name__)


class PackageManager:
    """Runs one pass of a mode for the configured channel"""

    def __init__(self, repo_config: RepoConfig, session: Optional[requests.Session] = None,
                 executor: Optional[ShellExecutor] = None):
        self.repo_config = repo_config
        self.session = session or requests.Session()
        self.executor = executor or ShellExecutor(repo_config.debug)

        self.gitlab_client = None
        if repo_config.gitlab_token:
            self.gitlab_client = GitLabClient(repo_config.gitlab_token, repo_config.gitlab_url, self.session)
            logger.debug("GitLab client initialized successfully")
        else:
            logger.debug("No GitLab token provided - will only process remote URLs")

        self.release_selector = ReleaseSelector(self.gitlab_client)
        self.source_resolver = SourceResolver()
        self.reconciler = Reconciler(repo_config.repo_arch_dir, self.session, force=repo_config.force)
        self.database_manager = DatabaseManager(repo_config, self.executor)
        self.metadata_extractor = MetadataExtractor(repo_config, self.executor)
        self.cleanup_manager = CleanupManager(repo_config)

    def create_directories(self):
        for directory in (self.repo_config.repo_arch_dir, self.repo_config.api_dir):
            try:
                Path(directory).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(f"failed to create directory {directory}: {e}") from e

    def sync_packages(self) -> int:
        """
        Reconcile the channel with the declared sources.

        Returns:
            Exit code (0 on success, also when the config template was just created)
        """
        channel = self.repo_config.channel
        start = time.time()

        packages_config = ConfigLoader.load_packages_config(self.repo_config.packages_config_file)
        if packages_config is None:
            return 0

        self.create_directories()
        logger.info(f"Syncing packages for repository: {channel.value}")

        forge_packages = self.release_selector.resolve(packages_config.forge_projects, channel)
        direct_packages = self.source_resolver.resolve(packages_config.remote_urls, channel)
        desired = build_desired_set(forge_packages, direct_packages)

        result = self.reconciler.reconcile(desired)
        package_count = self.database_manager.generate_database()
        self.metadata_extractor.generate_packages_json()

        logger.info(
            f"Sync finished in {time.time() - start:.1f}s: {package_count} packages, "
            f"{len(result.downloaded)} downloaded, {len(result.removed)} removed, {len(result.failed)} failed"
        )

        if result.failed and self.repo_config.strict_downloads:
            logger.error(f"❌ Downloads failed: {', '.join(result.failed)}")
            return 1

        logger.info("Package management completed successfully.")
        return 0

    def clean(self) -> int:
        logger.info(f"Starting cleanup mode for {self.repo_config.channel.value} repository...")
        logger.info(f"Database: {self.repo_config.db_base_name}")
        self.cleanup_manager.clean()
        logger.info("All packages and repository files have been removed successfully.")
        return 0

    def show_status(self) -> int:
        """Print the channel's state; never modifies anything"""
        cfg = self.repo_config
        print("=== PrismLinux Repository Structure ===")
        print()
        print(f"Current mode: {cfg.channel.value} repository")
        print(f"Database name: {cfg.db_base_name}")
        print(f"Architecture directory: {cfg.repo_arch_dir}")
        print(f"API directory: {cfg.api_dir}")
        if cfg.project_id:
            print(f"Project ID: {cfg.project_id}")
        print()

        if cfg.repo_arch_dir.is_dir():
            packages = list_local_packages(cfg.repo_arch_dir)
            print(f"=== Packages in {cfg.channel.value} repository ===")
            for pkg in packages:
                print(f"  {pkg.name} ({format_size(pkg.stat().st_size)})")
            if packages:
                print(f"  Total: {len(packages)} packages")
            else:
                print("  No packages found")
        else:
            print(f"Repository directory does not exist: {cfg.repo_arch_dir}")
        print()

        print("=== Database Files ===")
        for name in cfg.database_files:
            path = cfg.repo_arch_dir / name
            if not (path.exists() or path.is_symlink()):
                continue
            link_info = f" -> {path.readlink()}" if path.is_symlink() else ""
            size = path.stat().st_size if path.exists() else 0
            print(f"  {name} ({format_size(size)}){link_info}")
        print()

        print("=== API Files ===")
        for name in config.API_FILES:
            path = cfg.api_dir / name
            if path.is_file():
                print(f"  {name} ({format_size(path.stat().st_size)})")
            else:
                print(f"  {name} (not found)")
        print()

        if cfg.packages_config_file.is_file():
            size = format_size(cfg.packages_config_file.stat().st_size)
            print(f"Configuration file: {cfg.packages_config_file} ({size})")
        else:
            print(f"Configuration file: {cfg.packages_config_file} (not found)")
        return 0

    def run(self, mode: str = "sync") -> int:
        """Run one mode and translate failures into an exit code"""
        handlers = {
            "sync": self.sync_packages,
            "clean": self.clean,
            "status": self.show_status,
        }
        try:
            return handlers[mode]()
        except RepositoryError as e:
            logger.error(f"❌ {mode} failed: {e}")
            return 1
        except Exception as e:
            logger.exception(f"❌ Unexpected error during {mode}: {e}")
            return 1
