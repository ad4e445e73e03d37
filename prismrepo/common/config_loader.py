"""
Config Loader Module - Builds the run configuration and loads packages_config.yaml
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml

from prismrepo import config
from prismrepo.common.errors import ConfigurationError
from prismrepo.models import Channel, PackagesConfig

logger = logging.getLogger(__name__)


@dataclass
class RepoConfig:
    """Settings for one invocation; exactly one channel is active"""
    repo_name: str
    architecture: str
    channel: Channel
    repo_arch_dir: Path
    api_dir: Path
    packages_config_file: Path
    gitlab_token: Optional[str] = None
    gitlab_url: str = config.GITLAB_URL
    project_id: Optional[str] = None
    debug: bool = False
    verbose: bool = False
    force: bool = False
    strict_downloads: bool = False

    @property
    def testing(self) -> bool:
        return self.channel is Channel.TESTING

    @property
    def db_base_name(self) -> str:
        if self.testing:
            return f"{self.repo_name}{config.TESTING_SUFFIX}"
        return self.repo_name

    @property
    def db_name(self) -> str:
        return f"{self.db_base_name}.db.tar.gz"

    @property
    def files_name(self) -> str:
        return f"{self.db_base_name}.files.tar.gz"

    @property
    def db_link(self) -> str:
        return f"{self.db_base_name}.db"

    @property
    def files_link(self) -> str:
        return f"{self.db_base_name}.files"

    @property
    def database_files(self) -> List[str]:
        """Every database file name of this channel, symlinks included"""
        return [self.db_link, self.db_name, self.files_link, self.files_name]

    @property
    def api_file(self) -> Path:
        return self.api_dir / f"{self.channel.value}.json"

    @property
    def stats_file(self) -> Path:
        return self.api_dir / f"{self.channel.value}-stats.json"


class ConfigLoader:
    """Handles configuration loading and validation"""

    @staticmethod
    def build_repo_config(repo_name: Optional[str] = None,
                          architecture: Optional[str] = None,
                          repo_arch_dir: Optional[str] = None,
                          api_dir: Optional[str] = None,
                          gitlab_token: Optional[str] = None,
                          gitlab_url: Optional[str] = None,
                          project_id: Optional[str] = None,
                          testing: bool = False,
                          debug: bool = False,
                          verbose: bool = False,
                          packages_config_file: Optional[str] = None,
                          force: bool = False,
                          strict_downloads: bool = False) -> RepoConfig:
        """
        Resolve the run configuration.

        Precedence: explicit value > environment variable > config.py default.
        The channel directory defaults to <arch> for stable and
        testing/<arch> for testing.
        """
        repo_name = repo_name or config.REPO_NAME
        architecture = architecture or config.ARCHITECTURE
        channel = Channel.TESTING if testing else Channel.STABLE

        if not repo_arch_dir:
            if channel is Channel.TESTING:
                repo_arch_dir = os.path.join(config.TESTING_DIR, architecture)
            else:
                repo_arch_dir = architecture

        if not force:
            force = os.getenv(config.ENV_FORCE_REBUILD, '').lower() == 'true'

        repo_config = RepoConfig(
            repo_name=repo_name,
            architecture=architecture,
            channel=channel,
            repo_arch_dir=Path(repo_arch_dir),
            api_dir=Path(api_dir or config.API_DIR),
            packages_config_file=Path(packages_config_file or config.PACKAGES_CONFIG_FILE),
            gitlab_token=gitlab_token or os.getenv(config.ENV_GITLAB_TOKEN) or None,
            gitlab_url=(gitlab_url or os.getenv(config.ENV_GITLAB_URL) or config.GITLAB_URL).rstrip('/'),
            project_id=project_id or os.getenv(config.ENV_PROJECT_ID) or None,
            debug=debug,
            verbose=verbose,
            force=force,
            strict_downloads=strict_downloads,
        )

        logger.debug(
            f"Config initialized: repo={repo_config.repo_name}, db={repo_config.db_base_name}, "
            f"target={repo_config.channel.value}, dir={repo_config.repo_arch_dir}"
        )
        return repo_config

    @staticmethod
    def write_default_packages_config(path: Path):
        """Write the example packages configuration"""
        try:
            with open(path, 'w') as f:
                yaml.safe_dump(config.DEFAULT_PACKAGES_CONFIG, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigurationError(f"failed to create default config {path}: {e}") from e

    @staticmethod
    def load_packages_config(path: Path) -> Optional[PackagesConfig]:
        """
        Load the declared package sources.

        Returns:
            PackagesConfig, or None when the file did not exist. In that case
            a template is written and the caller treats the run as a no-op.

        Raises:
            ConfigurationError: file unreadable or not valid YAML
        """
        path = Path(path)
        if not path.exists():
            ConfigLoader.write_default_packages_config(path)
            logger.warning(f"Created default config file: {path}")
            logger.warning("Please edit the config file and run the command again.")
            return None

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"failed to read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"failed to parse config file {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(f"config file {path} must contain a mapping")

        packages_config = PackagesConfig.from_dict(data)
        logger.debug(
            f"Loaded {len(packages_config.forge_projects)} forge projects and "
            f"{len(packages_config.remote_urls)} remote URLs from {path}"
        )
        return packages_config
