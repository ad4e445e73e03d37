"""
Metadata Extractor - Builds the JSON package list consumed by the web front end
"""

import json
import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from prismrepo import config
from prismrepo.common.config_loader import RepoConfig
from prismrepo.common.errors import FilesystemError
from prismrepo.common.format_utils import format_size
from prismrepo.common.shell_executor import ShellExecutor
from prismrepo.models import PackageRecord, RepositoryStats
from prismrepo.repo.reconciler import list_local_packages

logger = logging.getLogger(__name__)

# pacman -Qip field -> PackageRecord attribute
FIELD_MAP = {
    "Name": "name",
    "Version": "version",
    "Description": "description",
    "Architecture": "architecture",
    "Depends On": "depends",
    "Groups": "groups",
}

MODIFIED_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_package_info(output: str) -> Dict[str, str]:
    """
    Parse 'Key : value' lines printed by pacman -Qip.

    Only keys listed in FIELD_MAP are returned, keyed by attribute name.
    Continuation lines and unknown keys are ignored.
    """
    fields = {}
    for line in output.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        attr = FIELD_MAP.get(key.strip())
        if attr and attr not in fields:
            fields[attr] = value.strip()
    return fields


def write_json(path: Path, data):
    """Write indented JSON; failure is fatal for the run"""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise FilesystemError(f"failed to write {path.name}: {e}") from e


class MetadataExtractor:
    """Runs the package inspection tool over a channel and exports the results"""

    def __init__(self, repo_config: RepoConfig, executor: Optional[ShellExecutor] = None):
        self.repo_config = repo_config
        self.executor = executor or ShellExecutor(repo_config.debug)

    def extract_package_info(self, pkg_path: Path) -> PackageRecord:
        """
        Inspect one package file.

        Raises:
            ValueError: the tool failed or printed nothing recognisable
            OSError: the file cannot be stat'ed
        """
        try:
            result = self.executor.run_command(config.PACKAGE_INFO_COMMAND + [str(pkg_path)], check=True)
        except (OSError, subprocess.SubprocessError) as e:
            raise ValueError(f"pacman -Qip failed: {e}") from e

        fields = parse_package_info(result.stdout or "")
        if not fields:
            raise ValueError("no package fields in pacman output")

        stat = pkg_path.stat()
        return PackageRecord(
            filename=pkg_path.name,
            size=str(stat.st_size),
            modified=datetime.fromtimestamp(stat.st_mtime).strftime(MODIFIED_FORMAT),
            channel=self.repo_config.channel.value,
            **fields,
        )

    def collect(self) -> List[PackageRecord]:
        """Records for every package on disk; failing packages are skipped"""
        records = []
        for pkg_path in list_local_packages(self.repo_config.repo_arch_dir):
            try:
                records.append(self.extract_package_info(pkg_path))
            except (ValueError, OSError) as e:
                logger.warning(f"⚠️ Failed to extract package info for {pkg_path.name}: {e}")
        return records

    def build_stats(self, records: List[PackageRecord]) -> RepositoryStats:
        total = sum(int(r.size) for r in records)
        return RepositoryStats(
            total_packages=len(records),
            repository_size=format_size(total),
            last_updated=datetime.now().astimezone().isoformat(timespec="seconds"),
            architecture=self.repo_config.architecture,
            repository_name=self.repo_config.db_base_name,
            channel=self.repo_config.channel.value,
        )

    def write_outputs(self, records: List[PackageRecord]):
        write_json(self.repo_config.api_file, [r.to_dict() for r in records])
        write_json(self.repo_config.stats_file, self.build_stats(records).to_dict())

    def generate_packages_json(self) -> List[PackageRecord]:
        """Write <channel>.json and <channel>-stats.json; an empty channel yields []"""
        records = self.collect()
        self.write_outputs(records)
        logger.info(f"Generated {self.repo_config.api_file.name} with {len(records)} packages")
        return records
