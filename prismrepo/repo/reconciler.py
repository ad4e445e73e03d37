"""
Filesystem Reconciler - Makes the channel directory match the desired set

Orphans are deleted, missing packages are downloaded, packages that are
already present are left untouched (no checksum re-validation).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import requests

from prismrepo import config
from prismrepo.common.errors import DownloadError, FilesystemError
from prismrepo.models import ResolvedPackage

logger = logging.getLogger(__name__)


def list_local_packages(directory: Path) -> List[Path]:
    """
    Package files in a directory, sorted by name.

    Raises:
        FilesystemError: directory cannot be read
    """
    try:
        entries = list(Path(directory).iterdir())
    except OSError as e:
        raise FilesystemError(f"failed to read local directory {directory}: {e}") from e
    return sorted(
        (p for p in entries if p.name.endswith(config.PACKAGE_SUFFIX) and p.is_file()),
        key=lambda p: p.name,
    )


@dataclass
class ReconcileResult:
    """What a reconciliation pass changed"""
    removed: List[str] = field(default_factory=list)
    downloaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)


class Reconciler:
    """Diffs the desired set against the channel directory and applies the difference"""

    def __init__(self, repo_arch_dir: Path, session: Optional[requests.Session] = None,
                 force: bool = False):
        self.repo_arch_dir = Path(repo_arch_dir)
        self.session = session or requests.Session()
        self.force = force

    def remove_orphans(self, desired: Dict[str, ResolvedPackage]) -> List[str]:
        """
        Delete package files that are not in the desired set.

        Raises:
            FilesystemError: listing failed or an orphan could not be deleted
        """
        removed = []
        for path in list_local_packages(self.repo_arch_dir):
            if path.name in desired:
                continue
            logger.debug(f"Removing orphaned package: {path.name}")
            try:
                path.unlink()
            except OSError as e:
                raise FilesystemError(f"failed to remove orphaned package {path.name}: {e}") from e
            removed.append(path.name)

        if removed:
            logger.info(f"Removed {len(removed)} orphaned packages")
        return removed

    def download_file(self, target: Path, url: str):
        """
        Stream a URL to a file. A partially written file is removed on failure.

        Raises:
            DownloadError: transport error, non-2xx status or write failure
        """
        try:
            with self.session.get(url, stream=True, timeout=config.HTTP_TIMEOUT) as response:
                if not 200 <= response.status_code < 300:
                    raise DownloadError(target.name, f"bad status {response.status_code} from {url}")
                with open(target, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=config.DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except DownloadError:
            target.unlink(missing_ok=True)
            raise
        except (requests.exceptions.RequestException, OSError) as e:
            target.unlink(missing_ok=True)
            raise DownloadError(target.name, str(e)) from e

    def download_missing(self, desired: Dict[str, ResolvedPackage], result: ReconcileResult):
        """Download every desired package that is not on disk yet"""
        for filename, pkg in desired.items():
            target = self.repo_arch_dir / filename
            if target.exists() and not self.force:
                result.kept.append(filename)
                continue

            logger.debug(f"Downloading package: {filename} from {pkg.source_url}")
            try:
                self.download_file(target, pkg.source_url)
            except DownloadError as e:
                logger.warning(f"⚠️ Failed to download {e}")
                result.failed.append(filename)
                continue
            result.downloaded.append(filename)

        if result.downloaded:
            logger.info(f"Downloaded {len(result.downloaded)} new packages")
        if result.failed:
            logger.warning(f"⚠️ {len(result.failed)} packages could not be downloaded")

    def reconcile(self, desired: Dict[str, ResolvedPackage]) -> ReconcileResult:
        """Remove orphans first, then download what is missing"""
        result = ReconcileResult()
        result.removed = self.remove_orphans(desired)
        self.download_missing(desired, result)
        return result
