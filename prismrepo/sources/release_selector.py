"""
Release Selector - Picks the release each channel mirrors (dual-track promotion)

A project declared for both channels feeds testing with its newest release
and stable with the release before it, so every release passes through
testing before it reaches stable. A project declared for a single channel
always feeds that channel with its newest release.
"""

import logging
import posixpath
from typing import Dict, Iterable, List, Optional

from prismrepo import config
from prismrepo.common.errors import GitLabError
from prismrepo.models import Channel, ForgeProject, ResolvedPackage
from prismrepo.sources.gitlab_client import GitLabClient

logger = logging.getLogger(__name__)


def select_release(project: ForgeProject, channel: Channel, releases: List[Dict]) -> Optional[Dict]:
    """
    Apply the promotion policy to releases sorted newest first.

    Returns:
        The release for this channel, or None when the channel gets nothing
    """
    if not releases:
        return None

    if project.is_dual_channel:
        if channel is Channel.TESTING:
            release = releases[0]
            logger.debug(f"Using LATEST version for testing: {release.get('name') or release.get('tag_name')}")
            return release
        if len(releases) > 1:
            release = releases[1]
            logger.debug(f"Using PREVIOUS version for stable: {release.get('name') or release.get('tag_name')}")
            return release
        logger.debug(f"Skipping project {project.name} for stable (needs at least 2 releases)")
        return None

    release = releases[0]
    logger.debug(f"Using LATEST version (single channel): {release.get('name') or release.get('tag_name')}")
    return release


def qualifying_assets(release: Dict, channel: Channel) -> List[ResolvedPackage]:
    """Package assets of a release that can be fetched over https"""
    packages = []
    for link in GitLabClient.asset_links(release):
        name = str(link.get("name") or "")
        url = str(link.get("url") or "")
        if not name.endswith(config.PACKAGE_SUFFIX):
            continue
        if posixpath.basename(name) != name or "\\" in name or name.startswith("."):
            logger.warning(f"⚠️ Ignoring asset {name!r}: not a plain file name")
            continue
        if not url.startswith("https://"):
            logger.debug(f"Ignoring asset {name}: not served over https")
            continue
        packages.append(ResolvedPackage(filename=name, source_url=url, channel=channel))
    return packages


class ReleaseSelector:
    """Resolves forge projects into packages for the active channel"""

    def __init__(self, client: Optional[GitLabClient]):
        self.client = client

    def resolve_project(self, project: ForgeProject, channel: Channel) -> List[ResolvedPackage]:
        """
        Packages one project contributes to the channel.

        Listing failures and projects without releases are logged as
        warnings and contribute nothing; they never abort the run.
        """
        logger.debug(f"Fetching releases for project: {project.name} ({project.id})")
        try:
            releases = self.client.list_releases(project.id)
        except GitLabError as e:
            logger.warning(f"⚠️ Skipping project {project.name}: {e}")
            return []

        if not releases:
            logger.warning(f"⚠️ No releases found for project: {project.name}")
            return []

        release = select_release(project, channel, GitLabClient.sort_releases(releases))
        if release is None:
            return []

        packages = qualifying_assets(release, channel)
        for pkg in packages:
            logger.debug(f"Added package: {pkg.filename} from {release.get('name') or release.get('tag_name')}")
        return packages

    def resolve(self, projects: Iterable[ForgeProject], channel: Channel) -> List[ResolvedPackage]:
        """Packages from every enabled project declared for the channel"""
        projects = [p for p in projects if p.enabled and channel in p.channels]

        if self.client is None:
            if projects:
                logger.warning("⚠️ No GitLab token available, skipping GitLab packages")
            return []

        packages: List[ResolvedPackage] = []
        for project in projects:
            if not project.id:
                logger.warning(f"⚠️ Skipping project {project.name}: missing id")
                continue
            packages.extend(self.resolve_project(project, channel))

        logger.info(f"Found {len(packages)} packages from GitLab projects")
        return packages
