"""
Source Resolver - Turns direct download URLs into packages for one channel
"""

import logging
import posixpath
from typing import Iterable, List

from prismrepo import config
from prismrepo.models import Accepted, Channel, DirectSource, Rejected, ResolvedPackage, SourceOutcome

logger = logging.getLogger(__name__)


def filename_from_url(url: str) -> str:
    """Basename of the URL path with any query string stripped"""
    return posixpath.basename(url.split("?", 1)[0])


def evaluate_direct_source(source: DirectSource, channel: Channel) -> SourceOutcome:
    """
    Decide whether a direct URL contributes a package to the channel.

    Returns:
        Accepted(ResolvedPackage) or Rejected(source, reason)
    """
    url = source.url.strip()

    if not source.enabled:
        return Rejected(url, "disabled")
    if source.channel is None:
        return Rejected(url, "unknown channel")
    if source.channel is not channel:
        return Rejected(url, f"declared for {source.channel.value}")
    if not url.endswith(config.PACKAGE_SUFFIX):
        return Rejected(url, f"URL does not end with {config.PACKAGE_SUFFIX}")

    filename = filename_from_url(url)
    if not filename or filename == config.PACKAGE_SUFFIX:
        return Rejected(url, "no filename in URL")

    return Accepted(ResolvedPackage(filename=filename, source_url=url, channel=channel))


class SourceResolver:
    """Resolves the remote_urls section of the packages configuration"""

    # Rejections that are normal configuration, not mistakes
    _QUIET_REASONS = ("disabled", "declared for ")

    def evaluate(self, sources: Iterable[DirectSource], channel: Channel) -> List[SourceOutcome]:
        return [evaluate_direct_source(source, channel) for source in sources]

    def resolve(self, sources: Iterable[DirectSource], channel: Channel) -> List[ResolvedPackage]:
        """
        Accepted packages for the channel.

        Rejected entries are logged and dropped; a misconfigured source
        never aborts the run.
        """
        packages = []
        for outcome in self.evaluate(sources, channel):
            if isinstance(outcome, Accepted):
                packages.append(outcome.package)
                logger.debug(f"Added remote package: {outcome.package.filename}")
            elif outcome.reason.startswith(self._QUIET_REASONS):
                logger.debug(f"Skipping remote URL {outcome.source or '<empty>'}: {outcome.reason}")
            else:
                logger.warning(f"⚠️ Ignoring remote URL {outcome.source or '<empty>'}: {outcome.reason}")

        logger.info(f"Found {len(packages)} packages from remote URLs")
        return packages
