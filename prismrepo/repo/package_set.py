"""
Package Set Merger - Builds the desired set (filename -> package) for a channel
"""

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from prismrepo.models import ResolvedPackage

logger = logging.getLogger(__name__)

# Source kinds in merge order; a later kind overwrites an earlier one
SOURCE_ORDER = ("forge", "direct")


def merge_package_sets(sources: Sequence[Tuple[str, Iterable[ResolvedPackage]]]) -> Dict[str, ResolvedPackage]:
    """
    Merge package sequences in the given order, keyed by filename.

    Args:
        sources: (kind, packages) pairs; later pairs win on equal filenames

    Returns:
        Desired set as an insertion-ordered dict
    """
    desired: Dict[str, ResolvedPackage] = {}
    for kind, packages in sources:
        for pkg in packages:
            previous = desired.get(pkg.filename)
            if previous is not None and previous.source_url != pkg.source_url:
                logger.info(f"{pkg.filename}: {kind} source {pkg.source_url} overrides {previous.source_url}")
            desired[pkg.filename] = pkg
    return desired


def build_desired_set(forge_packages: List[ResolvedPackage],
                      direct_packages: List[ResolvedPackage]) -> Dict[str, ResolvedPackage]:
    """Forge packages first, then direct URLs, so a direct URL overrides a forge asset"""
    by_kind = {"forge": forge_packages, "direct": direct_packages}
    desired = merge_package_sets([(kind, by_kind[kind]) for kind in SOURCE_ORDER])
    logger.info(f"Found {len(desired)} packages total")
    return desired
