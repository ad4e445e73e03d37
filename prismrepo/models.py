"""
Data model shared by the resolver, reconciler and metadata modules
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union


class Channel(Enum):
    """Repository track; exactly one is processed per invocation"""
    STABLE = "stable"
    TESTING = "testing"

    @classmethod
    def parse(cls, value) -> "Channel":
        if isinstance(value, Channel):
            return value
        return cls(str(value).strip().lower())

    def __str__(self):
        return self.value


def parse_channels(value) -> FrozenSet[Channel]:
    """
    Parse a channel declaration into a set of channels.

    Accepts a list (["stable", "testing"]) or the legacy ';'-separated
    string form ("stable;testing"). Unknown names are ignored.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items = value.split(";")
    else:
        items = list(value)

    channels = set()
    for item in items:
        try:
            channels.add(Channel.parse(item))
        except ValueError:
            continue
    return frozenset(channels)


@dataclass(frozen=True)
class ForgeProject:
    """A GitLab project whose releases are mirrored into one or both channels"""
    id: str
    name: str
    channels: FrozenSet[Channel]
    enabled: bool = True

    @property
    def is_dual_channel(self) -> bool:
        return Channel.STABLE in self.channels and Channel.TESTING in self.channels

    @classmethod
    def from_dict(cls, data: Dict) -> "ForgeProject":
        channels = data.get("channels", data.get("repository"))
        return cls(
            id=str(data.get("id", "")).strip(),
            name=str(data.get("name") or data.get("id", "")),
            channels=parse_channels(channels),
            enabled=bool(data.get("enabled", False)),
        )


@dataclass(frozen=True)
class DirectSource:
    """A single package file downloaded straight from a URL"""
    url: str
    channel: Optional[Channel]
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Dict) -> "DirectSource":
        raw_channel = data.get("channel", data.get("repository"))
        try:
            channel = Channel.parse(raw_channel) if raw_channel is not None else None
        except ValueError:
            channel = None
        return cls(
            url=str(data.get("url") or ""),
            channel=channel,
            enabled=bool(data.get("enabled", False)),
        )


@dataclass
class PackagesConfig:
    """Parsed contents of packages_config.yaml"""
    forge_projects: List[ForgeProject] = field(default_factory=list)
    remote_urls: List[DirectSource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "PackagesConfig":
        data = data or {}
        projects = data.get("forge_projects")
        if projects is None:
            projects = data.get("gitlab_projects")
        return cls(
            forge_projects=[ForgeProject.from_dict(p) for p in (projects or []) if isinstance(p, dict)],
            remote_urls=[DirectSource.from_dict(u) for u in (data.get("remote_urls") or []) if isinstance(u, dict)],
        )


@dataclass(frozen=True)
class ResolvedPackage:
    """One file of the desired set"""
    filename: str
    source_url: str
    channel: Channel


@dataclass(frozen=True)
class Accepted:
    package: ResolvedPackage


@dataclass(frozen=True)
class Rejected:
    source: str
    reason: str


SourceOutcome = Union[Accepted, Rejected]


@dataclass
class PackageRecord:
    """Package metadata exported to <api-dir>/<channel>.json"""
    name: str = "None"
    version: str = "None"
    description: str = "None"
    architecture: str = "None"
    filename: str = ""
    size: str = "0"
    modified: str = ""
    depends: str = "None"
    groups: str = "None"
    channel: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class RepositoryStats:
    """Summary exported to <api-dir>/<channel>-stats.json"""
    total_packages: int
    repository_size: str
    last_updated: str
    architecture: str
    repository_name: str
    channel: str

    def to_dict(self) -> Dict:
        return asdict(self)
