"""
GitLab REST API Client - List project releases and their asset links
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

from prismrepo import config
from prismrepo.common.errors import GitLabError

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse a GitLab ISO 8601 timestamp; missing or invalid values sort last"""
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class GitLabClient:
    """GitLab API v4 client for release listing"""

    def __init__(self, token: Optional[str], base_url: str = config.GITLAB_URL,
                 session: Optional[requests.Session] = None,
                 per_page: int = config.RELEASES_PER_PAGE):
        self.base_url = base_url.rstrip("/") + config.GITLAB_API_PATH
        self.per_page = per_page
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.USER_AGENT})
        if token:
            self.session.headers.update({"PRIVATE-TOKEN": token})

    def _releases_url(self, project_id: str) -> str:
        return f"{self.base_url}/projects/{quote(str(project_id), safe='')}/releases"

    def list_releases(self, project_id: str) -> List[Dict]:
        """
        Fetch every release of a project.

        Pages are requested until the API returns an empty page.

        Args:
            project_id: Numeric id or URL-encodable path of the project

        Returns:
            List of release dictionaries as returned by the API

        Raises:
            GitLabError: request failed or returned something other than a list
        """
        releases: List[Dict] = []
        url = self._releases_url(project_id)
        page = 1

        while True:
            try:
                response = self.session.get(
                    url,
                    params={"page": page, "per_page": self.per_page},
                    timeout=config.HTTP_TIMEOUT,
                )
                response.raise_for_status()
                data = response.json()
            except requests.exceptions.RequestException as e:
                raise GitLabError(f"release listing failed for project {project_id}: {e}") from e
            except ValueError as e:
                raise GitLabError(f"invalid JSON in release listing for project {project_id}: {e}") from e

            if not isinstance(data, list):
                raise GitLabError(f"unexpected release listing for project {project_id}: {type(data).__name__}")
            if not data:
                break

            releases.extend(data)
            page += 1

        logger.debug(f"Fetched {len(releases)} releases for project {project_id}")
        return releases

    @staticmethod
    def sort_releases(releases: List[Dict]) -> List[Dict]:
        """Newest first by created_at"""
        return sorted(releases, key=lambda r: parse_timestamp(r.get("created_at")), reverse=True)

    @staticmethod
    def asset_links(release: Dict) -> List[Dict]:
        """Downloadable asset links of a release ({name, url})"""
        assets = release.get("assets") or {}
        links = assets.get("links") or []
        return [link for link in links if isinstance(link, dict)]
