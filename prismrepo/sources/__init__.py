"""
Package source modules package
"""

from .gitlab_client import GitLabClient
from .release_selector import ReleaseSelector, select_release
from .source_resolver import SourceResolver, evaluate_direct_source

__all__ = [
    'GitLabClient',
    'ReleaseSelector',
    'select_release',
    'SourceResolver',
    'evaluate_direct_source',
]
