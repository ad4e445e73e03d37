"""
Common modules package
"""

from .config_loader import ConfigLoader, RepoConfig
from .errors import (
    RepositoryError,
    ConfigurationError,
    FilesystemError,
    DatabaseError,
    GitLabError,
    DownloadError,
)
from .logging_utils import setup_logging, DebugLogger
from .shell_executor import ShellExecutor

__all__ = [
    'ConfigLoader',
    'RepoConfig',
    'RepositoryError',
    'ConfigurationError',
    'FilesystemError',
    'DatabaseError',
    'GitLabError',
    'DownloadError',
    'setup_logging',
    'DebugLogger',
    'ShellExecutor',
]
