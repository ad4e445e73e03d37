"""
Exception types

Fatal errors (ConfigurationError, FilesystemError, DatabaseError) abort the
run with a non-zero exit code. GitLabError and DownloadError are raised per
project / per file and handled by the caller, which logs and continues.
"""


class RepositoryError(RuntimeError):
    """Base class for all repository manager errors"""


class ConfigurationError(RepositoryError):
    """Packages configuration could not be read, parsed or written"""


class FilesystemError(RepositoryError):
    """Local directory or file operation failed"""


class DatabaseError(RepositoryError):
    """repo-add failed or could not be executed"""


class GitLabError(RepositoryError):
    """Release listing for a project failed"""


class DownloadError(RepositoryError):
    """A package file could not be downloaded"""

    def __init__(self, filename: str, message: str):
        super().__init__(f"{filename}: {message}")
        self.filename = filename
