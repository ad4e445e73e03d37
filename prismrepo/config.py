"""
Configuration file for PrismLinux Repository Manager
=================================================================================
PURPOSE: Centralized defaults for the repository reconciler.
         This file contains settings that control where packages live,
         how the database is named and how the GitLab API is reached.

USAGE: Imported by common/config_loader.py to get default values.
       Command-line flags and environment variables override these defaults.

ORGANIZATION:
1. Repository configuration
2. Layout (directories and file names)
3. GitLab configuration
4. Network
5. External tools
6. Packages configuration template
"""

# ==============================================================================
# 1. REPOSITORY CONFIGURATION
# ==============================================================================

# REPO_NAME: Base name of the repository database
# This appears in /etc/pacman.conf as [repo-name] and in filenames as repo-name.db.tar.gz
# The testing channel appends TESTING_SUFFIX (prismlinux-testing.db.tar.gz)
REPO_NAME = "prismlinux"
TESTING_SUFFIX = "-testing"

# ARCHITECTURE: Target architecture, also the name of the stable channel directory
ARCHITECTURE = "x86_64"

# PACKAGE_SUFFIX: Only files with this suffix are treated as packages
PACKAGE_SUFFIX = ".pkg.tar.zst"

# ==============================================================================
# 2. LAYOUT
# ==============================================================================

# TESTING_DIR: Parent directory of the testing channel (testing/x86_64)
TESTING_DIR = "testing"

# API_DIR: Directory where the JSON metadata for the web front end is written
API_DIR = "api"

# PACKAGES_CONFIG_FILE: Declarative list of package sources
PACKAGES_CONFIG_FILE = "packages_config.yaml"

# API_FILES: Metadata files reported by the status command
API_FILES = ["stable.json", "testing.json"]

# ==============================================================================
# 3. GITLAB CONFIGURATION
# ==============================================================================

GITLAB_URL = "https://gitlab.com"
GITLAB_API_PATH = "/api/v4"
RELEASES_PER_PAGE = 100

# Environment variables used when the matching flag is not given
ENV_GITLAB_TOKEN = "GITLAB_TOKEN"
ENV_PROJECT_ID = "CI_PROJECT_ID"
ENV_GITLAB_URL = "GITLAB_URL"
ENV_FORCE_REBUILD = "FORCE_REBUILD"

# ==============================================================================
# 4. NETWORK
# ==============================================================================

# HTTP_TIMEOUT: (connect, read) timeouts in seconds for every HTTP request
HTTP_TIMEOUT = (30, 300)

# DOWNLOAD_CHUNK_SIZE: Bytes written per iteration while streaming a package
DOWNLOAD_CHUNK_SIZE = 64 * 1024

USER_AGENT = "prismrepo"

# ==============================================================================
# 5. EXTERNAL TOOLS
# ==============================================================================

REPO_ADD_COMMAND = ["repo-add"]
PACKAGE_INFO_COMMAND = ["pacman", "-Qip"]

# Timeout for a single external tool invocation (seconds)
TOOL_TIMEOUT = 1800

# ==============================================================================
# 6. PACKAGES CONFIGURATION TEMPLATE
# ==============================================================================
# Written to PACKAGES_CONFIG_FILE when it does not exist yet.

DEFAULT_PACKAGES_CONFIG = {
    "forge_projects": [
        {
            "id": "12345",
            "name": "example-package",
            "channels": ["stable"],
            "enabled": True,
        },
    ],
    "remote_urls": [
        {
            "url": "https://example.com/package.pkg.tar.zst",
            "channel": "stable",
            "enabled": True,
        },
    ],
}
