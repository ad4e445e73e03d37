"""
Shell Executor Module - Runs external tools (repo-add, pacman) with logging
"""

import os
import subprocess
import logging
from pathlib import Path
from typing import List, Optional

from prismrepo import config
from prismrepo.common.logging_utils import DebugLogger

logger = logging.getLogger(__name__)


class ShellExecutor:
    """Handles external command execution with logging and timeout"""

    def __init__(self, debug_mode: bool = False, timeout: int = config.TOOL_TIMEOUT):
        self.debug_mode = debug_mode
        self.timeout = timeout
        self.debug_logger = DebugLogger(debug_mode)

    def run_command(self, cmd: List[str], cwd: Optional[Path] = None, capture: bool = True,
                    check: bool = True, extra_env: Optional[dict] = None):
        """
        Run a command without a shell.

        The working directory is passed to the child process explicitly,
        the current process never changes directory.

        Args:
            cmd: Command and arguments
            cwd: Working directory for the child process
            capture: Capture stdout/stderr instead of inheriting them
            check: Raise CalledProcessError on non-zero exit
            extra_env: Additional environment variables

        Returns:
            subprocess.CompletedProcess

        Raises:
            FileNotFoundError: the executable does not exist
            subprocess.CalledProcessError: non-zero exit and check=True
            subprocess.TimeoutExpired: command ran longer than the timeout
        """
        self.debug_logger.log(f"RUNNING COMMAND: {' '.join(str(c) for c in cmd)} (cwd={cwd or Path.cwd()})")

        env = os.environ.copy()
        env['LC_ALL'] = 'C'
        if extra_env:
            env.update(extra_env)

        try:
            result = subprocess.run(
                [str(c) for c in cmd],
                cwd=str(cwd) if cwd else None,
                capture_output=capture,
                text=True,
                check=check,
                env=env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"⚠️ Command timed out after {self.timeout} seconds: {cmd[0]}")
            raise
        except subprocess.CalledProcessError as e:
            self.debug_logger.error(f"Command failed: {cmd[0]} (exit {e.returncode})")
            if e.stderr:
                self.debug_logger.error(f"STDERR:\n{e.stderr}")
            raise

        if capture:
            if result.stdout:
                self.debug_logger.log(f"STDOUT:\n{result.stdout}")
            if result.stderr:
                self.debug_logger.log(f"STDERR:\n{result.stderr}")
        self.debug_logger.log(f"EXIT CODE: {result.returncode}")

        return result
