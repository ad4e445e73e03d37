"""
Logging utilities for the repository manager
"""

import logging
import sys

LOG_FORMAT = '[%(asctime)s] %(levelname)s: %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(debug_mode=False, verbose=False, log_file=None):
    """Setup logging configuration"""
    level = logging.DEBUG if (debug_mode or verbose) else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    return logging.getLogger('prismrepo')


class DebugLogger:
    """Debug logger that bypasses standard logger in debug mode"""

    def __init__(self, debug_mode=False):
        self.debug_mode = debug_mode

    def log(self, message):
        """Log message, bypassing logger in debug mode"""
        if self.debug_mode:
            print(f"🔧 [DEBUG] {message}", flush=True)
        else:
            logging.getLogger('prismrepo').debug(message)

    def error(self, message):
        """Log error message"""
        if self.debug_mode:
            print(f"❌ [DEBUG] {message}", flush=True)
        else:
            logging.getLogger('prismrepo').error(message)
