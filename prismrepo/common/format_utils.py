"""
Formatting helpers for human readable output
"""


def format_size(size: int) -> str:
    """Format a byte count using 1024-based units (512 B, 1.5 KB, 3.2 MB)"""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"
