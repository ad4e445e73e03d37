"""
PrismLinux repository manager
"""

__version__ = "1.0.0"
