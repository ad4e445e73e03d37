"""
Orchestrator modules package
"""

from .package_manager import PackageManager

__all__ = ['PackageManager']
