"""
Repository management modules package
"""

from .cleanup_manager import CleanupManager
from .database_manager import DatabaseManager
from .metadata_extractor import MetadataExtractor
from .package_set import build_desired_set, merge_package_sets
from .reconciler import Reconciler, ReconcileResult, list_local_packages

__all__ = [
    'CleanupManager',
    'DatabaseManager',
    'MetadataExtractor',
    'build_desired_set',
    'merge_package_sets',
    'Reconciler',
    'ReconcileResult',
    'list_local_packages',
]
