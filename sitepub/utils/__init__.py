"""Utility modules for sitepub.

- logger       — colorama console logging
- config_loader — workflow.toml and environment secrets
- file_utils   — local directory helpers
"""

from .config_loader import ConfigLoader, env_var, mask_secret
from .file_utils import copy_dir_into, ensure_dir, remove_dir, size_in_mb
from .logger import get_logger, setup_logging

__all__ = [
    'ConfigLoader',
    'env_var',
    'mask_secret',
    'ensure_dir',
    'remove_dir',
    'copy_dir_into',
    'size_in_mb',
    'get_logger',
    'setup_logging',
]
