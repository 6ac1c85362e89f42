"""Mode handlers for sitepub CLI.

Subcommand handlers:
  - StartHandler        → sitepub start
  - UpgradeHugoHandler  → sitepub upgrade-hugo
  - RunHandler          → sitepub run
  - MirrorHandler       → sitepub mirror
"""
from .base_handler import ModeHandler
from .mirror_handler import MirrorHandler
from .run_handler import RunHandler
from .start_handler import StartHandler
from .upgrade_hugo_handler import UpgradeHugoHandler

__all__ = [
    'ModeHandler',
    'StartHandler',
    'UpgradeHugoHandler',
    'RunHandler',
    'MirrorHandler',
]
