"""Handler for the 'mirror' subcommand.

Usage:
    sitepub mirror public/ /srv/www --prefix blog
"""
from pathlib import Path

from colorama import Fore, Style

from ..services.storage import ContentTypeLayer, LocalStorage
from ..services.sync import mirror_directory
from .base_handler import ModeHandler


class MirrorHandler(ModeHandler):
    """Handles ad-hoc directory mirroring via CLI subcommand."""

    def display_banner(self):
        print(f"\n{Fore.CYAN}  ▸ Mirror {self.args.source} → {self.args.dest}{Style.RESET_ALL}\n")

    def validate_prerequisites(self) -> bool:
        if not Path(self.args.source).is_dir():
            print(f"{Fore.RED}[ERROR] Source is not a directory: {self.args.source}{Style.RESET_ALL}")
            return False
        return True

    def prepare_context(self):
        return {
            'storage': ContentTypeLayer(LocalStorage(self.args.dest)),
            'prefix': self.args.prefix or "",
        }

    def execute_workflow(self, context):
        return mirror_directory(
            context['storage'],
            self.args.source,
            context['prefix'],
            max_workers=self.args.workers,
        )

    def display_completion(self, result):
        print(f"{Fore.GREEN}[SUCCESS] Mirrored {result.tasks_attempted} file(s){Style.RESET_ALL}")
