"""Handler for the 'upgrade-hugo' subcommand."""
from colorama import Fore, Style

from .base_handler import ModeHandler


class UpgradeHugoHandler(ModeHandler):
    """Handles hugo installation via CLI subcommand."""

    def display_banner(self):
        print(f"\n{Fore.CYAN}  ▸ Upgrade hugo{Style.RESET_ALL}\n")

    def execute_workflow(self, context):
        return self.pipeline.upgrade_hugo()

    def display_completion(self, result):
        print(f"{Fore.GREEN}[SUCCESS] hugo ready at {result}{Style.RESET_ALL}")
