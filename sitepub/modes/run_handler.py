"""Handler for the 'run' subcommand.

Usage:
    sitepub run
"""
from colorama import Fore, Style

from .base_handler import ModeHandler


class RunHandler(ModeHandler):
    """Handles the build and publish run via CLI subcommand."""

    def display_banner(self):
        print(f"\n{Fore.CYAN}  ▸ Build & publish{Style.RESET_ALL}\n")

    def execute_workflow(self, context):
        return self.pipeline.run()

    def display_completion(self, result):
        print(
            f"\n{Fore.GREEN}[SUCCESS] Draft and production published "
            f"(peak memory {result} MB){Style.RESET_ALL}\n"
        )
