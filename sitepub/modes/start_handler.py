"""Handler for the 'start' subcommand."""
from colorama import Fore, Style

from .base_handler import ModeHandler


class StartHandler(ModeHandler):
    """Handles the workflow start announcement via CLI subcommand."""

    def display_banner(self):
        print(f"\n{Fore.CYAN}  ▸ Workflow start{Style.RESET_ALL}\n")

    def execute_workflow(self, context):
        self.pipeline.start()
        return True

    def display_completion(self, result):
        print(f"{Fore.GREEN}[SUCCESS] Start notification sent{Style.RESET_ALL}")
