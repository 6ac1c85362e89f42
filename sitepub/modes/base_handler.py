"""Base mode handler with template method pattern."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from colorama import Fore, Style

from ..exceptions import SitepubError
from ..utils.logger import get_logger

log = get_logger(__name__)


class ModeHandler(ABC):
    """Abstract base class for all mode handlers."""

    def __init__(self, app, args=None):
        """Initialize mode handler with the CLI application.

        Args:
            app: Main Sitepub CLI instance holding the pipeline
            args: Parsed command-line arguments
        """
        self.app = app
        self.pipeline = app.pipeline
        self.args = args

    def execute(self) -> int:
        """Execute mode workflow (Template Method).

        Domain errors are logged and turned into exit code 1; anything
        else propagates.

        Returns:
            Exit code (0 for success, 1 for failure)
        """
        self.display_banner()

        if not self.validate_prerequisites():
            return 1

        context = self.prepare_context()
        if context is None:
            return 1

        try:
            result = self.execute_workflow(context)
        except SitepubError as e:
            log.error("%s", e)
            return 1

        if result is False or result is None:
            return 1

        self.display_completion(result)
        return 0

    @abstractmethod
    def display_banner(self):
        """Display mode-specific banner."""

    def validate_prerequisites(self) -> bool:
        """Check that the mode can run.

        Returns:
            True if prerequisites are met, False otherwise
        """
        return True

    def prepare_context(self) -> Optional[Dict[str, Any]]:
        """Gather data needed by :meth:`execute_workflow`.

        Returns:
            Context dictionary, or None if preparation failed
        """
        return {}

    @abstractmethod
    def execute_workflow(self, context: Dict[str, Any]) -> Any:
        """Execute mode-specific workflow.

        Args:
            context: Prepared context dictionary

        Returns:
            Result object (mode-specific), or None/False if failed
        """

    def display_completion(self, result: Any):
        """Display completion message. Override for custom output."""
        print(f"\n{Fore.GREEN}[SUCCESS] Done{Style.RESET_ALL}\n")
