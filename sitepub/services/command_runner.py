"""
External command execution.

The pipeline only needs "run this command, tell me how it exited", so
that is all :class:`CommandRunner` offers. Tests substitute a fake.
"""
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..exceptions import CommandError
from ..utils.logger import get_logger

log = get_logger(__name__)


class CommandResult:
    """Outcome of a finished command.

    Attributes:
        returncode: Exit status (None if killed by a signal)
        stdout: Captured standard output, or b"" when not captured
    """

    def __init__(self, returncode: Optional[int], stdout: bytes = b""):
        self.returncode = returncode
        self.stdout = stdout

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandRunner(ABC):
    """Abstract capability for running external programs."""

    @abstractmethod
    def run(self, args: Sequence[str], cwd=None, capture_output: bool = False) -> CommandResult:
        """Run *args* to completion.

        Args:
            args: Program and arguments
            cwd: Working directory (None for the current one)
            capture_output: Capture stdout instead of inheriting it

        Returns:
            CommandResult

        Raises:
            OSError: If the program cannot be started
        """

    def check(self, args: Sequence[str], hint: str, cwd=None) -> CommandResult:
        """Run *args* and raise unless it exits with status 0.

        Raises:
            CommandError: On a non-zero or missing exit status
        """
        result = self.run(args, cwd=cwd)
        if not result.success:
            raise CommandError(hint, result.returncode)
        return result


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by :func:`subprocess.run`."""

    def run(self, args: Sequence[str], cwd=None, capture_output: bool = False) -> CommandResult:
        argv: List[str] = [str(a) for a in args]
        log.debug("exec: %s (cwd=%s)", argv[0], cwd or ".")

        completed = subprocess.run(
            argv,
            cwd=cwd,
            stdout=subprocess.PIPE if capture_output else None,
            check=False,
        )

        # POSIX reports death by signal as a negative return code
        returncode = completed.returncode if completed.returncode >= 0 else None
        return CommandResult(returncode, completed.stdout or b"")
