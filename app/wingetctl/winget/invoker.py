"""winget process invoker.

Runs the winget executable with an argument list and returns its output
and exit code. A nonzero exit is an expected outcome (nothing to
upgrade, package not found, ...) and is returned as data, never raised.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from wingetctl.core.preflight import WingetNotFoundError
from wingetctl.utils.shell import run_command
from wingetctl.winget.errors import WingetError, classify_exit_code, signed_exit_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WingetResult:
    """Result of a single winget invocation.

    Attributes:
        stdout: Captured standard output.
        stderr: Captured standard error.
        exit_code: Process exit code in signed 32-bit form.
        error: Classified failure for nonzero exits (None when exit code is 0
            or error interpretation was disabled).
    """

    stdout: str
    stderr: str
    exit_code: int
    error: WingetError | None = None

    @property
    def success(self) -> bool:
        """Check if winget exited with code 0."""
        return self.exit_code == 0


class WingetInvoker:
    """Runs winget subcommands.

    Each call spawns one child process without a shell and blocks until
    it exits. There is no timeout: a hung winget blocks the caller.

    Example:
        >>> invoker = WingetInvoker("winget")
        >>> result = invoker.run(["list", "--id", "Mozilla.Firefox", "--exact"])
        >>> result.exit_code
        0
    """

    def __init__(self, executable: str | Path = "winget") -> None:
        """Initialize the invoker.

        Args:
            executable: Path to (or name of) the winget executable.
        """
        self._executable = str(executable)

    @property
    def executable(self) -> str:
        """Path to the winget executable."""
        return self._executable

    def run(self, args: list[str], *, interpret_errors: bool = True) -> WingetResult:
        """Run winget with the given arguments.

        Args:
            args: winget subcommand and flags (without the executable).
            interpret_errors: If True, classify nonzero exit codes and log them.

        Returns:
            WingetResult with output, exit code, and classified error.

        Raises:
            WingetNotFoundError: If the executable cannot be started.
        """
        command = [self._executable, *args]
        logger.debug("Running: %s", " ".join(command))

        try:
            result = run_command(command, timeout=None)
        except FileNotFoundError as e:
            msg = f"winget executable not found: {self._executable}"
            raise WingetNotFoundError(msg) from e

        exit_code = signed_exit_code(result.returncode)
        error: WingetError | None = None
        if interpret_errors and exit_code != 0:
            error = classify_exit_code(exit_code)
            logger.info("winget %s exited with %s", args[0] if args else "", error)

        return WingetResult(
            stdout=result.stdout,
            stderr=result.stderr,
            exit_code=exit_code,
            error=error,
        )
