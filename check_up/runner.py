"""
check_up/runner.py — Run one shell command and capture its exit status.

Commands run through `<shell> -c` so a service can use pipes, `&&`, `test`,
and the rest of shell syntax. A command that cannot be started is reported
as data with a synthetic exit code; nothing here raises for a failing command.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

DEFAULT_SHELL = "bash"

# Same codes a shell uses for "command not found" and coreutils `timeout`.
LAUNCH_FAILURE_EXIT_CODE = 127
TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class CommandResult:
    exit_code: int | None
    output: bytes = b""
    timed_out: bool = False
    error: str | None = None

    @property
    def launched(self) -> bool:
        return self.error is None

    @property
    def reported_exit_code(self) -> int:
        """Exit code to show and classify on; never None."""
        if self.exit_code is not None:
            return self.exit_code
        if self.timed_out:
            return TIMEOUT_EXIT_CODE
        return LAUNCH_FAILURE_EXIT_CODE


def run_command(
    command: str,
    shell: str = DEFAULT_SHELL,
    timeout: float | None = None,
) -> CommandResult:
    try:
        result = subprocess.run(
            [shell, "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        # subprocess.run has already killed the shell; children it spawned may
        # outlive it.
        return CommandResult(exit_code=None, output=exc.output or b"", timed_out=True)
    except (OSError, ValueError) as exc:
        return CommandResult(exit_code=None, output=str(exc).encode(), error=str(exc))
    return CommandResult(exit_code=result.returncode, output=result.stdout or b"")
