"""Shell command probe polled by the command line tool."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .errors import ExitCode, InvalidInvocationError, PollKitError

logger = py_logging.getLogger(__name__)


@dataclass
class CommandError(PollKitError):
    """The probed command could not be started or did not finish in time."""

    code: ExitCode = ExitCode.COMMAND_ERROR


@dataclass(frozen=True)
class CommandResult:
    attempt: int
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return f"{self.stdout}{self.stderr}".strip()


class CommandProbe:
    def __init__(
        self,
        argv: Sequence[str],
        *,
        timeout_seconds: float | None = None,
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        if not argv:
            raise InvalidInvocationError(
                "No command given",
                hint="Pass the command to poll after '--'.",
            )
        self.argv = list(argv)
        self.timeout_seconds = timeout_seconds
        self.runner = runner
        self.last_result: CommandResult | None = None

    def __call__(self, attempt: int) -> CommandResult:
        logger.debug("Running attempt=%s command=%s", attempt, self.argv)
        try:
            completed = self.runner(
                self.argv,
                shell=False,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("Command timed out attempt=%s command=%s", attempt, self.argv)
            raise CommandError(
                f"Command timed out after {self.timeout_seconds}s: {self.argv[0]}",
                hint="Raise --command-timeout or use --retry-on-errors.",
            ) from exc
        except OSError as exc:
            logger.warning("Command failed to start attempt=%s command=%s", attempt, self.argv)
            raise CommandError(
                f"Cannot run command {self.argv[0]}: {exc}",
                hint="Check the command path and permissions.",
            ) from exc

        result = CommandResult(
            attempt=attempt,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        self.last_result = result
        logger.debug("Command finished attempt=%s returncode=%s", attempt, result.returncode)
        return result


def exit_status_is(expected: int) -> Callable[[CommandResult, int], bool]:
    def _stop(result: CommandResult, attempt: int) -> bool:
        del attempt
        return result.returncode == expected

    return _stop


def output_contains(text: str) -> Callable[[CommandResult, int], bool]:
    def _stop(result: CommandResult, attempt: int) -> bool:
        del attempt
        return text in result.stdout

    return _stop
