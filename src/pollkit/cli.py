"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .clock import Clock
from .command import CommandError, CommandProbe, CommandResult, exit_status_is, output_contains
from .config import PollDefaults, load_config
from .errors import ExitCode, PollError, PollKitError, user_facing_error
from .interval import EXPONENTIAL
from .logging import configure_logging, normalize_level
from .poller import PollLoop

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def _seconds_type(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a number of seconds") from exc
    if seconds < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return seconds


def _every_type(value: str) -> float | str:
    if value.strip().lower() == EXPONENTIAL:
        return EXPONENTIAL
    try:
        return _seconds_type(value)
    except argparse.ArgumentTypeError as exc:
        raise argparse.ArgumentTypeError(f"--every {exc} or '{EXPONENTIAL}'") from exc


def _positive_int_type(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--max-retries must be an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("--max-retries must be at least 1")
    return number


def _log_level_type(value: str) -> str:
    normalized = normalize_level(value)
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pollkit",
        description="Run a command repeatedly until it reports the expected result.",
        usage="%(prog)s [options] -- COMMAND [ARGS ...]",
    )
    parser.add_argument("--every", type=_every_type, default=None, help="Seconds between attempts or 'exponential'")
    parser.add_argument("--for", dest="for_", type=_seconds_type, default=None, help="Give up after this many seconds")
    parser.add_argument("--max-retries", type=_positive_int_type, default=None)
    parser.add_argument("--until-exit", type=int, default=0, help="Exit status that ends polling")
    parser.add_argument("--until-output", default=None, help="Stop once stdout contains this text")
    parser.add_argument(
        "--retry-on-errors",
        action="store_true",
        default=None,
        help="Keep polling when the command cannot start or times out",
    )
    parser.add_argument("--command-timeout", type=_seconds_type, default=None)
    parser.add_argument("--quiet", action="store_true", help="Do not echo the final command output")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("command", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    raw = list(argv) if argv is not None else list(sys.argv[1:])
    command: list[str] | None = None
    if "--" in raw:
        split = raw.index("--")
        raw, command = raw[:split], raw[split + 1 :]
    namespace = build_parser().parse_args(raw)
    if command is not None:
        namespace.command = list(namespace.command) + command
    return namespace


def build_loop(
    namespace: argparse.Namespace,
    defaults: PollDefaults,
    *,
    clock: Clock | None = None,
) -> PollLoop:
    retry_on_errors = defaults.retry_on_errors if namespace.retry_on_errors is None else namespace.retry_on_errors
    if namespace.until_output is not None:
        stop_when = output_contains(namespace.until_output)
    else:
        stop_when = exit_status_is(namespace.until_exit)
    return PollLoop(
        every=defaults.every if namespace.every is None else namespace.every,
        for_=defaults.timeout_seconds if namespace.for_ is None else namespace.for_,
        max_retries=defaults.max_retries if namespace.max_retries is None else namespace.max_retries,
        stop_when=stop_when,
        retry_on_exceptions=[CommandError] if retry_on_errors else False,
        clock=clock,
    )


def _last_result_hint(probe: CommandProbe, error: PollError) -> str:
    last: CommandResult | None = probe.last_result
    parts = [f"{error.attempts} attempt(s) made"]
    if last is not None:
        parts.append(f"last exit status {last.returncode}")
    if error.cause is not None:
        parts.append(f"last error: {error.cause}")
    return "; ".join(parts)


def main(
    argv: Sequence[str] | None = None,
    *,
    runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    clock: Clock | None = None,
) -> int:
    logger = configure_logging()
    try:
        namespace = parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    try:
        defaults = load_config(namespace.config)
        level = namespace.log_level or defaults.log_level
        logger = configure_logging(level=level, log_file=namespace.log_file)

        probe = CommandProbe(namespace.command, timeout_seconds=namespace.command_timeout, runner=runner)
        loop = build_loop(namespace, defaults, clock=clock)
        logger.debug("Polling command=%s config=%s", probe.argv, loop.config)
        result = loop.run(probe)
    except PollError as exc:
        logger.error("Polling stopped (code=%s): %s", int(exc.code), exc.message)
        print(user_facing_error(exc.message, hint=_last_result_hint(probe, exc)), file=sys.stderr)
        return int(exc.code)
    except PollKitError as exc:
        logger.error(
            "Handled PollKitError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        print(user_facing_error("Unexpected runtime failure", hint="Re-run with --log-level DEBUG"), file=sys.stderr)
        return int(ExitCode.RUNTIME_ERROR)

    if not namespace.quiet and result.output:
        print(result.output)
    logger.info("Command succeeded on attempt %s", result.attempt)
    return int(ExitCode.SUCCESS)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)

