from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from bash_template.template import bash
from bash_template.util import ShellRunner

SPAWN_FAILURE = 127


@dataclass(frozen=True)
class Options:
    debug: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class ExecResult:
    command: str
    returncode: int
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def debug_from_argv(argv: Sequence[str] | None = None) -> bool:
    if argv is None:
        argv = sys.argv
    return "--debug" in argv


class Executor:
    def __init__(self, options: Options | None = None, *, logger: logging.Logger | None = None) -> None:
        self._options = options or Options()
        self._logger = logger or logging.getLogger("bash-template")
        self._runner = ShellRunner(dry_run=self._options.dry_run, logger=self._logger)

    def run(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ExecResult:
        if self._options.debug:
            print(f"$ {command}", flush=True)
        try:
            res = self._runner.run(command, cwd=cwd, env=env)
        except OSError as e:
            self._logger.debug("Failed to start %s: %s", command, e)
            return ExecResult(command=command, returncode=SPAWN_FAILURE, message=f"Command failed to start: {command}\n{e}")
        if res.returncode != 0:
            return ExecResult(
                command=command,
                returncode=res.returncode,
                message=f"Command failed: {command} (exit status {res.returncode})",
            )
        return ExecResult(command=command, returncode=0)


def _as_command(command: str | Sequence[str], values: Sequence[Any]) -> str:
    if isinstance(command, str):
        if values:
            raise ValueError("Values are only accepted together with template fragments")
        return command
    return bash(command, *values)


def execute(
    command: str | Sequence[str],
    *values: Any,
    options: Options | None = None,
) -> ExecResult:
    """
    Template (when given fragments) and run a command.

    Accepts a finished command string or fragments plus values, exactly like `bash`.
    """
    return Executor(options).run(_as_command(command, values))


def report_failure(result: ExecResult) -> None:
    sys.stderr.write("\n" + result.message + "\n")
    sys.stderr.flush()


def execute_or_exit(
    command: str | Sequence[str],
    *values: Any,
    options: Options | None = None,
) -> None:
    """Like `execute`, but print the failure to stderr and exit with status 1."""
    if options is None:
        options = Options(debug=debug_from_argv())
    result = execute(command, *values, options=options)
    if not result.ok:
        report_failure(result)
        sys.exit(1)
