from __future__ import annotations

import json
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping


def expand_path(s: str) -> Path:
    # Expand ~ and $VARS
    return Path(os.path.expandvars(os.path.expanduser(s)))


def parse_value(text: str) -> Any:
    """
    Decode a command-line value: JSON when it parses (false, null, 3, [1, 2]),
    otherwise the raw string.
    """
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_assignment(text: str) -> tuple[str, Any]:
    name, sep, raw = text.partition("=")
    if not sep or not name:
        raise ValueError(f"Expected NAME=VALUE, got {text!r}")
    return name, parse_value(raw)


@dataclass(frozen=True)
class RunResult:
    command: str
    returncode: int


class ShellRunner:
    """Runs a command string through the shell with the caller's stdin/stdout/stderr."""

    def __init__(self, *, dry_run: bool, logger) -> None:
        self._dry_run = dry_run
        self._logger = logger

    def run(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> RunResult:
        self._logger.debug("RUN %s", command)
        if self._dry_run:
            return RunResult(command=command, returncode=0)

        merged_env = None
        if env is not None:
            merged_env = dict(os.environ)
            merged_env.update(dict(env))

        # No capture: the child writes straight to our stdio.
        cp = subprocess.run(
            command,
            shell=True,
            check=False,
            cwd=str(cwd) if cwd is not None else None,
            env=merged_env,
        )
        return RunResult(command=command, returncode=cp.returncode)
