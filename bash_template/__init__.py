"""
Build shell commands from templates, dropping flags whose values are missing,
and run them with inherited stdio.
"""

from bash_template.executor import (
    ExecResult,
    Executor,
    Options,
    debug_from_argv,
    execute,
    execute_or_exit,
)
from bash_template.template import bash, render, resolve
from bash_template.values import Absent, Flag, List, Number, Text, classify

__all__ = [
    "Absent",
    "ExecResult",
    "Executor",
    "Flag",
    "List",
    "Number",
    "Options",
    "Text",
    "bash",
    "classify",
    "debug_from_argv",
    "execute",
    "execute_or_exit",
    "render",
    "resolve",
]
