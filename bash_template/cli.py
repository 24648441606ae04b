from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from bash_template.config_loader import load_recipe_file
from bash_template.executor import Executor, Options, report_failure
from bash_template.template import render
from bash_template.util import expand_path, parse_assignment, parse_value


def _setup_logger(verbose: bool) -> logging.Logger:
    logger = logging.getLogger("bash-template")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Template variable. Values are decoded as JSON when possible (false, null, 3, [1, 2]). "
        "Can be specified multiple times.",
    )
    common.add_argument(
        "--debug",
        action="store_true",
        help="Print each command, prefixed with '$ ', before running it.",
    )
    common.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands but do not run them.",
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logs.",
    )
    return common


def _build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(prog="bash-template")
    sub = parser.add_subparsers(dest="action", required=True)

    for name, help_text in (
        ("render", "Print the templated command."),
        ("run", "Template a command and run it."),
    ):
        p = sub.add_parser(name, parents=[common], help=help_text)
        p.add_argument("format", help="Command template, e.g. 'run -t{} -u{name} task'.")
        p.add_argument("args", nargs="*", help="Positional values for {} / {0} fields.")

    p = sub.add_parser("recipe", parents=[common], help="Run the commands of a recipe file.")
    p.add_argument(
        "path",
        type=Path,
        help="Recipe file. Supported: *.json, *.toml, *.yaml, *.yml",
    )
    p.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print the templated commands instead of running them.",
    )
    return parser


def _parse_vars(items: list[str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for item in items:
        name, value = parse_assignment(item)
        out[name] = value
    return out


def _run_recipe(args: argparse.Namespace, executor: Executor, overrides: dict[str, Any], logger: logging.Logger) -> int:
    path: Path = args.path
    if not path.exists():
        logger.error("Recipe not found: %s", path)
        return 2
    try:
        recipe = load_recipe_file(path)
    except ValueError as e:
        logger.error("Failed to load recipe @ %s: %s", path, e)
        return 2

    variables = {**recipe.vars, **overrides}
    desc = recipe.description or path.name
    ver = recipe.version if recipe.version is not None else "?"
    logger.info("# %s v%s @ %s (%d commands)", desc, ver, path, len(recipe.commands))

    for i, cmd in enumerate(recipe.commands, start=1):
        try:
            command = render(cmd.template, **variables)
        except ValueError as e:
            logger.error("Invalid template in %s (command %d): %s", path, i, e)
            return 2
        if args.print_only:
            print(command)
            continue

        branch = "└─" if i == len(recipe.commands) else "├─"
        logger.info("%s %s", branch, command)
        cwd = expand_path(cmd.cwd) if cmd.cwd is not None else None
        result = executor.run(command, cwd=cwd, env=cmd.env or None)
        if not result.ok:
            report_failure(result)
            return 1

    if not args.print_only:
        logger.info("Done.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = _setup_logger(args.verbose)
    try:
        overrides = _parse_vars(args.var)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    options = Options(debug=bool(args.debug), dry_run=bool(args.dry_run))
    executor = Executor(options, logger=logger)

    if args.action == "recipe":
        return _run_recipe(args, executor, overrides, logger)

    try:
        command = render(args.format, *[parse_value(a) for a in args.args], **overrides)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    if args.action == "render":
        print(command)
        return 0

    result = executor.run(command)
    if not result.ok:
        report_failure(result)
        return 1
    return 0
