from __future__ import annotations

import json
from dataclasses import dataclass, field
from json import JSONDecodeError
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class RecipeCommand:
    template: str
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LoadedRecipe:
    path: Path
    version: int | None
    description: str | None
    vars: dict[str, Any]
    commands: list[RecipeCommand]


def _require_int(value: Any, *, what: str) -> int:
    # bool is an int subclass; `version = true` is still a mistake.
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"'{what}' must be an integer if present")
    return value


def _require_str(value: Any, *, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{what}' must be a non-empty string")
    return value


def _to_command(raw: Any, *, index: int) -> RecipeCommand:
    if isinstance(raw, str):
        return RecipeCommand(template=_require_str(raw, what=f"command {index}"))
    if not isinstance(raw, dict):
        raise ValueError(f"Command {index} must be a string or a table")

    unknown = set(raw.keys()) - {"template", "cwd", "env"}
    if unknown:
        raise ValueError(f"Command {index} has unknown keys: {', '.join(sorted(unknown))}")
    template = _require_str(raw.get("template"), what=f"command {index}.template")

    cwd = raw.get("cwd")
    if cwd is not None:
        _require_str(cwd, what=f"command {index}.cwd")

    env = raw.get("env")
    if env is None:
        env = {}
    if not isinstance(env, dict):
        raise ValueError(f"'command {index}.env' must be a table if present")
    return RecipeCommand(
        template=template,
        cwd=cwd,
        env={str(k): str(v) for k, v in env.items()},
    )


def _normalize_top_level(obj: Any) -> tuple[int | None, str | None, dict[str, Any], list[Any]]:
    if isinstance(obj, list):
        return None, None, {}, obj
    if isinstance(obj, dict):
        version = obj.get("version")
        description = obj.get("description")
        if version is not None:
            _require_int(version, what="version")
        if description is not None and not isinstance(description, str):
            raise ValueError("'description' must be a string if present")

        variables = obj.get("vars")
        if variables is None:
            variables = {}
        if not isinstance(variables, dict):
            raise ValueError("'vars' must be a table if present")

        # Accept both `commands = [...]` and TOML-style [[command]] tables.
        if "commands" in obj and "command" in obj:
            raise ValueError("Use either 'commands' or 'command', not both")
        cmds = obj.get("commands", obj.get("command"))
        if not isinstance(cmds, list):
            raise ValueError("Recipe requires a 'commands' list (or [[command]] tables)")

        extra_keys = set(obj.keys()) - {"version", "description", "vars", "commands", "command"}
        if extra_keys:
            extra = ", ".join(sorted(extra_keys))
            raise ValueError(f"Unknown top-level keys in recipe: {extra}")
        return version, description, variables, cmds
    raise ValueError("Recipe must be a list of commands or {version, vars, commands:[...]}.")


def _load_json(text: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e


def _load_toml(text: str, path: Path) -> Any:
    # TOML parsing is in stdlib as of Python 3.11. On older Pythons, use tomli.
    try:
        import tomllib  # type: ignore
    except ImportError:  # pragma: no cover
        try:
            import tomli as tomllib  # type: ignore
        except ImportError as e:
            raise ValueError(
                "TOML recipe support requires Python 3.11+ (tomllib) or 'tomli' installed. "
                f"Failed to import TOML parser for {path}."
            ) from e
    try:
        return tomllib.loads(text)
    except Exception as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def _load_yaml(text: str, path: Path) -> Any:
    try:
        import yaml  # type: ignore
    except ImportError as e:
        raise ValueError(
            "YAML recipe support requires PyYAML. Install it (e.g. 'python -m pip install pyyaml') "
            f"and retry loading {path}."
        ) from e
    try:
        return yaml.safe_load(text)
    except Exception as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None and hasattr(mark, "line") and hasattr(mark, "column"):
            line = int(mark.line) + 1
            col = int(mark.column) + 1
            raise ValueError(f"Invalid YAML in {path} at line {line}, column {col}: {e}") from e
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_recipe_file(path: Path) -> LoadedRecipe:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    if suffix == ".json":
        raw = _load_json(text, path)
    elif suffix == ".toml":
        raw = _load_toml(text, path)
    elif suffix in (".yaml", ".yml"):
        raw = _load_yaml(text, path)
    else:
        raise ValueError(
            f"Unsupported recipe format for {path} (expected .json, .toml, .yaml, .yml)."
        )

    try:
        version, description, variables, cmds = _normalize_top_level(raw)
        commands = [_to_command(item, index=i) for i, item in enumerate(cmds, start=1)]
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e
    return LoadedRecipe(
        path=path,
        version=version,
        description=description,
        vars=dict(variables),
        commands=commands,
    )
