"""Typed run-spec parsing for declarative dashboard step lists.

A run-spec is a YAML file naming a sequence of CLI steps plus optional
defaults for the data root and collection. Parsing is strict: unknown
keys, commands, or versions fail with a ``SalesboardRunSpecError``.
Relative local paths inside steps resolve against the spec file directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

import yaml

from core.errors import SalesboardRunSpecError

RunSpecCommand = Literal["upload", "kpis", "filters", "table", "charts"]
SUPPORTED_RUN_SPEC_COMMANDS: tuple[RunSpecCommand, ...] = (
    "upload",
    "kpis",
    "filters",
    "table",
    "charts",
)
SUPPORTED_RUN_SPEC_VERSION = 1

_ROOT_KEYS = frozenset({"version", "defaults", "steps"})
_DEFAULTS_KEYS = frozenset({"data_root", "collection"})


@dataclass(frozen=True)
class RunSpecDefaults:
    """Client overrides applied before the first step runs."""

    data_root: str | None = None
    collection: str | None = None


@dataclass(frozen=True)
class RunSpecStep:
    """One command and its arguments."""

    command: RunSpecCommand
    args: Mapping[str, object]


@dataclass(frozen=True)
class RunSpec:
    """Validated run-spec root object."""

    version: int
    defaults: RunSpecDefaults
    steps: tuple[RunSpecStep, ...]
    base_dir: Path | None = None


def load_run_spec(spec_path: str) -> RunSpec:
    """Load and validate a YAML run-spec from disk.

    Args:
        spec_path: File path to YAML run-spec.

    Returns:
        Fully validated run-spec object.

    Raises:
        SalesboardRunSpecError: If the file is unreadable or fails validation.
    """
    spec_file = Path(spec_path).expanduser().resolve()
    root = _as_mapping(_read_yaml(spec_file), "run spec root")
    _reject_unknown_keys(root, _ROOT_KEYS, "run spec root")
    return RunSpec(
        version=_parse_version(root.get("version")),
        defaults=_parse_defaults(root.get("defaults")),
        steps=_parse_steps(root.get("steps")),
        base_dir=spec_file.parent,
    )


def _read_yaml(spec_file: Path) -> object:
    if not spec_file.is_file():
        raise SalesboardRunSpecError(
            f"Run spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = yaml.safe_load(spec_file.read_text(encoding="utf-8"))
    except OSError as error:
        raise SalesboardRunSpecError(
            f"Failed to read run spec at {spec_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise SalesboardRunSpecError(
            f"Run spec at {spec_file} is not valid YAML: {error}."
        ) from error
    if payload is None:
        raise SalesboardRunSpecError(
            f"Run spec at {spec_file} is empty. Define 'version' and 'steps'."
        )
    return cast(object, payload)


def _parse_version(raw_version: object) -> int:
    if raw_version != SUPPORTED_RUN_SPEC_VERSION or isinstance(raw_version, bool):
        raise SalesboardRunSpecError(
            f"Unsupported run spec version {raw_version!r}. "
            f"Set version: {SUPPORTED_RUN_SPEC_VERSION}."
        )
    return SUPPORTED_RUN_SPEC_VERSION


def _parse_defaults(raw_defaults: object) -> RunSpecDefaults:
    if raw_defaults is None:
        return RunSpecDefaults()
    defaults = _as_mapping(raw_defaults, "run spec defaults")
    _reject_unknown_keys(defaults, _DEFAULTS_KEYS, "run spec defaults")
    return RunSpecDefaults(
        data_root=_text_or_none(defaults, "data_root"),
        collection=_text_or_none(defaults, "collection"),
    )


def _parse_steps(raw_steps: object) -> tuple[RunSpecStep, ...]:
    if not isinstance(raw_steps, Sequence) or isinstance(raw_steps, (str, bytes)):
        raise SalesboardRunSpecError(
            "Run spec field 'steps' must be a list of commands. Add at least one step."
        )
    if not raw_steps:
        raise SalesboardRunSpecError("Run spec field 'steps' must include at least one step.")
    return tuple(_parse_step(raw_step, position) for position, raw_step in enumerate(raw_steps, 1))


def _parse_step(raw_step: object, position: int) -> RunSpecStep:
    """Parse one step written either inline or with a nested ``args`` mapping."""
    context = f"run spec step #{position}"
    step = _as_mapping(raw_step, context)
    command = step.get("command")
    if command not in SUPPORTED_RUN_SPEC_COMMANDS:
        raise SalesboardRunSpecError(
            f"Unsupported command {command!r} in {context}. "
            f"Use one of: {', '.join(SUPPORTED_RUN_SPEC_COMMANDS)}."
        )
    inline_args = {key: value for key, value in step.items() if key not in ("command", "args")}
    if "args" not in step:
        return RunSpecStep(command=cast(RunSpecCommand, command), args=inline_args)
    if inline_args:
        raise SalesboardRunSpecError(
            f"Invalid {context}: move {', '.join(sorted(inline_args))} under 'args' "
            "or drop the 'args' mapping."
        )
    return RunSpecStep(
        command=cast(RunSpecCommand, command),
        args=_as_mapping(step["args"], f"{context} args"),
    )


def _as_mapping(value: object, context: str) -> dict[str, object]:
    if not isinstance(value, Mapping):
        raise SalesboardRunSpecError(
            f"Invalid {context}: expected a mapping, got {type(value).__name__}."
        )
    non_text_keys = [key for key in value if not isinstance(key, str)]
    if non_text_keys:
        raise SalesboardRunSpecError(
            f"Invalid {context}: keys must be strings, got {non_text_keys[0]!r}."
        )
    return dict(value)


def _reject_unknown_keys(
    mapping: Mapping[str, object],
    allowed: frozenset[str],
    context: str,
) -> None:
    unknown_keys = sorted(set(mapping) - allowed)
    if unknown_keys:
        raise SalesboardRunSpecError(
            f"Unknown fields in {context}: {', '.join(unknown_keys)}. "
            f"Allowed fields: {', '.join(sorted(allowed))}."
        )


def _text_or_none(mapping: Mapping[str, object], field_name: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if not isinstance(raw_value, str):
        raise SalesboardRunSpecError(f"Run spec field '{field_name}' must be a string.")
    return raw_value.strip() or None
