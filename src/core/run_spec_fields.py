"""Step argument readers shared by run-spec commands.

Every reader raises ``SalesboardRunSpecError`` naming the offending field, so
a bad YAML value fails before any store call is made.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.errors import SalesboardRunSpecError
from core.types import FilterDimension

StepArgs = Mapping[str, object]


def step_path(args: StepArgs, field_name: str, *, required: bool = False) -> str | None:
    """Return a non-blank path-like string argument, or None when absent."""
    raw_value = args.get(field_name)
    if raw_value is not None and not isinstance(raw_value, str):
        raise SalesboardRunSpecError(
            f"Run-spec field '{field_name}' must be a path string, got {type(raw_value).__name__}."
        )
    text = raw_value.strip() if raw_value else ""
    if text:
        return text
    if required:
        raise SalesboardRunSpecError(f"Run-spec step is missing required field '{field_name}'.")
    return None


def step_row_limit(args: StepArgs, field_name: str, default_value: int) -> int:
    """Return a positive row limit, falling back to ``default_value``."""
    raw_value = args.get(field_name, default_value)
    if isinstance(raw_value, bool) or not isinstance(raw_value, int) or raw_value < 1:
        raise SalesboardRunSpecError(
            f"Run-spec field '{field_name}' must be a positive integer, got {raw_value!r}."
        )
    return raw_value


def parse_filter_selections(args: StepArgs) -> dict[FilterDimension, list[Any]]:
    """Read per-dimension filter selections from step arguments.

    Each dimension is keyed by its record attribute name, for example
    ``city: [Austin, Round Rock]`` or ``year: 2022``.
    """
    selections: dict[FilterDimension, list[Any]] = {}
    for dimension in FilterDimension:
        raw_value = args.get(dimension.attribute)
        if raw_value is None:
            continue
        values = list(raw_value) if isinstance(raw_value, (list, tuple)) else [raw_value]
        for value in values:
            if isinstance(value, (Mapping, list, tuple)):
                raise SalesboardRunSpecError(
                    f"Run-spec field '{dimension.attribute}' must be a value or a list of values."
                )
        selections[dimension] = values
    return selections
