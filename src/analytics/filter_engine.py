"""Conjunctive multi-select filter over four record dimensions.

Each dimension keeps a set of allowed values typed by the dimension's
declared type, so a city named ``"2020"`` never matches the year 2020.
A record is visible only when every dimension allows its value.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from core.constants import NO, YES
from core.errors import SalesboardFilterError
from core.types import CanonicalRecord, FilterDimension

NEW_CONSTRUCTION_OPTIONS = (NO, YES)


class FilterState:
    """Allowed-value sets for every filter dimension."""

    def __init__(self, allowed: Mapping[FilterDimension, Iterable[Any]] | None = None) -> None:
        """Create a filter state.

        Args:
            allowed: Optional initial allowed values per dimension; missing
                dimensions start empty.
        """
        self._allowed: dict[FilterDimension, set[Any]] = {
            dimension: set() for dimension in FilterDimension
        }
        for dimension, values in (allowed or {}).items():
            self.select_only(dimension, values)

    @classmethod
    def all_selected(cls, records: Iterable[CanonicalRecord]) -> "FilterState":
        """Build a state that allows every observed value."""
        state = cls()
        state.reset_to_all(records)
        return state

    def reset_to_all(self, records: Iterable[CanonicalRecord]) -> None:
        """Allow every observed value; new construction always allows Yes and No."""
        observed: dict[FilterDimension, set[Any]] = {
            dimension: set() for dimension in FilterDimension
        }
        for record in records:
            for dimension in FilterDimension:
                observed[dimension].add(dimension.value_of(record))
        observed[FilterDimension.NEW_CONSTRUCTION] = set(NEW_CONSTRUCTION_OPTIONS)
        self._allowed = observed

    def toggle(self, dimension: FilterDimension, value: Any, included: bool) -> None:
        """Add or remove one value from a dimension.

        Raises:
            SalesboardFilterError: If the value does not fit the dimension type.
        """
        typed_value = coerce_dimension_value(dimension, value)
        if included:
            self._allowed[dimension].add(typed_value)
        else:
            self._allowed[dimension].discard(typed_value)

    def clear(self, dimension: FilterDimension) -> None:
        """Remove every allowed value from a dimension."""
        self._allowed[dimension] = set()

    def select_only(self, dimension: FilterDimension, values: Iterable[Any]) -> None:
        """Replace a dimension's allowed values.

        Raises:
            SalesboardFilterError: If a value does not fit the dimension type.
        """
        self._allowed[dimension] = {coerce_dimension_value(dimension, value) for value in values}

    def allowed(self, dimension: FilterDimension) -> frozenset[Any]:
        """Return the allowed values for a dimension."""
        return frozenset(self._allowed[dimension])

    def matches(self, record: CanonicalRecord) -> bool:
        """Return whether a record passes every dimension."""
        return all(
            dimension.value_of(record) in self._allowed[dimension] for dimension in FilterDimension
        )

    def apply(self, records: Iterable[CanonicalRecord]) -> list[CanonicalRecord]:
        """Return the ordered subsequence of visible records."""
        return [record for record in records if self.matches(record)]

    def copy(self) -> "FilterState":
        """Return an independent copy of this state."""
        return FilterState({dimension: set(values) for dimension, values in self._allowed.items()})


def build_filter_state(
    records: Iterable[CanonicalRecord],
    selections: Mapping[FilterDimension, Iterable[Any]],
) -> FilterState:
    """Allow every observed value, then narrow the dimensions named in ``selections``.

    Raises:
        SalesboardFilterError: If a selected value does not fit its dimension type.
    """
    state = FilterState.all_selected(records)
    for dimension, values in selections.items():
        state.select_only(dimension, values)
    return state


def coerce_dimension_value(dimension: FilterDimension, value: Any) -> Any:
    """Convert a filter value to the dimension's declared type.

    Args:
        dimension: Target dimension.
        value: Raw value, for example a CLI string.

    Returns:
        Value typed for comparison against record values.

    Raises:
        SalesboardFilterError: If the value cannot be converted.
    """
    if dimension.value_type is int:
        return _coerce_int(dimension, value)
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool) or value is None:
        raise SalesboardFilterError(
            f"Invalid {dimension.attribute} filter value {value!r}: expected text."
        )
    return str(value)


def filter_options(records: Sequence[CanonicalRecord]) -> dict[FilterDimension, tuple[Any, ...]]:
    """List the choices offered for each dimension.

    Years are listed newest first, text values alphabetically, and both
    new construction options are always offered.
    """
    options: dict[FilterDimension, tuple[Any, ...]] = {}
    for dimension in FilterDimension:
        observed = {dimension.value_of(record) for record in records}
        if dimension is FilterDimension.NEW_CONSTRUCTION:
            observed |= set(NEW_CONSTRUCTION_OPTIONS)
        descending = dimension is FilterDimension.YEAR
        options[dimension] = tuple(sorted(observed, reverse=descending))
    return options


def _coerce_int(dimension: FilterDimension, value: Any) -> int:
    if isinstance(value, bool):
        raise SalesboardFilterError(
            f"Invalid {dimension.attribute} filter value {value!r}: expected an integer."
        )
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise SalesboardFilterError(
                f"Invalid {dimension.attribute} filter value '{value}': expected an integer."
            ) from error
    raise SalesboardFilterError(
        f"Invalid {dimension.attribute} filter value {value!r}: expected an integer."
    )
