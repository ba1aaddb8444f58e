"""
Query-fragment compilers.

Turns loosely-typed caller input into parameterized SQL fragments:

- ``compile_filters``: query-string filters -> WHERE predicate + parameters
- ``sql_for_partial_update``: partial update payload -> SET clause + parameters

Values never reach the fragment text; each fragment references its value
through a positional placeholder ``:pN``, where N is the 1-based index of the
value in the returned parameter list.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import BadRequestError

TRUE_TOKEN = "true"
FALSE_TOKEN = "false"


def placeholder(index: int) -> str:
    return f":p{index}"


class FilterMode(str, Enum):
    CONTAINS = "contains"
    MIN = "min"
    MAX = "max"
    PRESENCE = "presence"


@dataclass(frozen=True)
class FilterField:
    """
    One recognized filter.

    Args:
        name: Caller-facing filter name (e.g. "minSalary")
        column: Physical column the filter applies to
        mode: Comparison mode
        value_type: Coercion applied to MIN/MAX values
        sentinel: Zero value used by PRESENCE filters
        cast: SQL type the column is cast to before comparing, if any
    """

    name: str
    column: str
    mode: FilterMode
    value_type: Callable[[Any], Any] = str
    sentinel: Any = None
    cast: Optional[str] = None

    @property
    def expression(self) -> str:
        if self.cast:
            return f"CAST({self.column} AS {self.cast})"
        return self.column


@dataclass(frozen=True)
class FilterSpec:
    """Ordered, immutable set of filters supported by one resource."""

    fields: Tuple[FilterField, ...]

    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def range_pairs(self) -> List[Tuple[FilterField, FilterField]]:
        """MIN/MAX filters that share a column."""
        pairs = []
        for low in self.fields:
            if low.mode is not FilterMode.MIN:
                continue
            for high in self.fields:
                if high.mode is FilterMode.MAX and high.column == low.column:
                    pairs.append((low, high))
        return pairs


@dataclass
class CompiledPredicate:
    fragments: List[str] = field(default_factory=list)
    params: List[Any] = field(default_factory=list)

    def add(self, template: str, value: Any) -> None:
        """Append a fragment whose ``{}`` is replaced by the next placeholder."""
        self.params.append(value)
        self.fragments.append(template.format(placeholder(len(self.params))))

    @property
    def text(self) -> str:
        return " AND ".join(self.fragments)

    def __bool__(self) -> bool:
        return bool(self.fragments)

    def where_clause(self) -> str:
        """``WHERE ...`` or an empty string when there is nothing to filter on."""
        return f"WHERE {self.text}" if self.fragments else ""


@dataclass
class CompiledAssignment:
    fragments: List[str] = field(default_factory=list)
    params: List[Any] = field(default_factory=list)

    @property
    def text(self) -> str:
        return ", ".join(self.fragments)

    @property
    def next_index(self) -> int:
        """Placeholder index available to the caller (e.g. for the WHERE key)."""
        return len(self.params) + 1


def _coerce(spec_field: FilterField, raw: Any) -> Any:
    try:
        return spec_field.value_type(raw)
    except (TypeError, ValueError):
        raise BadRequestError(f"{spec_field.name} must be a valid {spec_field.value_type.__name__}")


def _supplied(filters: Mapping[str, Any], name: str) -> bool:
    """Missing, None and empty-string values all count as not supplied."""
    return filters.get(name) not in (None, "")


def _check_ranges(filters: Mapping[str, Any], spec: FilterSpec) -> None:
    for low, high in spec.range_pairs():
        if _supplied(filters, low.name) and _supplied(filters, high.name):
            low_value = _coerce(low, filters[low.name])
            high_value = _coerce(high, filters[high.name])
            if low_value > high_value:
                raise BadRequestError(f"{low.name} cannot be greater than {high.name}")


def compile_filters(filters: Optional[Mapping[str, Any]], spec: FilterSpec) -> CompiledPredicate:
    """
    Compile a filter request into a WHERE predicate.

    Filters are visited in FilterSpec order; unrecognized names are ignored.
    An empty result means "no WHERE clause".

    Args:
        filters: Filter name -> raw value (usually strings from a query string)
        spec: Filters supported by the resource

    Returns:
        CompiledPredicate with fragments joined by AND and aligned parameters

    Raises:
        BadRequestError: if a MIN/MAX pair is inverted or a value cannot be coerced
    """
    predicate = CompiledPredicate()
    if not filters:
        return predicate

    _check_ranges(filters, spec)

    for spec_field in spec.fields:
        if not _supplied(filters, spec_field.name):
            continue
        raw = filters[spec_field.name]
        column = spec_field.expression

        if spec_field.mode is FilterMode.CONTAINS:
            predicate.add(f"lower({column}) LIKE lower({{}})", f"%{raw}%")
        elif spec_field.mode is FilterMode.MIN:
            predicate.add(f"{column} >= {{}}", _coerce(spec_field, raw))
        elif spec_field.mode is FilterMode.MAX:
            predicate.add(f"{column} <= {{}}", _coerce(spec_field, raw))
        elif spec_field.mode is FilterMode.PRESENCE:
            if raw == TRUE_TOKEN:
                predicate.add(f"{column} <> {{}}", spec_field.sentinel)
            elif raw == FALSE_TOKEN:
                predicate.add(f"{column} = {{}}", spec_field.sentinel)

    return predicate


def sql_for_partial_update(data: Mapping[str, Any], js_to_sql: Dict[str, str]) -> CompiledAssignment:
    """
    Build the SET clause for a partial update.

    Example:
        >>> compiled = sql_for_partial_update({"firstName": "Aliya", "age": 32},
        ...                                   {"firstName": "first_name"})
        >>> compiled.text
        '"first_name"=:p1, "age"=:p2'
        >>> compiled.params
        ['Aliya', 32]

    Args:
        data: Logical field name -> new value, in the order supplied
        js_to_sql: Logical field name -> column name; missing keys map to themselves

    Returns:
        CompiledAssignment

    Raises:
        BadRequestError: if ``data`` is empty
    """
    if not data:
        raise BadRequestError("No data")

    compiled = CompiledAssignment()
    for idx, (key, value) in enumerate(data.items(), start=1):
        column = js_to_sql.get(key, key)
        compiled.fragments.append(f'"{column}"={placeholder(idx)}')
        compiled.params.append(value)
    return compiled
