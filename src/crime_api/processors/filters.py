"""
filters.py
----------
Turns optional, comma-separated query parameters into one SQL predicate
plus its bind parameters.

Every value travels as a named bind parameter (:code_0, :code_1, ...);
the SQL text only ever contains column expressions we declared ourselves.

Example:
    dims = [FilterDimension("code", "code"), FilterDimension("grid", "police_grid")]
    compiled = compile_filters({"code": "100,110", "grid": "87"}, dims)
    compiled.clause  -> "WHERE code IN (:code_0, :code_1) AND police_grid IN (:grid_0)"
    compiled.params  -> {"code_0": 100, "code_1": 110, "grid_0": 87}
"""

import re
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from crime_api.errors import InvalidParameterError

IN = "IN"
AT_LEAST = ">="
AT_MOST = "<="

# SQLite INTEGER is a signed 64-bit value
INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def parse_int(token: str) -> int:
    """
    Signed ASCII decimal integer that fits SQLite INTEGER, surrounding
    whitespace allowed. No underscores, no non-ASCII digits.
    """
    token = token.strip()
    if not _DECIMAL.fullmatch(token):
        raise ValueError(f"not a decimal integer: {token!r}")
    value = int(token, 10)
    if value < INT_MIN or value > INT_MAX:
        raise ValueError(f"out of range: {token}")
    return value


def parse_iso_date(token: str) -> str:
    """YYYY-MM-DD; returned as text so it compares against SQLite's date()."""
    return date.fromisoformat(token.strip()).isoformat()


class FilterDimension:
    """
    One filterable query parameter.

    Args:
        param: query parameter name, also the prefix of its bind names
        column: SQL column expression the values are compared with
        parser: turns one comma-separated token into a bind value; raises ValueError
        operator: IN (default) for list membership, or >= / <= for a bound,
            which takes exactly one value
    """

    def __init__(self, param: str, column: str, parser: Callable[[str], Any] = parse_int,
                 operator: str = IN):
        if operator not in (IN, AT_LEAST, AT_MOST):
            raise ValueError(f"Unsupported filter operator: {operator}")
        self.param = param
        self.column = column
        self.parser = parser
        self.operator = operator

    def parse(self, raw: str) -> List[Any]:
        values = []
        for token in raw.split(","):
            if not token.strip():
                raise InvalidParameterError(self.param, raw, "empty value in list")
            try:
                values.append(self.parser(token))
            except ValueError:
                raise InvalidParameterError(self.param, token)
        if self.operator != IN and len(values) != 1:
            raise InvalidParameterError(self.param, raw, "takes a single value")
        return values

    def condition(self, names: Sequence[str]) -> str:
        if self.operator == IN:
            placeholders = ", ".join(f":{name}" for name in names)
            return f"{self.column} IN ({placeholders})"

        return f"{self.column} {self.operator} :{names[0]}"

    def __repr__(self):
        return f"FilterDimension({self.param!r}, {self.column!r}, operator={self.operator!r})"


class CompiledFilter:
    """Predicate text and its bind parameters, in the order the clauses were added."""

    def __init__(self):
        self.conditions: List[str] = []
        self.params: Dict[str, Any] = {}

    @property
    def clause(self) -> str:
        """'' when nothing was filtered, otherwise 'WHERE a AND b ...'."""
        if not self.conditions:
            return ""
        return "WHERE " + " AND ".join(self.conditions)

    @property
    def values(self) -> List[Any]:
        return list(self.params.values())

    def add(self, dimension: FilterDimension, values: Sequence[Any]):
        names = [f"{dimension.param}_{i}" for i in range(len(values))]
        self.conditions.append(dimension.condition(names))
        for name, value in zip(names, values):
            self.params[name] = value

    def __bool__(self):
        return bool(self.conditions)


def compile_filters(args: Mapping[str, Optional[str]],
                    dimensions: Sequence[FilterDimension]) -> CompiledFilter:
    """
    Build the WHERE clause for the dimensions present in args.

    Dimensions are checked in the order given, so the clause order (and the
    order of the bind parameters) never depends on the order of the query
    string. Parameters that are not declared are ignored.

    Raises:
        InvalidParameterError: a token did not parse.
    """
    compiled = CompiledFilter()
    for dimension in dimensions:
        raw = args.get(dimension.param)
        if raw is None:
            continue
        compiled.add(dimension, dimension.parse(raw))
    return compiled
