"""Evaluation of DSQL queries over a store."""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key
from typing import Any, Union

from .objects import Obj, extract_type_encoding
from .store import Store
from .wildcard import wildcard_match

CUSTOM_KEY = "$key"
CUSTOM_VALUE = "$value"
TEMP_KEY = "_key"
TEMP_VALUE = "_value"

_INT_LITERAL = re.compile(r"[+-]?\d+")

_OPERATORS = {
    "=": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_TYPE_WORDS = {"string": "strings", "int": "integers", "float": "floats"}


class QueryError(ValueError):
    """Raised when a query cannot be evaluated."""


@dataclass(frozen=True)
class QuerySelection:
    key_selection: bool = False
    value_selection: bool = False


@dataclass(frozen=True)
class QueryOrder:
    order_by: str = ""
    order: str = ""


@dataclass(frozen=True)
class ColName:
    name: str


class SQLValType(Enum):
    STR = "StrVal"
    INT = "IntVal"
    FLOAT = "FloatVal"
    HEX_NUM = "HexNum"
    HEX = "HexVal"
    VAL_ARG = "ValArg"
    BIT = "BitVal"


@dataclass(frozen=True)
class SQLVal:
    type: SQLValType
    val: str


@dataclass(frozen=True)
class NullVal:
    pass


@dataclass(frozen=True)
class ComparisonExpr:
    left: Expr
    operator: str
    right: Expr


@dataclass(frozen=True)
class AndExpr:
    left: Expr
    right: Expr


@dataclass(frozen=True)
class OrExpr:
    left: Expr
    right: Expr


Expr = Union[ColName, SQLVal, NullVal, ComparisonExpr, AndExpr, OrExpr]


@dataclass(frozen=True)
class DSQLQuery:
    key_regex: str = ""
    selection: QuerySelection = field(default_factory=QuerySelection)
    order_by: QueryOrder = field(default_factory=QueryOrder)
    where: Expr | None = None
    limit: int = 0


@dataclass
class ResultRow:
    key: str
    value: Obj | None


def _type_name(value: Any) -> str:
    return "<nil>" if value is None else type(value).__name__


def _obj_value_and_type(obj: Obj) -> tuple[Any, str]:
    value = obj.value
    if isinstance(value, str):
        return value, "string"
    if isinstance(value, int) and not isinstance(value, bool):
        return value, "int"
    if isinstance(value, float):
        return value, "float"
    raise QueryError(f"unsupported value type: {_type_name(value)}")


def _sql_val_value_and_type(sql_val: SQLVal) -> tuple[Any, str]:
    if sql_val.type is SQLValType.STR:
        return sql_val.val, "string"
    if sql_val.type is SQLValType.INT:
        if not _INT_LITERAL.fullmatch(sql_val.val):
            raise QueryError(f"invalid integer literal: {sql_val.val!r}")
        return int(sql_val.val), "int"
    if sql_val.type is SQLValType.FLOAT:
        try:
            return float(sql_val.val), "float"
        except ValueError as exc:
            raise QueryError(f"invalid float literal: {sql_val.val!r}") from exc
    raise QueryError(f"unsupported SQLVal type: {sql_val.type.value}")


def _value_and_type(expr: Expr, row: ResultRow) -> tuple[Any, str]:
    if isinstance(expr, ColName):
        if expr.name == TEMP_KEY:
            return row.key, "string"
        if expr.name == TEMP_VALUE:
            return _obj_value_and_type(row.value)
        raise QueryError(f"unknown column: {expr.name}")
    if isinstance(expr, SQLVal):
        return _sql_val_value_and_type(expr)
    raise QueryError(f"unsupported expression type: {type(expr).__name__}")


def _evaluate_comparison(expr: ComparisonExpr, row: ResultRow) -> bool:
    left, left_type = _value_and_type(expr.left, row)
    right, right_type = _value_and_type(expr.right, row)
    if left_type != right_type:
        raise QueryError(f"incompatible types in comparison: {left_type} and {right_type}")
    compare = _OPERATORS.get(expr.operator)
    if compare is None:
        raise QueryError(f"unsupported operator for {_TYPE_WORDS[left_type]}: {expr.operator}")
    return compare(left, right)


def _evaluate(expr: Expr, row: ResultRow) -> bool:
    if isinstance(expr, ComparisonExpr):
        return _evaluate_comparison(expr, row)
    if isinstance(expr, AndExpr):
        left = _evaluate(expr.left, row)
        right = _evaluate(expr.right, row)
        return left and right
    if isinstance(expr, OrExpr):
        left = _evaluate(expr.left, row)
        right = _evaluate(expr.right, row)
        return left or right
    raise QueryError(f"unsupported expression type: {type(expr).__name__}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _value_less(order: str, a: Obj | None, b: Obj | None) -> bool:
    if a is None or b is None:
        return a is None if order == "asc" else b is None
    if extract_type_encoding(a) != extract_type_encoding(b):
        return True
    va, vb = a.value, b.value
    if isinstance(va, str):
        if not isinstance(vb, str):
            return True
    elif _is_int(va):
        if not _is_int(vb):
            return True
        # Integer ordering only looks at the low byte of each value.
        va, vb = va & 0xFF, vb & 0xFF
    else:
        return True
    return va < vb if order == "asc" else va > vb


def _sort_rows(query: DSQLQuery, rows: list[ResultRow]) -> None:
    order = query.order_by.order
    if query.order_by.order_by == CUSTOM_KEY:
        rows.sort(key=lambda row: row.key, reverse=order == "desc")
    elif query.order_by.order_by == CUSTOM_VALUE:

        def compare(x: ResultRow, y: ResultRow) -> int:
            if _value_less(order, x.value, y.value):
                return -1
            if _value_less(order, y.value, x.value):
                return 1
            return 0

        rows.sort(key=cmp_to_key(compare))


def execute_query(query: DSQLQuery, store: Store) -> list[ResultRow]:
    """Return the rows of ``store`` selected, filtered, ordered and limited by ``query``."""
    rows = []
    for key, obj in store.items():
        if not wildcard_match(query.key_regex, key):
            continue
        row = ResultRow(key, obj)
        if query.where is not None and not _evaluate(query.where, row):
            continue
        rows.append(row)

    _sort_rows(query, rows)

    if not query.selection.key_selection:
        for row in rows:
            row.key = ""
    if not query.selection.value_selection:
        for row in rows:
            row.value = None

    if 0 < query.limit < len(rows):
        rows = rows[: query.limit]
    return rows