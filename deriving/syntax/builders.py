"""
Syntax tree construction helpers.

Short constructors for the nodes generators build most often. Names that
accept a dotted string (``evar("M.f")``) split it into a qualified
identifier.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Union

from .nodes import (
    Attribute,
    CoreType,
    ExpApply,
    ExpConstant,
    ExpConstruct,
    ExpExtension,
    ExpFun,
    ExpIdent,
    ExpLet,
    ExpRecord,
    ExpTuple,
    ExpVariant,
    Expression,
    Longident,
    PStr,
    PTyp,
    PatConstruct,
    PatVar,
    Pattern,
    StrEval,
    TypArrow,
    TypConstr,
    TypTuple,
    TypVar,
    ValueBinding,
)

Ident = Union[str, Longident]


def lid(name: Ident) -> Longident:
    """Coerce a dotted string to a Longident."""
    if isinstance(name, Longident):
        return name
    return Longident.parse(name)


# Expressions

def evar(name: Ident) -> ExpIdent:
    return ExpIdent(lid(name))


def constr(name: Ident, arg: Optional[Expression] = None) -> ExpConstruct:
    return ExpConstruct(lid(name), arg)


def variant(label: str, arg: Optional[Expression] = None) -> ExpVariant:
    return ExpVariant(label, arg)


def int_const(value: int) -> ExpConstant:
    return ExpConstant(value)


def str_const(value: str) -> ExpConstant:
    return ExpConstant(value)


def bool_const(value: bool) -> ExpConstruct:
    return constr("true" if value else "false")


def unit() -> ExpConstruct:
    return constr("()")


def app(func: Expression, args: Sequence[Expression]) -> ExpApply:
    """Unlabelled application ``func a1 a2 ...``."""
    return ExpApply(func, tuple(("", a) for a in args))


def lam(pattern: Pattern, body: Expression) -> ExpFun:
    return ExpFun(pattern, body)


def let_in(bindings: Iterable[ValueBinding], body: Expression, recursive: bool = False) -> ExpLet:
    return ExpLet(tuple(bindings), body, recursive)


def binding(name: str, expr: Expression) -> ValueBinding:
    return ValueBinding(pvar(name), expr)


def record(fields: Iterable[tuple], base: Optional[Expression] = None) -> ExpRecord:
    return ExpRecord(tuple((lid(k), v) for k, v in fields), base)


def tuple_(items: Sequence[Expression]) -> ExpTuple:
    return ExpTuple(tuple(items))


def extension(name: str, typ: CoreType) -> ExpExtension:
    """An inline ``[%name: typ]`` placeholder."""
    return ExpExtension(name, PTyp(typ))


# Patterns

def pvar(name: str) -> PatVar:
    return PatVar(name)


def punit() -> PatConstruct:
    return PatConstruct(lid("()"))


# Types

def tvar(name: str) -> TypVar:
    return TypVar(name)


def tconstr(name: Ident, args: Sequence[CoreType] = ()) -> TypConstr:
    return TypConstr(lid(name), tuple(args))


def tarrow(lhs: CoreType, rhs: CoreType, label: str = "") -> TypArrow:
    return TypArrow(lhs, rhs, label)


def ttuple(items: Sequence[CoreType]) -> TypTuple:
    return TypTuple(tuple(items))


# Structure items and attributes

def str_eval(expr: Expression) -> StrEval:
    return StrEval(expr)


def attribute(name: str, expr: Optional[Expression] = None) -> Attribute:
    """``[@name expr]``, or the empty ``[@name]``."""
    if expr is None:
        return Attribute(name, PStr())
    return Attribute(name, PStr((StrEval(expr),)))
