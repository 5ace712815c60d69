"""
Free type variable analysis.

A generated binding whose body is polymorphic needs an explicitly
quantified signature (``let show : 'a. ('a -> string) -> 'a list -> string``)
so that it can be used polymorphically inside a recursive group.
"""

from __future__ import annotations

from typing import List

from ..syntax.nodes import (
    CoreType,
    RowInherit,
    RowTag,
    TypAlias,
    TypAny,
    TypArrow,
    TypConstr,
    TypPoly,
    TypTuple,
    TypVar,
    TypVariant,
)


def _free_in(typ: CoreType) -> List[str]:
    if isinstance(typ, TypAny):
        return []
    if isinstance(typ, TypVar):
        return [typ.name]
    if isinstance(typ, TypArrow):
        return _free_in(typ.lhs) + _free_in(typ.rhs)
    if isinstance(typ, TypTuple):
        return [name for item in typ.items for name in _free_in(item)]
    if isinstance(typ, TypConstr):
        return [name for arg in typ.args for name in _free_in(arg)]
    if isinstance(typ, TypAlias):
        return [typ.name] + _free_in(typ.body)
    if isinstance(typ, TypPoly):
        return [name for name in _free_in(typ.body) if name not in typ.bound]
    if isinstance(typ, TypVariant):
        names: List[str] = []
        for row in typ.rows:
            if isinstance(row, RowTag):
                for arg in row.args:
                    names += _free_in(arg)
            elif isinstance(row, RowInherit):
                names += _free_in(row.typ)
            else:
                raise AssertionError(f"unsupported variant row {type(row).__name__}")
        return names
    raise AssertionError(f"unsupported type expression {type(typ).__name__}")


def free_vars_in_core_type(typ: CoreType) -> List[str]:
    """
    Return the free type variables of ``typ``.

    Each name appears once, in order of first occurrence.

    Raises:
        AssertionError: On type shapes that cannot occur in a deriving
            context (objects, classes, packages)
    """
    return list(dict.fromkeys(_free_in(typ)))


def strong_type_of_type(typ: CoreType) -> TypPoly:
    """Quantify ``typ`` over all of its free variables."""
    return TypPoly(tuple(free_vars_in_core_type(typ)), typ)
