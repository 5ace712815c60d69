"""
Expression combinators shared by derivers.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..syntax.builders import app
from ..syntax.nodes import Attribute, ExpSequence, Expression, PStr, StrEval
from ..utils.constants import WARNING_ATTRIBUTE


def fold_exprs(
    fn: Callable[[Expression, Expression], Expression],
    exprs: Sequence[Expression],
    unit: Optional[Expression] = None,
) -> Expression:
    """
    Left-fold ``exprs`` with ``fn``; a single expression is returned as is.

    Raises:
        ValueError: If ``exprs`` is empty and no ``unit`` is given
    """
    if not exprs:
        if unit is None:
            raise ValueError("fold_exprs: empty expression list and no unit")
        return unit
    result = exprs[0]
    for e in exprs[1:]:
        result = fn(result, e)
    return result


def seq_reduce(a: Expression, b: Expression, sep: Optional[Expression] = None) -> Expression:
    """``a; b``, or ``a; sep; b`` with a separator."""
    if sep is None:
        return ExpSequence(a, b)
    return ExpSequence(a, ExpSequence(sep, b))


def binop_reduce(op: Expression, a: Expression, b: Expression) -> Expression:
    """``op a b``, e.g. to chain comparisons with ``&&``."""
    return app(op, [a, b])


def attr_warning(expr: Expression) -> Attribute:
    """An ``[@ocaml.warning expr]`` attribute."""
    return Attribute(WARNING_ATTRIBUTE, PStr((StrEval(expr),)))


# wraparound of a 63-bit native int
_NATIVE_INT_MASK = (1 << 63) - 1


def hash_variant(label: str) -> int:
    """Compute the runtime hash of a polymorphic variant tag."""
    accu = 0
    for ch in label.encode("utf-8"):
        accu = (223 * accu + ch) & _NATIVE_INT_MASK
    # reduce to 31 bits
    accu &= (1 << 31) - 1
    # signed for 64-bit architectures
    if accu > 0x3FFFFFFF:
        return accu - (1 << 31)
    return accu
