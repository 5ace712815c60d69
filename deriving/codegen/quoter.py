"""
Quoting and Hygiene for generated expressions.

A deriver that splices user-supplied code (say a custom printer from a
``[@printer f]`` attribute) into the code it generates must not evaluate
it more than once or let it be captured by names the generated code
binds. ``quote`` lifts such an expression into a uniquely named thunk;
``sanitize`` binds all thunks around the generated body and opens the
runtime module so library names resolve to a fixed environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from ..syntax.builders import app, binding, evar, lam, punit, str_const, unit
from ..syntax.nodes import ExpLet, ExpLetOpen, Expression, Longident, ValueBinding
from ..utils.config import get_config
from .combinators import attr_warning


@dataclass
class Quoter:
    """Accumulates thunk bindings for one generated expression."""

    next_id: int = 0
    bindings: List[ValueBinding] = field(default_factory=list)


def quote(quoter: Quoter, expr: Expression) -> Expression:
    """
    Lift ``expr`` into a fresh thunk binding and return a call to it.

    The returned call may be duplicated freely; ``expr`` itself appears
    once in the sanitized output.
    """
    name = f"{get_config().codegen.quote_prefix}{quoter.next_id}"
    quoter.next_id += 1
    quoter.bindings.append(binding(name, lam(punit(), expr)))
    return app(evar(name), [unit()])


def sanitize(expr: Expression, quoter: Optional[Quoter] = None) -> Expression:
    """
    Wrap a generated expression in its hygiene scope.

    Produces ``let __0 = fun () -> ... and __1 = ... in
    ((let open! Runtime in expr) [@ocaml.warning "-A"])``. The let is
    omitted when nothing was quoted.
    """
    codegen = get_config().codegen
    scoped = ExpLetOpen(
        Longident.parse(codegen.runtime_module),
        expr,
        override=True,
        attributes=(attr_warning(str_const(codegen.warning_spec)),),
    )
    if quoter is None or not quoter.bindings:
        return scoped
    return ExpLet(tuple(quoter.bindings), scoped, recursive=False)


def with_quoter(fn: Callable[[Quoter, Any], Expression], arg: Any) -> Expression:
    """Run ``fn(quoter, arg)`` with a fresh Quoter and sanitize the result."""
    quoter = Quoter()
    return sanitize(fn(quoter, arg), quoter=quoter)
