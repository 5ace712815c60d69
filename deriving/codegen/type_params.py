"""
Type Parameter Folding.

Generated functions for a parameterized type take one extra argument per
type variable: ``show_list`` for ``'a list`` needs to know how to show an
``'a``. The folds below walk the declared parameters, skipping wildcards,
and the ``poly_*`` helpers build the matching abstractions, applications
and arrow types.
"""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from ..syntax.builders import evar, pvar, tconstr, tvar
from ..syntax.nodes import (
    CoreType,
    ExpApply,
    ExpFun,
    Expression,
    TypAny,
    TypArrow,
    TypConstr,
    TypVar,
    TypeDeclaration,
    TypeExtension,
    TypeParam,
)
from ..utils.config import get_config

A = TypeVar("A")


def _param_name(param: CoreType):
    if isinstance(param, TypAny):
        return None
    if isinstance(param, TypVar):
        return param.name
    raise AssertionError(f"unsupported type parameter {type(param).__name__}")


def fold_left_type_params(fn: Callable[[A, str], A], accum: A, params: Sequence[TypeParam]) -> A:
    for param, _variance in params:
        name = _param_name(param)
        if name is not None:
            accum = fn(accum, name)
    return accum


def fold_right_type_params(fn: Callable[[str, A], A], params: Sequence[TypeParam], accum: A) -> A:
    for param, _variance in reversed(params):
        name = _param_name(param)
        if name is not None:
            accum = fn(name, accum)
    return accum


def fold_left_type_decl(fn: Callable[[A, str], A], accum: A, type_decl: TypeDeclaration) -> A:
    return fold_left_type_params(fn, accum, type_decl.params)


def fold_left_type_ext(fn: Callable[[A, str], A], accum: A, type_ext: TypeExtension) -> A:
    return fold_left_type_params(fn, accum, type_ext.params)


def fold_right_type_decl(fn: Callable[[str, A], A], type_decl: TypeDeclaration, accum: A) -> A:
    return fold_right_type_params(fn, type_decl.params, accum)


def fold_right_type_ext(fn: Callable[[str, A], A], type_ext: TypeExtension, accum: A) -> A:
    return fold_right_type_params(fn, type_ext.params, accum)


# =============================================================================
# Polymorphic Wrappers
# =============================================================================

def _poly(name: str) -> str:
    return get_config().codegen.poly_prefix + name


def _poly_fun(fold, subject, expr: Expression) -> Expression:
    return fold(lambda name, body: ExpFun(pvar(_poly(name)), body), subject, expr)


def _poly_apply(fold, subject, expr: Expression) -> Expression:
    return fold(lambda fn, name: ExpApply(fn, (("", evar(_poly(name))),)), expr, subject)


def _poly_arrow(fold, fn: Callable[[CoreType], CoreType], subject, typ: CoreType) -> CoreType:
    return fold(lambda name, rest: TypArrow(fn(tvar(name)), rest), subject, typ)


def poly_fun_of_type_decl(type_decl: TypeDeclaration, expr: Expression) -> Expression:
    """``fun poly_a -> fun poly_b -> expr`` for ``('a, 'b) t``."""
    return _poly_fun(fold_right_type_decl, type_decl, expr)


def poly_fun_of_type_ext(type_ext: TypeExtension, expr: Expression) -> Expression:
    return _poly_fun(fold_right_type_ext, type_ext, expr)


def poly_apply_of_type_decl(type_decl: TypeDeclaration, expr: Expression) -> Expression:
    """``expr poly_a poly_b`` for ``('a, 'b) t``."""
    return _poly_apply(fold_left_type_decl, type_decl, expr)


def poly_apply_of_type_ext(type_ext: TypeExtension, expr: Expression) -> Expression:
    return _poly_apply(fold_left_type_ext, type_ext, expr)


def poly_arrow_of_type_decl(
    fn: Callable[[CoreType], CoreType], type_decl: TypeDeclaration, typ: CoreType
) -> CoreType:
    """``fn 'a -> fn 'b -> typ`` for ``('a, 'b) t``."""
    return _poly_arrow(fold_right_type_decl, fn, type_decl, typ)


def poly_arrow_of_type_ext(
    fn: Callable[[CoreType], CoreType], type_ext: TypeExtension, typ: CoreType
) -> CoreType:
    return _poly_arrow(fold_right_type_ext, fn, type_ext, typ)


# =============================================================================
# Type Reconstruction
# =============================================================================

def core_type_of_type_decl(type_decl: TypeDeclaration) -> TypConstr:
    """The type a declaration defines, applied to its own parameters."""
    return tconstr(type_decl.name, [param for param, _variance in type_decl.params])


def core_type_of_type_ext(type_ext: TypeExtension) -> TypConstr:
    """The type an extension extends, applied to its own parameters."""
    return TypConstr(type_ext.path, tuple(param for param, _variance in type_ext.params))
