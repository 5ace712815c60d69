"""
Pytest configuration and shared fixtures for deriving tests.

This module provides fresh registries, a small "show" deriver exercising
every entry point, and builders for annotated declarations.
"""

import pytest
from typing import List, Optional, Sequence

from deriving.codegen import (
    poly_arrow_of_type_decl,
    poly_fun_of_type_decl,
    core_type_of_type_decl,
    quote,
    with_quoter,
)
from deriving.codegen import arg
from deriving.compiler.attributes import attr
from deriving.compiler.registry import Deriver, DeriverRegistry, create_deriver
from deriving.syntax import (
    Attribute,
    CoreType,
    ExpFun,
    ExpRecord,
    Expression,
    ExtensionConstructor,
    PatAny,
    SigValue,
    StrValue,
    TypeDeclaration,
    TypeExtension,
    Variance,
    app,
    attribute,
    binding,
    evar,
    pvar,
    str_const,
    string_of_core_type,
    tarrow,
    tconstr,
    tvar,
)
from deriving.utils.config import set_config
from deriving.utils.naming import Prefix, expand_path, mangle, mangle_type_decl, path_of_type_decl


# =============================================================================
# Configuration isolation
# =============================================================================

@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Start every test from default configuration."""
    monkeypatch.delenv("DERIVING_CONFIG", raising=False)
    monkeypatch.delenv("DERIVING_STRICT_REGISTRY", raising=False)
    set_config(None)
    yield
    set_config(None)


# =============================================================================
# Declaration builders
# =============================================================================

def deriving_attr(payload: Expression) -> Attribute:
    """``[@@deriving payload]``."""
    return attribute("deriving", payload)


def type_decl(
    name: str,
    params: Sequence[str] = (),
    manifest: Optional[CoreType] = None,
    attrs: Sequence[Attribute] = (),
) -> TypeDeclaration:
    """``type ('a, ...) name [= manifest]`` with parameters given by name ("_" for wildcards)."""
    from deriving.syntax import TypAny

    type_params = tuple(
        (TypAny() if p == "_" else tvar(p), Variance.INVARIANT) for p in params
    )
    return TypeDeclaration(name, params=type_params, manifest=manifest, attributes=tuple(attrs))


def type_ext(path: str, ctors: Sequence[str], attrs: Sequence[Attribute] = ()) -> TypeExtension:
    """``type path += C1 | C2``."""
    from deriving.syntax import lid

    return TypeExtension(
        lid(path),
        constructors=tuple(ExtensionConstructor(c) for c in ctors),
        attributes=tuple(attrs),
    )


# =============================================================================
# A small "show" deriver
# =============================================================================

def _show_options(options) -> bool:
    with_path = True
    for key, value in options:
        if key == "with_path":
            with_path = arg.get_expr("show", arg.bool_, value)
        else:
            from deriving.utils.exceptions import DerivingSyntaxError

            raise DerivingSyntaxError(f"show does not support option {key}")
    return with_path


def _show_body(decl: TypeDeclaration, path: List[str], with_path: bool) -> Expression:
    printer = attr("show", "printer", decl.attributes)
    custom = arg.get_attr("show", arg.expr, printer)
    label = expand_path(path_of_type_decl(path, decl), decl.name) if with_path else decl.name

    def build(quoter, _):
        if custom is not None:
            return ExpFun(pvar("x"), app(quote(quoter, custom), [evar("x")]))
        return ExpFun(PatAny(), str_const(label))

    return with_quoter(build, None)


def show_type_decl_str(options, path, type_decls):
    with_path = _show_options(options)
    bindings = [
        binding(mangle_type_decl(Prefix("show"), decl), poly_fun_of_type_decl(decl, _show_body(decl, path, with_path)))
        for decl in type_decls
    ]
    return [StrValue(tuple(bindings), recursive=True)]


def show_type_decl_sig(options, path, type_decls):
    _show_options(options)
    return [
        SigValue(
            mangle_type_decl(Prefix("show"), decl),
            poly_arrow_of_type_decl(
                lambda var: tarrow(var, tconstr("string")),
                decl,
                tarrow(core_type_of_type_decl(decl), tconstr("string")),
            ),
        )
        for decl in type_decls
    ]


def show_type_ext_str(options, path, ext):
    _show_options(options)
    name = mangle(Prefix("show"), ext.path.last)
    names = ExpRecord(tuple((ext.path, str_const(c.name)) for c in ext.constructors))
    return [StrValue((binding(name + "_constructors", names),))]


def show_core_type(typ):
    return ExpFun(PatAny(), str_const(string_of_core_type(typ)))


@pytest.fixture
def show_deriver() -> Deriver:
    return create_deriver(
        "show",
        core_type=show_core_type,
        type_decl_str=show_type_decl_str,
        type_decl_sig=show_type_decl_sig,
        type_ext_str=show_type_ext_str,
    )


@pytest.fixture
def registry() -> DeriverRegistry:
    """A fresh, isolated registry."""
    return DeriverRegistry(reject_duplicates=False)


@pytest.fixture
def show_registry(registry, show_deriver) -> DeriverRegistry:
    registry.register(show_deriver)
    return registry
