"""
Naming Utilities for the deriving framework.

Deterministic derivation of the identifiers generated code introduces:
function and module names mangled from a type name and a deriver affix,
module-qualified paths, and fresh type variable names.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Sequence, Union

from ..syntax.nodes import Longident, TypConstr, TypeDeclaration
from .constants import AFFIX_SEPARATOR, DEFAULT_FIXPOINT, SOURCE_SUFFIXES, TOPLEVEL_INPUT_NAME


# =============================================================================
# Affixes
# =============================================================================

@dataclass(frozen=True)
class Prefix:
    """Mangle ``name`` into ``prefix_name``."""

    prefix: str


@dataclass(frozen=True)
class Suffix:
    """Mangle ``name`` into ``name_suffix``."""

    suffix: str


@dataclass(frozen=True)
class PrefixSuffix:
    """Mangle ``name`` into ``prefix_name_suffix``."""

    prefix: str
    suffix: str


Affix = Union[Prefix, Suffix, PrefixSuffix]


# =============================================================================
# Mangling
# =============================================================================

def mangle(affix: Affix, name: str, fixpoint: str = DEFAULT_FIXPOINT) -> str:
    """
    Derive a new identifier from ``name`` and a deriver affix.

    When ``name`` is the fixpoint (conventionally ``t``, the main type of a
    module) the base name is dropped: ``show`` rather than ``show_t``.

    Args:
        affix: Prefix, Suffix or PrefixSuffix
        name: Base name, usually a type name
        fixpoint: Name that collapses to the affix alone

    Returns:
        The mangled identifier
    """
    sep = AFFIX_SEPARATOR
    if name == fixpoint:
        if isinstance(affix, Prefix):
            return affix.prefix
        if isinstance(affix, Suffix):
            return affix.suffix
        return f"{affix.prefix}{sep}{affix.suffix}"
    if isinstance(affix, Prefix):
        return f"{affix.prefix}{sep}{name}"
    if isinstance(affix, Suffix):
        return f"{name}{sep}{affix.suffix}"
    if isinstance(affix, PrefixSuffix):
        return f"{affix.prefix}{sep}{name}{sep}{affix.suffix}"
    raise TypeError(f"not an affix: {affix!r}")


def mangle_type_decl(affix: Affix, type_decl: TypeDeclaration, fixpoint: str = DEFAULT_FIXPOINT) -> str:
    """Mangle the name of a type declaration."""
    return mangle(affix, type_decl.name, fixpoint)


def mangle_lid(affix: Affix, lid: Longident, fixpoint: str = DEFAULT_FIXPOINT) -> Longident:
    """Mangle the last component of a qualified name, keeping its qualifier."""
    return Longident(lid.qualifier + (mangle(affix, lid.last, fixpoint),))


# =============================================================================
# Module Paths
# =============================================================================

def expand_path(path: Sequence[str], ident: str) -> str:
    """Qualify ``ident`` by a module path: ``expand_path(["M", "N"], "t") == "M.N.t"``."""
    return ".".join(list(path) + [ident])


def path_of_type_decl(path: Sequence[str], type_decl: TypeDeclaration) -> List[str]:
    """
    Return the module path a type originates from.

    A declaration whose manifest is a constructor re-exports that type:
    ``type t = Other.Mod.t`` originates in ``Other.Mod`` and an unqualified
    ``type t = u`` in the current module's root (an empty path). Any other
    declaration originates at ``path``.
    """
    manifest = type_decl.manifest
    if isinstance(manifest, TypConstr):
        return list(manifest.ident.qualifier)
    return list(path)


def module_from_input_name(input_name: str, toplevel_name: str = TOPLEVEL_INPUT_NAME) -> List[str]:
    """
    Derive the initial module path from a compilation unit's source name.

    ``src/foo_bar.ml`` is module ``Foo_bar``; the interactive toplevel has
    no enclosing module. A name with no file component, such as
    ``""`` or ``"dir/"``, has none either.
    """
    if input_name == toplevel_name:
        return []
    base = os.path.basename(input_name)
    stem, ext = os.path.splitext(base)
    if ext in SOURCE_SUFFIXES:
        base = stem
    if not base:
        return []
    return [base[:1].upper() + base[1:]]


# =============================================================================
# Fresh Type Variables
# =============================================================================

_LETTERS = "abcdefghijklmnopqrstuvwxyz"


def var_name_of_int(i: int) -> str:
    """Map an index to a variable name: 0 is a, 25 is z, larger indices use several letters."""
    if i < 26:
        return _LETTERS[i]
    return _LETTERS[i % 26] + var_name_of_int(i // 26)


def fresh_var(bound: Sequence[str]) -> str:
    """Return the first generated variable name not in ``bound``."""
    i = 0
    while var_name_of_int(i) in bound:
        i += 1
    return var_name_of_int(i)
