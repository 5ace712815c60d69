"""
Deriver Registry.

A deriver is registered under a unique name and exposes up to four entry
points (type declarations or type extensions, in structures or in
signatures) plus an optional inline form that builds an expression
directly from a type. The registry maps names to derivers; the program
walker looks requested names up in it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..syntax.nodes import CoreType, Expression
from ..utils.config import get_config
from ..utils.exceptions import DuplicateDeriverError, UnsupportedEntryPointError
from ..utils.logging import DerivingLogger

Options = Sequence[Tuple[str, Expression]]
EntryPoint = Callable[[Options, Sequence[str], Any], List[Any]]
CoreTypeFn = Callable[[CoreType], Expression]

_log = DerivingLogger(__name__)


@dataclass(frozen=True)
class Deriver:
    """
    A registered code generator.

    Each entry point is called as ``fn(options, path, subject)`` where
    ``options`` are the undecoded ``(key, expression)`` pairs from the
    annotation, ``path`` is the module path of the declaration and
    ``subject`` is a list of type declarations or one type extension.
    """

    name: str
    type_decl_str: EntryPoint
    type_ext_str: EntryPoint
    type_decl_sig: EntryPoint
    type_ext_sig: EntryPoint
    core_type: Optional[CoreTypeFn] = None

    def supported_entry_points(self) -> List[str]:
        """Names of the entry points this deriver implements itself."""
        return [
            mode
            for mode in ("type_decl_str", "type_ext_str", "type_decl_sig", "type_ext_sig")
            if not getattr(getattr(self, mode), "_unsupported", False)
        ] + (["core_type"] if self.core_type is not None else [])


def _unsupported(name: str, mode: str, what: str) -> EntryPoint:
    def stub(options, path, subject):
        raise UnsupportedEntryPointError(f"{what} not supported by deriver {name}", deriver=name, mode=mode)

    stub._unsupported = True
    return stub


def create_deriver(
    name: str,
    core_type: Optional[CoreTypeFn] = None,
    type_ext_str: Optional[EntryPoint] = None,
    type_ext_sig: Optional[EntryPoint] = None,
    type_decl_str: Optional[EntryPoint] = None,
    type_decl_sig: Optional[EntryPoint] = None,
) -> Deriver:
    """
    Build a Deriver from the entry points it implements.

    Omitted entry points fail with an UnsupportedEntryPointError naming
    the deriver when invoked.
    """
    return Deriver(
        name=name,
        core_type=core_type,
        type_ext_str=type_ext_str
        or _unsupported(name, "type_ext_str", "Extensible types in structures"),
        type_ext_sig=type_ext_sig
        or _unsupported(name, "type_ext_sig", "Extensible types in signatures"),
        type_decl_str=type_decl_str
        or _unsupported(name, "type_decl_str", "Type declarations in structures"),
        type_decl_sig=type_decl_sig
        or _unsupported(name, "type_decl_sig", "Type declarations in signatures"),
    )


class DeriverRegistry:
    """
    Name to deriver table.

    Registering a name twice replaces the earlier deriver unless the
    registry is strict, in which case DuplicateDeriverError is raised.
    """

    def __init__(self, reject_duplicates: Optional[bool] = None):
        """
        Initialize an empty registry.

        Args:
            reject_duplicates: Raise on duplicate names; None reads the
                registry configuration
        """
        if reject_duplicates is None:
            reject_duplicates = get_config().registry.reject_duplicates
        self.reject_duplicates = reject_duplicates
        self._derivers: Dict[str, Deriver] = {}

    def register(self, deriver: Deriver) -> None:
        shadowed = deriver.name in self._derivers
        if shadowed and self.reject_duplicates:
            raise DuplicateDeriverError(deriver.name)
        self._derivers[deriver.name] = deriver
        _log.log_registration(deriver.name, shadowed)

    def lookup(self, name: str) -> Optional[Deriver]:
        return self._derivers.get(name)

    def names(self) -> List[str]:
        return sorted(self._derivers)

    def __contains__(self, name: str) -> bool:
        return name in self._derivers

    def __len__(self) -> int:
        return len(self._derivers)


# Process-wide registry derivers add themselves to at import time
_default_registry: Optional[DeriverRegistry] = None


def get_registry() -> DeriverRegistry:
    """Get the process-wide registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = DeriverRegistry()
    return _default_registry


def register(deriver: Deriver) -> None:
    """Register a deriver in the process-wide registry."""
    get_registry().register(deriver)


def lookup(name: str) -> Optional[Deriver]:
    """Look a deriver up in the process-wide registry."""
    return get_registry().lookup(name)
