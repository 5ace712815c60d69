"""
Deriving Program Walker.

Traverses a whole compilation unit, expanding every type declaration
group or type extension annotated with [@@deriving] into the original
item followed by the generated items, and every inline
``[%derive.<name>: typ]`` expression into the expression the deriver
builds for ``typ``.

The module path of the current position is carried in an immutable
MapperContext; entering a module derives a new context, so sibling
modules never observe each other's nesting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..syntax.mapper import AstMapper
from ..syntax.nodes import (
    ExpExtension,
    Expression,
    ModuleBinding,
    ModuleDeclaration,
    PTyp,
    SigModule,
    SigRecModule,
    SigType,
    SigTypext,
    SignatureItem,
    StrModule,
    StrRecModule,
    StrType,
    StrTypext,
    StructureItem,
)
from ..syntax.printer import string_of_core_type
from ..utils.config import get_config
from ..utils.constants import DERIVING_ATTRIBUTE
from ..utils.exceptions import DerivingError, DerivingSyntaxError, UnknownDeriverError, UnsupportedEntryPointError
from ..utils.logging import DerivingLogger
from ..utils.naming import module_from_input_name
from .attributes import has_attr
from .registry import DeriverRegistry, get_registry
from .resolver import derive_type_decl, derive_type_ext

_log = DerivingLogger(__name__)


@dataclass(frozen=True)
class MapperContext:
    """Position of the walker: the enclosing module path."""

    path: Tuple[str, ...] = ()

    def enter(self, module_name: str) -> MapperContext:
        return MapperContext(self.path + (module_name,))


class DerivingMapper(AstMapper):
    """
    Expands [@@deriving] annotations and inline deriver placeholders.

    Args:
        registry: Registry derivers are resolved in
        input_name: Source name of the unit; its module name starts the path
    """

    def __init__(self, registry: DeriverRegistry, input_name: Optional[str] = None):
        self.registry = registry
        self.input_name = input_name if input_name is not None else get_config().codegen.toplevel_name

    def initial_context(self) -> MapperContext:
        toplevel = get_config().codegen.toplevel_name
        return MapperContext(tuple(module_from_input_name(self.input_name, toplevel)))

    # Entry points

    def map_structure(self, items: Sequence[StructureItem]) -> List[StructureItem]:
        """Rewrite a whole implementation unit."""
        return self.structure(items, self.initial_context())

    def map_signature(self, items: Sequence[SignatureItem]) -> List[SignatureItem]:
        """Rewrite a whole interface unit."""
        return self.signature(items, self.initial_context())

    # Structures

    def structure(self, items: Sequence[StructureItem], ctx: MapperContext) -> List[StructureItem]:
        result: List[StructureItem] = []
        for item in items:
            if isinstance(item, StrType) and any(
                has_attr(DERIVING_ATTRIBUTE, decl.attributes) for decl in item.decls
            ):
                result += derive_type_decl(
                    self.registry, ctx.path, item, item.decls,
                    lambda deriver: deriver.type_decl_str, item.loc,
                )
            elif isinstance(item, StrTypext) and has_attr(DERIVING_ATTRIBUTE, item.ext.attributes):
                result += derive_type_ext(
                    self.registry, ctx.path, item, item.ext,
                    lambda deriver: deriver.type_ext_str, item.loc,
                )
            else:
                result.append(self.structure_item(item, ctx))
        return result

    def structure_item(self, item: StructureItem, ctx: MapperContext) -> StructureItem:
        if isinstance(item, StrModule):
            return StrModule(self._module_binding(item.binding, ctx), loc=item.loc)
        if isinstance(item, StrRecModule):
            return StrRecModule(
                tuple(self._module_binding(mb, ctx) for mb in item.bindings), loc=item.loc
            )
        return super().structure_item(item, ctx)

    def _module_binding(self, mb: ModuleBinding, ctx: MapperContext) -> ModuleBinding:
        return self.module_binding(mb, ctx.enter(mb.name))

    # Signatures

    def signature(self, items: Sequence[SignatureItem], ctx: MapperContext) -> List[SignatureItem]:
        result: List[SignatureItem] = []
        for item in items:
            if isinstance(item, SigType) and any(
                has_attr(DERIVING_ATTRIBUTE, decl.attributes) for decl in item.decls
            ):
                result += derive_type_decl(
                    self.registry, ctx.path, item, item.decls,
                    lambda deriver: deriver.type_decl_sig, item.loc,
                )
            elif isinstance(item, SigTypext) and has_attr(DERIVING_ATTRIBUTE, item.ext.attributes):
                result += derive_type_ext(
                    self.registry, ctx.path, item, item.ext,
                    lambda deriver: deriver.type_ext_sig, item.loc,
                )
            else:
                result.append(self.signature_item(item, ctx))
        return result

    def signature_item(self, item: SignatureItem, ctx: MapperContext) -> SignatureItem:
        if isinstance(item, SigModule):
            return SigModule(self._module_declaration(item.decl, ctx), loc=item.loc)
        if isinstance(item, SigRecModule):
            return SigRecModule(
                tuple(self._module_declaration(md, ctx) for md in item.decls), loc=item.loc
            )
        return super().signature_item(item, ctx)

    def _module_declaration(self, md: ModuleDeclaration, ctx: MapperContext) -> ModuleDeclaration:
        return self.module_declaration(md, ctx.enter(md.name))

    # Expressions

    def expression(self, expr: Expression, ctx: MapperContext) -> Expression:
        if isinstance(expr, ExpExtension):
            prefix = get_config().codegen.inline_prefix
            if expr.name.startswith(prefix):
                return self._expand_inline(expr, expr.name[len(prefix):])
            if isinstance(expr.payload, PTyp):
                deriver = self.registry.lookup(expr.name)
                if deriver is not None and deriver.core_type is not None:
                    return self._apply_core_type(deriver.name, deriver.core_type, expr)
        return super().expression(expr, ctx)

    def _expand_inline(self, expr: ExpExtension, name: str) -> Expression:
        deriver = self.registry.lookup(name)
        if deriver is None:
            raise UnknownDeriverError(name, loc=expr.loc)
        if deriver.core_type is None:
            raise UnsupportedEntryPointError(
                f"Deriver {name} does not support inline notation",
                deriver=name, mode="core_type", loc=expr.loc,
            )
        if not isinstance(expr.payload, PTyp):
            raise DerivingSyntaxError("Unrecognized [%derive.*] syntax", loc=expr.loc)
        return self._apply_core_type(name, deriver.core_type, expr)

    def _apply_core_type(self, name: str, core_type, expr: ExpExtension) -> Expression:
        typ = expr.payload.typ
        _log.log_inline_expansion(name, string_of_core_type(typ))
        try:
            return core_type(typ)
        except DerivingError as e:
            if e.loc is None:
                e.loc = typ.loc
            raise


def rewrite_structure(
    items: Sequence[StructureItem],
    registry: Optional[DeriverRegistry] = None,
    input_name: Optional[str] = None,
) -> List[StructureItem]:
    """
    Expand all deriving annotations in an implementation unit.

    Args:
        items: The unit's structure
        registry: Registry to resolve derivers in (default: process-wide)
        input_name: Source file name of the unit

    Raises:
        DerivingError: On the first malformed annotation, unknown deriver
            or deriver failure; no partial result is returned
    """
    mapper = DerivingMapper(registry if registry is not None else get_registry(), input_name)
    return mapper.map_structure(items)


def rewrite_signature(
    items: Sequence[SignatureItem],
    registry: Optional[DeriverRegistry] = None,
    input_name: Optional[str] = None,
) -> List[SignatureItem]:
    """Expand all deriving annotations in an interface unit."""
    mapper = DerivingMapper(registry if registry is not None else get_registry(), input_name)
    return mapper.map_signature(items)
