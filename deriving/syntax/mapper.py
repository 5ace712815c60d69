"""
Default Syntax Tree Mapper.

An identity traversal over structures, signatures, modules and
expressions. Each hook receives the node and a context value and returns
the rebuilt node; the context is passed through unchanged, so subclasses
that need scoping derive a new context value instead of mutating shared
state. Override a single hook to rewrite one kind of node.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Sequence, Tuple

from .nodes import (
    Attribute,
    ExpApply,
    ExpConstraint,
    ExpConstruct,
    ExpExtension,
    ExpFun,
    ExpLet,
    ExpLetOpen,
    ExpRecord,
    ExpSequence,
    ExpTuple,
    ExpVariant,
    Expression,
    ModFunctor,
    ModStructure,
    ModuleBinding,
    ModuleDeclaration,
    ModuleExpr,
    ModuleType,
    MtyFunctor,
    MtySignature,
    PStr,
    Payload,
    SigModule,
    SigRecModule,
    SignatureItem,
    StrEval,
    StrModule,
    StrRecModule,
    StrValue,
    StructureItem,
    ValueBinding,
)


class AstMapper:
    """Structural identity mapper with context threading."""

    # Structures and signatures

    def structure(self, items: Sequence[StructureItem], ctx: Any) -> List[StructureItem]:
        return [self.structure_item(item, ctx) for item in items]

    def signature(self, items: Sequence[SignatureItem], ctx: Any) -> List[SignatureItem]:
        return [self.signature_item(item, ctx) for item in items]

    def structure_item(self, item: StructureItem, ctx: Any) -> StructureItem:
        if isinstance(item, StrEval):
            return replace(
                item,
                expr=self.expression(item.expr, ctx),
                attributes=self.attributes(item.attributes, ctx),
            )
        if isinstance(item, StrValue):
            return replace(item, bindings=tuple(self.value_binding(vb, ctx) for vb in item.bindings))
        if isinstance(item, StrModule):
            return replace(item, binding=self.module_binding(item.binding, ctx))
        if isinstance(item, StrRecModule):
            return replace(item, bindings=tuple(self.module_binding(mb, ctx) for mb in item.bindings))
        return item

    def signature_item(self, item: SignatureItem, ctx: Any) -> SignatureItem:
        if isinstance(item, SigModule):
            return replace(item, decl=self.module_declaration(item.decl, ctx))
        if isinstance(item, SigRecModule):
            return replace(item, decls=tuple(self.module_declaration(md, ctx) for md in item.decls))
        return item

    # Modules

    def module_binding(self, mb: ModuleBinding, ctx: Any) -> ModuleBinding:
        return replace(mb, expr=self.module_expr(mb.expr, ctx))

    def module_declaration(self, md: ModuleDeclaration, ctx: Any) -> ModuleDeclaration:
        return replace(md, mtype=self.module_type(md.mtype, ctx))

    def module_expr(self, mexpr: ModuleExpr, ctx: Any) -> ModuleExpr:
        if isinstance(mexpr, ModStructure):
            return replace(mexpr, items=tuple(self.structure(mexpr.items, ctx)))
        if isinstance(mexpr, ModFunctor):
            param_type = mexpr.param_type
            if param_type is not None:
                param_type = self.module_type(param_type, ctx)
            return replace(mexpr, param_type=param_type, body=self.module_expr(mexpr.body, ctx))
        return mexpr

    def module_type(self, mtype: ModuleType, ctx: Any) -> ModuleType:
        if isinstance(mtype, MtySignature):
            return replace(mtype, items=tuple(self.signature(mtype.items, ctx)))
        if isinstance(mtype, MtyFunctor):
            param_type = mtype.param_type
            if param_type is not None:
                param_type = self.module_type(param_type, ctx)
            return replace(mtype, param_type=param_type, body=self.module_type(mtype.body, ctx))
        return mtype

    # Expressions

    def value_binding(self, vb: ValueBinding, ctx: Any) -> ValueBinding:
        return replace(
            vb,
            expr=self.expression(vb.expr, ctx),
            attributes=self.attributes(vb.attributes, ctx),
        )

    def expression(self, expr: Expression, ctx: Any) -> Expression:
        mapped = self.expression_desc(expr, ctx)
        if not mapped.attributes:
            return mapped
        return replace(mapped, attributes=self.attributes(mapped.attributes, ctx))

    def expression_desc(self, expr: Expression, ctx: Any) -> Expression:
        """Map the children of ``expr``, leaving its attributes alone."""
        sub = self.expression
        if isinstance(expr, ExpExtension):
            return replace(expr, payload=self.payload(expr.payload, ctx))
        if isinstance(expr, (ExpConstruct, ExpVariant)):
            if expr.arg is None:
                return expr
            return replace(expr, arg=sub(expr.arg, ctx))
        if isinstance(expr, ExpApply):
            args = tuple((label, sub(arg, ctx)) for label, arg in expr.args)
            return replace(expr, func=sub(expr.func, ctx), args=args)
        if isinstance(expr, ExpFun):
            default = None if expr.default is None else sub(expr.default, ctx)
            return replace(expr, default=default, body=sub(expr.body, ctx))
        if isinstance(expr, ExpLet):
            bindings = tuple(self.value_binding(vb, ctx) for vb in expr.bindings)
            return replace(expr, bindings=bindings, body=sub(expr.body, ctx))
        if isinstance(expr, ExpLetOpen):
            return replace(expr, body=sub(expr.body, ctx))
        if isinstance(expr, ExpRecord):
            fields = tuple((name, sub(value, ctx)) for name, value in expr.fields)
            base = None if expr.base is None else sub(expr.base, ctx)
            return replace(expr, fields=fields, base=base)
        if isinstance(expr, ExpTuple):
            return replace(expr, items=tuple(sub(e, ctx) for e in expr.items))
        if isinstance(expr, ExpSequence):
            return replace(expr, first=sub(expr.first, ctx), second=sub(expr.second, ctx))
        if isinstance(expr, ExpConstraint):
            return replace(expr, expr=sub(expr.expr, ctx))
        return expr

    # Attributes and payloads

    def attributes(self, attrs: Sequence[Attribute], ctx: Any) -> Tuple[Attribute, ...]:
        return tuple(replace(a, payload=self.payload(a.payload, ctx)) for a in attrs)

    def payload(self, payload: Payload, ctx: Any) -> Payload:
        # Type and signature payloads hold no expressions to rewrite.
        if isinstance(payload, PStr):
            return replace(payload, items=tuple(self.structure_item(i, ctx) for i in payload.items))
        return payload
