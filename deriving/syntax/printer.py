"""
Source Printer.

Renders syntax trees back to ML source text. The output is meant for
diagnostics, debugging dumps and tests: it is fully parenthesized where
precedence could be ambiguous rather than minimal.
"""

from __future__ import annotations

from typing import List, Sequence

from .nodes import (
    Attribute,
    CoreType,
    ExpApply,
    ExpConstant,
    ExpConstraint,
    ExpConstruct,
    ExpExtension,
    ExpFun,
    ExpIdent,
    ExpLet,
    ExpLetOpen,
    ExpRecord,
    ExpSequence,
    ExpTuple,
    ExpVariant,
    Expression,
    Longident,
    ModFunctor,
    ModIdent,
    ModStructure,
    ModuleExpr,
    ModuleType,
    MtyFunctor,
    MtyIdent,
    MtySignature,
    PSig,
    PStr,
    PTyp,
    PatAny,
    PatConstruct,
    PatVar,
    Pattern,
    Payload,
    RowInherit,
    RowTag,
    SigModule,
    SigRecModule,
    SigType,
    SigTypext,
    SigValue,
    SignatureItem,
    StrEval,
    StrModule,
    StrRecModule,
    StrType,
    StrTypext,
    StrValue,
    StructureItem,
    TypAlias,
    TypAny,
    TypArrow,
    TypConstr,
    TypObject,
    TypPoly,
    TypTuple,
    TypVar,
    TypVariant,
    TypeDeclaration,
    TypeExtension,
    TypeOpen,
    TypeRecord,
    TypeVariantKind,
    ValueBinding,
)

INDENT = "  "


def _ident(ident: Longident) -> str:
    last = ident.last
    if last and not (last[0].isalnum() or last[0] in "_'(["):
        last = f"( {last} )"
    return ".".join(ident.qualifier + (last,))


def _string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


# =============================================================================
# Types
# =============================================================================

def _typ_atomic(typ: CoreType) -> str:
    text = string_of_core_type(typ)
    if isinstance(typ, (TypArrow, TypTuple, TypAlias, TypPoly)):
        return f"({text})"
    return text


def _type_params(params: Sequence) -> str:
    rendered = [variance.value + string_of_core_type(typ) for typ, variance in params]
    if not rendered:
        return ""
    if len(rendered) == 1:
        return rendered[0] + " "
    return "(" + ", ".join(rendered) + ") "


def string_of_core_type(typ: CoreType) -> str:
    """Render a type expression, ignoring its attributes."""
    if isinstance(typ, TypAny):
        return "_"
    if isinstance(typ, TypVar):
        return f"'{typ.name}"
    if isinstance(typ, TypArrow):
        lhs = _typ_atomic(typ.lhs)
        label = f"{typ.label}:" if typ.label else ""
        return f"{label}{lhs} -> {string_of_core_type(typ.rhs)}"
    if isinstance(typ, TypTuple):
        return " * ".join(_typ_atomic(t) for t in typ.items)
    if isinstance(typ, TypConstr):
        if not typ.args:
            return str(typ.ident)
        if len(typ.args) == 1:
            return f"{_typ_atomic(typ.args[0])} {typ.ident}"
        args = ", ".join(string_of_core_type(t) for t in typ.args)
        return f"({args}) {typ.ident}"
    if isinstance(typ, TypAlias):
        return f"{_typ_atomic(typ.body)} as '{typ.name}"
    if isinstance(typ, TypPoly):
        if not typ.bound:
            return string_of_core_type(typ.body)
        bound = " ".join(f"'{name}" for name in typ.bound)
        return f"{bound}. {string_of_core_type(typ.body)}"
    if isinstance(typ, TypVariant):
        rows = []
        for row in typ.rows:
            if isinstance(row, RowTag):
                if row.args:
                    args = " & ".join(_typ_atomic(t) for t in row.args)
                    rows.append(f"`{row.label} of {args}")
                else:
                    rows.append(f"`{row.label}")
            elif isinstance(row, RowInherit):
                rows.append(string_of_core_type(row.typ))
        opener = "[ " if typ.closed else "[> "
        return opener + " | ".join(rows) + " ]"
    if isinstance(typ, TypObject):
        methods = [f"{name} : {string_of_core_type(t)}" for name, t in typ.methods]
        if typ.open:
            methods.append("..")
        return "< " + "; ".join(methods) + " >"
    raise TypeError(f"cannot print type node {type(typ).__name__}")


# =============================================================================
# Patterns and Expressions
# =============================================================================

def string_of_pattern(pat: Pattern) -> str:
    if isinstance(pat, PatAny):
        return "_"
    if isinstance(pat, PatVar):
        return pat.name
    if isinstance(pat, PatConstruct):
        if pat.arg is None:
            return _ident(pat.ident)
        return f"{_ident(pat.ident)} ({string_of_pattern(pat.arg)})"
    raise TypeError(f"cannot print pattern node {type(pat).__name__}")


def _is_atomic(expr: Expression) -> bool:
    if expr.attributes:
        return True
    if isinstance(expr, (ExpConstruct, ExpVariant)):
        return expr.arg is None
    if isinstance(expr, ExpConstant):
        return not (isinstance(expr.value, (int, float)) and expr.value < 0)
    return isinstance(expr, (ExpIdent, ExpRecord, ExpTuple, ExpConstraint, ExpExtension))


def _exp_atomic(expr: Expression) -> str:
    text = string_of_expression(expr)
    return text if _is_atomic(expr) else f"({text})"


def _binding(vb: ValueBinding) -> str:
    return f"{string_of_pattern(vb.pattern)} = {string_of_expression(vb.expr)}"


def _bindings(keyword: str, bindings: Sequence[ValueBinding], recursive: bool) -> str:
    head = f"{keyword} rec" if recursive else keyword
    return " and ".join(
        [f"{head} {_binding(bindings[0])}"] + [_binding(vb) for vb in bindings[1:]]
    )


def _payload(payload: Payload) -> str:
    if isinstance(payload, PTyp):
        return ": " + string_of_core_type(payload.typ)
    if isinstance(payload, PSig):
        return ": sig " + " ".join(string_of_signature(list(payload.items)).split("\n")) + " end"
    if isinstance(payload, PStr):
        if not payload.items:
            return ""
        if all(isinstance(item, StrEval) for item in payload.items):
            return " " + "; ".join(string_of_expression(item.expr) for item in payload.items)
        return " " + " ".join(string_of_structure(list(payload.items)).split("\n"))
    raise TypeError(f"cannot print payload {type(payload).__name__}")


def _attribute(attr: Attribute, sigil: str) -> str:
    return f"[{sigil}{attr.name}{_payload(attr.payload)}]"


def _item_attributes(attrs: Sequence[Attribute]) -> str:
    return "".join(" " + _attribute(a, "@@") for a in attrs)


def string_of_expression(expr: Expression) -> str:
    """Render an expression."""
    text = _expression_body(expr)
    if expr.attributes:
        attrs = " ".join(_attribute(a, "@") for a in expr.attributes)
        return f"(({text}) {attrs})"
    return text


def _expression_body(expr: Expression) -> str:
    if isinstance(expr, ExpIdent):
        return _ident(expr.ident)
    if isinstance(expr, ExpConstant):
        if isinstance(expr.value, str):
            return _string_literal(expr.value)
        return repr(expr.value)
    if isinstance(expr, ExpConstruct):
        if expr.arg is None:
            return _ident(expr.ident)
        return f"{_ident(expr.ident)} {_exp_atomic(expr.arg)}"
    if isinstance(expr, ExpVariant):
        if expr.arg is None:
            return f"`{expr.label}"
        return f"`{expr.label} {_exp_atomic(expr.arg)}"
    if isinstance(expr, ExpApply):
        func = string_of_expression(expr.func)
        if not (_is_atomic(expr.func) or isinstance(expr.func, ExpApply)):
            func = f"({func})"
        args = []
        for label, arg in expr.args:
            if label.startswith("?"):
                args.append(f"?{label[1:]}:{_exp_atomic(arg)}")
            elif label:
                args.append(f"~{label}:{_exp_atomic(arg)}")
            else:
                args.append(_exp_atomic(arg))
        return " ".join([func] + args)
    if isinstance(expr, ExpFun):
        pat = string_of_pattern(expr.pattern)
        if expr.label and expr.default is not None:
            pat = f"?({expr.label.lstrip('?')} = {string_of_expression(expr.default)})"
        elif expr.label.startswith("?"):
            pat = f"?{expr.label[1:]}:{pat}"
        elif expr.label:
            pat = f"~{expr.label}:{pat}"
        return f"fun {pat} -> {string_of_expression(expr.body)}"
    if isinstance(expr, ExpLet):
        if not expr.bindings:
            return string_of_expression(expr.body)
        head = _bindings("let", expr.bindings, expr.recursive)
        return f"{head} in {string_of_expression(expr.body)}"
    if isinstance(expr, ExpLetOpen):
        bang = "!" if expr.override else ""
        return f"let open{bang} {expr.module} in {string_of_expression(expr.body)}"
    if isinstance(expr, ExpRecord):
        fields = "; ".join(f"{k} = {string_of_expression(v)}" for k, v in expr.fields)
        if expr.base is not None:
            return f"{{ {_exp_atomic(expr.base)} with {fields} }}"
        return f"{{ {fields} }}"
    if isinstance(expr, ExpTuple):
        return "(" + ", ".join(string_of_expression(e) for e in expr.items) + ")"
    if isinstance(expr, ExpSequence):
        return f"{_exp_atomic(expr.first)}; {_exp_atomic(expr.second)}"
    if isinstance(expr, ExpConstraint):
        return f"({string_of_expression(expr.expr)} : {string_of_core_type(expr.typ)})"
    if isinstance(expr, ExpExtension):
        return f"[%{expr.name}{_payload(expr.payload)}]"
    raise TypeError(f"cannot print expression node {type(expr).__name__}")


# =============================================================================
# Declarations, Modules, Structures and Signatures
# =============================================================================

def _type_declaration(decl: TypeDeclaration) -> str:
    text = _type_params(decl.params) + decl.name
    if decl.manifest is not None:
        text += " = " + string_of_core_type(decl.manifest)
    private = "private " if decl.private else ""
    if isinstance(decl.kind, TypeVariantKind):
        ctors = []
        for cd in decl.kind.constructors:
            ctor = cd.name
            if cd.args:
                ctor += " of " + " * ".join(_typ_atomic(t) for t in cd.args)
            if cd.res is not None:
                ctor += " : " + string_of_core_type(cd.res)
            ctor += "".join(" " + _attribute(a, "@") for a in cd.attributes)
            ctors.append(ctor)
        text += f" = {private}" + " | ".join(ctors)
    elif isinstance(decl.kind, TypeRecord):
        labels = []
        for ld in decl.kind.labels:
            mutable = "mutable " if ld.mutable else ""
            label = f"{mutable}{ld.name} : {string_of_core_type(ld.typ)}"
            label += "".join(" " + _attribute(a, "@") for a in ld.attributes)
            labels.append(label)
        text += f" = {private}{{ " + "; ".join(labels) + " }"
    elif isinstance(decl.kind, TypeOpen):
        text += f" = {private}.."
    return text + _item_attributes(decl.attributes)


def _type_group(decls: Sequence[TypeDeclaration], recursive: bool) -> str:
    head = "type" if recursive else "type nonrec"
    parts = [f"{head} {_type_declaration(decls[0])}"]
    parts += [f"and {_type_declaration(d)}" for d in decls[1:]]
    return "\n".join(parts)


def _type_extension(ext: TypeExtension) -> str:
    ctors = []
    for ec in ext.constructors:
        ctor = ec.name
        if ec.args:
            ctor += " of " + " * ".join(_typ_atomic(t) for t in ec.args)
        ctors.append(ctor)
    private = "private " if ext.private else ""
    text = f"type {_type_params(ext.params)}{ext.path} += {private}" + " | ".join(ctors)
    return text + _item_attributes(ext.attributes)


def _indent(lines: List[str]) -> List[str]:
    return [INDENT + line if line else line for line in lines]


def _module_expr(mexpr: ModuleExpr) -> List[str]:
    if isinstance(mexpr, ModStructure):
        body = string_of_structure(list(mexpr.items))
        return ["struct"] + _indent(body.split("\n") if body else []) + ["end"]
    if isinstance(mexpr, ModIdent):
        return [str(mexpr.ident)]
    if isinstance(mexpr, ModFunctor):
        param = mexpr.param
        if mexpr.param_type is not None:
            param_type = " ".join(_module_type(mexpr.param_type))
            param = f"{param} : {param_type}"
        body = _module_expr(mexpr.body)
        return [f"functor ({param}) -> {body[0]}"] + body[1:]
    raise TypeError(f"cannot print module expression {type(mexpr).__name__}")


def _module_type(mtype: ModuleType) -> List[str]:
    if isinstance(mtype, MtySignature):
        body = string_of_signature(list(mtype.items))
        return ["sig"] + _indent(body.split("\n") if body else []) + ["end"]
    if isinstance(mtype, MtyIdent):
        return [str(mtype.ident)]
    if isinstance(mtype, MtyFunctor):
        param = mtype.param
        if mtype.param_type is not None:
            param_type = " ".join(_module_type(mtype.param_type))
            param = f"{param} : {param_type}"
        body = _module_type(mtype.body)
        return [f"functor ({param}) -> {body[0]}"] + body[1:]
    raise TypeError(f"cannot print module type {type(mtype).__name__}")


def _joined(head: str, lines: List[str]) -> List[str]:
    return [f"{head}{lines[0]}"] + lines[1:]


def _structure_item(item: StructureItem) -> List[str]:
    if isinstance(item, StrEval):
        return [";; " + string_of_expression(item.expr) + _item_attributes(item.attributes)]
    if isinstance(item, StrValue):
        return [_bindings("let", item.bindings, item.recursive)]
    if isinstance(item, StrType):
        return _type_group(item.decls, item.recursive).split("\n")
    if isinstance(item, StrTypext):
        return [_type_extension(item.ext)]
    if isinstance(item, StrModule):
        return _joined(f"module {item.binding.name} = ", _module_expr(item.binding.expr))
    if isinstance(item, StrRecModule):
        lines: List[str] = []
        for i, mb in enumerate(item.bindings):
            keyword = "module rec" if i == 0 else "and"
            lines += _joined(f"{keyword} {mb.name} = ", _module_expr(mb.expr))
        return lines
    raise TypeError(f"cannot print structure item {type(item).__name__}")


def _signature_item(item: SignatureItem) -> List[str]:
    if isinstance(item, SigValue):
        return [f"val {item.name} : {string_of_core_type(item.typ)}" + _item_attributes(item.attributes)]
    if isinstance(item, SigType):
        return _type_group(item.decls, item.recursive).split("\n")
    if isinstance(item, SigTypext):
        return [_type_extension(item.ext)]
    if isinstance(item, SigModule):
        return _joined(f"module {item.decl.name} : ", _module_type(item.decl.mtype))
    if isinstance(item, SigRecModule):
        lines: List[str] = []
        for i, md in enumerate(item.decls):
            keyword = "module rec" if i == 0 else "and"
            lines += _joined(f"{keyword} {md.name} : ", _module_type(md.mtype))
        return lines
    raise TypeError(f"cannot print signature item {type(item).__name__}")


def string_of_structure(items: Sequence[StructureItem]) -> str:
    """Render a structure, one item per line (modules span several)."""
    lines: List[str] = []
    for item in items:
        lines += _structure_item(item)
    return "\n".join(lines)


def string_of_signature(items: Sequence[SignatureItem]) -> str:
    """Render a signature, one item per line (modules span several)."""
    lines: List[str] = []
    for item in items:
        lines += _signature_item(item)
    return "\n".join(lines)
