"""
[@@deriving] Annotation Resolution.

Parses the payload of a ``[@@deriving ...]`` attribute into deriving
requests and runs the requested derivers against a declaration.

Accepted payloads form a small closed grammar::

    payload  ::= request | request, request, ...
    request  ::= Name | Name { key = value; ... }

where ``Name`` may be qualified (``Foo.bar`` resolves the deriver
``"Foo.bar"``). The pseudo-option ``optional = true`` makes an
unregistered deriver a no-op instead of an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple

from ..codegen import arg
from ..syntax.nodes import (
    Attribute,
    ExpApply,
    ExpIdent,
    ExpRecord,
    ExpTuple,
    Expression,
    Location,
    NOLOC,
    PStr,
    StrEval,
    TypeDeclaration,
    TypeExtension,
)
from ..utils.constants import DERIVING_ATTRIBUTE, OPTIONAL_OPTION
from ..utils.exceptions import DerivingError, DerivingSyntaxError, UnknownDeriverError
from ..utils.logging import DerivingLogger
from .attributes import find_attr
from .registry import Deriver, DeriverRegistry, EntryPoint

_log = DerivingLogger(__name__)


@dataclass(frozen=True)
class DerivingRequest:
    """One deriver requested by a [@@deriving] annotation."""

    name: str
    options: Tuple[Tuple[str, Expression], ...] = ()
    optional: bool = False
    loc: Location = NOLOC


def _request_exprs(deriving: Attribute) -> Sequence[Expression]:
    payload = deriving.payload
    if (
        isinstance(payload, PStr)
        and len(payload.items) == 1
        and isinstance(payload.items[0], StrEval)
        and not payload.items[0].attributes
    ):
        expr = payload.items[0].expr
        if isinstance(expr, ExpTuple):
            return expr.items
        if isinstance(expr, (ExpIdent, ExpApply)):
            return (expr,)
    raise DerivingSyntaxError("Unrecognized [@@deriving] annotation syntax", loc=deriving.loc)


def _parse_request(expr: Expression) -> DerivingRequest:
    if isinstance(expr, ExpIdent):
        ident, options = expr, ()
    elif (
        isinstance(expr, ExpApply)
        and isinstance(expr.func, ExpIdent)
        and len(expr.args) == 1
        and expr.args[0][0] == ""
        and isinstance(expr.args[0][1], ExpRecord)
        and expr.args[0][1].base is None
    ):
        ident = expr.func
        options = tuple((str(key), value) for key, value in expr.args[0][1].fields)
    else:
        raise DerivingSyntaxError("Unrecognized [@@deriving] option syntax", loc=expr.loc)

    name = str(ident.ident)
    optional = False
    for key, value in options:
        if key == OPTIONAL_OPTION:
            optional = arg.get_expr(name, arg.bool_, value)
            break
    options = tuple((key, value) for key, value in options if key != OPTIONAL_OPTION)
    return DerivingRequest(name=name, options=options, optional=optional, loc=ident.loc)


def parse_deriving(attributes: Sequence[Attribute], loc: Location = NOLOC) -> List[DerivingRequest]:
    """
    Parse the [@@deriving] attribute among ``attributes``.

    ``loc`` locates the annotated declaration when the attribute is missing.

    Raises:
        DerivingSyntaxError: If there is no [@@deriving] attribute or its
            payload is outside the accepted grammar
        InvalidArgumentError: If ``optional`` is not a boolean
    """
    deriving = find_attr(DERIVING_ATTRIBUTE, attributes)
    if deriving is None:
        raise DerivingSyntaxError("Missing [@@deriving] annotation", loc=loc)
    return [_parse_request(expr) for expr in _request_exprs(deriving)]


def derive(
    registry: DeriverRegistry,
    path: Sequence[str],
    item: Any,
    attributes: Sequence[Attribute],
    select: Callable[[Deriver], EntryPoint],
    subject: Any,
    loc: Location = NOLOC,
    type_names: Sequence[str] = (),
) -> List[Any]:
    """
    Run every deriver requested by ``attributes`` on ``subject``.

    Args:
        registry: Registry to resolve deriver names in
        path: Module path of the declaration
        item: The original structure or signature item
        attributes: Attributes of the declaration (group)
        select: Picks the entry point to call from a Deriver
        subject: Type declarations or type extension passed to the deriver
        loc: Location of the item, attached to errors that carry none
        type_names: Names of the declared types, for logging

    Returns:
        ``item`` followed by the generated items, in request order
    """
    items = [item]
    for request in parse_deriving(attributes, loc):
        deriver = registry.lookup(request.name)
        if deriver is None:
            if request.optional:
                _log.log_optional_skip(request.name)
                continue
            raise UnknownDeriverError(request.name, loc=request.loc)

        _log.log_derive_start(request.name, type_names, path)
        try:
            generated = select(deriver)(list(request.options), list(path), subject)
        except DerivingError as e:
            if e.loc is None:
                e.loc = loc
            raise
        items.extend(generated)
    return items


def derive_type_decl(
    registry: DeriverRegistry,
    path: Sequence[str],
    item: Any,
    type_decls: Sequence[TypeDeclaration],
    select: Callable[[Deriver], EntryPoint],
    loc: Location = NOLOC,
) -> List[Any]:
    """Derive for a type declaration group; attributes of all members count."""
    attributes = [a for decl in type_decls for a in decl.attributes]
    return derive(
        registry, path, item, attributes, select, list(type_decls), loc,
        type_names=[decl.name for decl in type_decls],
    )


def derive_type_ext(
    registry: DeriverRegistry,
    path: Sequence[str],
    item: Any,
    type_ext: TypeExtension,
    select: Callable[[Deriver], EntryPoint],
    loc: Location = NOLOC,
) -> List[Any]:
    """Derive for a type extension."""
    return derive(
        registry, path, item, type_ext.attributes, select, type_ext, loc,
        type_names=[str(type_ext.path)],
    )
