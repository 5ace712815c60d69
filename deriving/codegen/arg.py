"""
Deriver Argument Decoding.

Options passed to a deriver (``[@@deriving show { with_path = false }]``)
and attributes it reads from fields and constructors (``[@printer f]``)
arrive as untyped expressions. Derivers decode them with the primitive
decoders below, each returning ``Ok(value)`` or ``Error(expected)``, and
the entry points ``get_attr``, ``get_flag`` and ``get_expr`` that turn a
mismatch into a located InvalidArgumentError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

from ..syntax.nodes import (
    Attribute,
    ExpConstant,
    ExpConstruct,
    ExpVariant,
    Expression,
    PStr,
    StrEval,
)
from ..utils.exceptions import InvalidArgumentError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successfully decoded value."""

    value: T


@dataclass(frozen=True)
class Error:
    """A decoding failure; ``expected`` describes the accepted shape."""

    expected: str


Result = Union[Ok, Error]
Decoder = Callable[[Expression], Result]


# =============================================================================
# Primitive Decoders
# =============================================================================

def expr(e: Expression) -> Result:
    """Accept any expression unchanged."""
    return Ok(e)


def int_(e: Expression) -> Result:
    if isinstance(e, ExpConstant) and isinstance(e.value, int) and not isinstance(e.value, bool):
        return Ok(e.value)
    return Error("integer")


def bool_(e: Expression) -> Result:
    if isinstance(e, ExpConstruct) and e.arg is None and len(e.ident.parts) == 1:
        if e.ident.last == "true":
            return Ok(True)
        if e.ident.last == "false":
            return Ok(False)
    return Error("boolean")


def string(e: Expression) -> Result:
    if isinstance(e, ExpConstant) and isinstance(e.value, str):
        return Ok(e.value)
    return Error("string")


def enum(values: Sequence[str]) -> Decoder:
    """
    Build a decoder accepting one of a fixed set of variant tags.

    ``enum(["a", "b"])`` accepts `` `a`` and `` `b`` and returns the tag name.
    """
    allowed = list(values)

    def decode(e: Expression) -> Result:
        if isinstance(e, ExpVariant) and e.arg is None and e.label in allowed:
            return Ok(e.label)
        return Error("one of: " + ", ".join(allowed))

    return decode


# =============================================================================
# Entry Points
# =============================================================================

def get_attr(deriver: str, conv: Decoder, attr: Optional[Attribute]) -> Optional[Any]:
    """
    Decode the value of an optional attribute.

    Args:
        deriver: Name of the deriver, for error messages
        conv: Primitive decoder to apply
        attr: The attribute, or None when absent

    Returns:
        None when the attribute is absent, the decoded value otherwise

    Raises:
        InvalidArgumentError: If the payload is not a single expression or
            does not decode
    """
    if attr is None:
        return None
    payload = attr.payload
    if (
        isinstance(payload, PStr)
        and len(payload.items) == 1
        and isinstance(payload.items[0], StrEval)
        and not payload.items[0].attributes
    ):
        value = payload.items[0].expr
        result = conv(value)
        if isinstance(result, Ok):
            return result.value
        raise InvalidArgumentError(
            f"{deriver}: invalid [@{attr.name}]: {result.expected} expected",
            deriver=deriver,
            expected=result.expected,
            attribute=attr.name,
            loc=value.loc,
        )
    raise InvalidArgumentError(
        f"{deriver}: invalid [@{attr.name}]: value expected",
        deriver=deriver,
        expected="value",
        attribute=attr.name,
        loc=attr.loc,
    )


def get_flag(deriver: str, attr: Optional[Attribute]) -> bool:
    """
    Decode a flag attribute: ``[@name]`` is True, absence is False.

    Raises:
        InvalidArgumentError: If the attribute carries a payload
    """
    if attr is None:
        return False
    if isinstance(attr.payload, PStr) and not attr.payload.items:
        return True
    raise InvalidArgumentError(
        f"{deriver}: invalid [@{attr.name}]: empty structure expected",
        deriver=deriver,
        expected="empty structure",
        attribute=attr.name,
        loc=attr.loc,
    )


def get_expr(deriver: str, conv: Decoder, e: Expression) -> Any:
    """
    Decode a bare option value.

    Raises:
        InvalidArgumentError: If the value does not decode
    """
    result = conv(e)
    if isinstance(result, Ok):
        return result.value
    raise InvalidArgumentError(
        f"{deriver}: {result.expected} expected",
        deriver=deriver,
        expected=result.expected,
        loc=e.loc,
    )
