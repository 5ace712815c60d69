"""
Custom exception definitions.

This module defines the exception hierarchy for errors reported while
expanding [@@deriving] annotations. Every user-facing failure carries a
source location and a message naming the deriver, the offending
attribute or value and the expected shape.

Violations of syntax tree invariants (for instance a type parameter that
is neither a variable nor a wildcard) are not part of this hierarchy;
they are raised as AssertionError.
"""

from typing import Optional, Any


class DerivingError(Exception):
    """
    Base exception for all deriving-related errors.

    This is the root exception class for all located compilation errors
    raised by the deriving pass.
    """

    def __init__(self, message: str, loc: Optional[Any] = None, details: Optional[dict] = None):
        """
        Initialize deriving error.

        Args:
            message: Human-readable error message
            loc: Source location of the offending node, if known
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.loc = loc
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        text = self.message
        if self.loc is not None and not getattr(self.loc, "ghost", False):
            text = f"{self.loc}: {text}"
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            text = f"{text} ({detail_str})"
        return text


class DerivingSyntaxError(DerivingError):
    """
    Raised when a [@@deriving] payload or option list is malformed.
    """


class UnknownDeriverError(DerivingError):
    """
    Raised when a requested deriver is not registered.

    Derivers requested with ``optional = true`` never raise this; they
    are skipped instead.
    """

    def __init__(self, deriver: str, loc: Optional[Any] = None):
        """
        Initialize unknown deriver error.

        Args:
            deriver: Name that failed to resolve
            loc: Location of the reference
        """
        super().__init__(f"Cannot locate deriver {deriver}", loc)
        self.deriver = deriver


class UnsupportedEntryPointError(DerivingError):
    """
    Raised when a deriver is applied in a mode it does not implement.

    Modes are structure or signature, type declaration or type extension,
    and the inline type-directed expression form.
    """

    def __init__(self, message: str, deriver: str, mode: str, loc: Optional[Any] = None):
        """
        Initialize unsupported entry point error.

        Args:
            message: Error description
            deriver: Name of the deriver
            mode: The unsupported mode
            loc: Location of the offending declaration
        """
        super().__init__(message, loc)
        self.deriver = deriver
        self.mode = mode


class InvalidArgumentError(DerivingError):
    """
    Raised when a deriver option or attribute has the wrong shape.
    """

    def __init__(
        self,
        message: str,
        deriver: str,
        expected: str,
        attribute: Optional[str] = None,
        loc: Optional[Any] = None,
    ):
        """
        Initialize invalid argument error.

        Args:
            message: Error description
            deriver: Name of the deriver decoding the value
            expected: Description of the expected shape
            attribute: Attribute name, when the value came from an attribute
            loc: Location of the offending value
        """
        super().__init__(message, loc)
        self.deriver = deriver
        self.expected = expected
        self.attribute = attribute


class DuplicateDeriverError(DerivingError):
    """
    Raised by a strict registry when a name is registered twice.
    """

    def __init__(self, deriver: str):
        super().__init__(f"Deriver {deriver} is already registered", details={"deriver": deriver})
        self.deriver = deriver
