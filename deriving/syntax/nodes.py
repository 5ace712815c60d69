"""
Syntax Tree Data Structures.

This module defines the immutable syntax tree the deriving pass consumes
and produces: types, expressions, patterns, type declarations and
extensions, modules, structures and signatures of an ML-family language.
Nodes are frozen dataclasses; every node carries an optional source
location which is ignored by equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union


# =============================================================================
# Locations and Identifiers
# =============================================================================

@dataclass(frozen=True)
class Location:
    """A source span. Ghost locations are synthesized and never printed."""

    file: str = "_none_"
    line: int = 0
    start: int = 0
    end: int = 0
    ghost: bool = False

    def __str__(self) -> str:
        return f'File "{self.file}", line {self.line}, characters {self.start}-{self.end}'


NOLOC = Location(ghost=True)


def _loc():
    return field(default=NOLOC, compare=False, kw_only=True)


def _attrs():
    return field(default=(), kw_only=True)


@dataclass(frozen=True)
class Longident:
    """A possibly qualified identifier such as ``M.N.t``."""

    parts: Tuple[str, ...]

    def __post_init__(self):
        if not self.parts:
            raise ValueError("Longident requires at least one component")

    @classmethod
    def parse(cls, text: str) -> Longident:
        """Build an identifier from its dotted spelling."""
        return cls(tuple(text.split(".")))

    @classmethod
    def of_path(cls, path, name: str) -> Longident:
        """Qualify ``name`` by the module path ``path``."""
        return cls(tuple(path) + (name,))

    def flatten(self) -> List[str]:
        return list(self.parts)

    @property
    def last(self) -> str:
        return self.parts[-1]

    @property
    def qualifier(self) -> Tuple[str, ...]:
        return self.parts[:-1]

    def __str__(self) -> str:
        return ".".join(self.parts)


# =============================================================================
# Attributes and Payloads
# =============================================================================

@dataclass(frozen=True)
class Payload:
    """Content of an attribute or extension node."""


@dataclass(frozen=True)
class PStr(Payload):
    """A structure payload: ``[@attr e]`` or ``[@attr]`` when empty."""

    items: Tuple[StructureItem, ...] = ()


@dataclass(frozen=True)
class PTyp(Payload):
    """A type payload: ``[%ext: typ]``."""

    typ: CoreType


@dataclass(frozen=True)
class PSig(Payload):
    """A signature payload: ``[%ext: sig ... end]``."""

    items: Tuple[SignatureItem, ...] = ()


@dataclass(frozen=True)
class Attribute:
    """An attribute ``[@name payload]`` attached to a node."""

    name: str
    payload: Payload = field(default_factory=PStr)
    loc: Location = _loc()


# =============================================================================
# Core Types
# =============================================================================

@dataclass(frozen=True)
class CoreType:
    """Base class of type expressions."""

    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class TypAny(CoreType):
    """The wildcard type ``_``."""


@dataclass(frozen=True)
class TypVar(CoreType):
    """A type variable ``'a``."""

    name: str


@dataclass(frozen=True)
class TypArrow(CoreType):
    """A function type ``lhs -> rhs``, optionally labelled."""

    lhs: CoreType
    rhs: CoreType
    label: str = ""


@dataclass(frozen=True)
class TypTuple(CoreType):
    """A product type ``a * b * c``."""

    items: Tuple[CoreType, ...]


@dataclass(frozen=True)
class TypConstr(CoreType):
    """A type constructor application ``(a, b) M.t``."""

    ident: Longident
    args: Tuple[CoreType, ...] = ()


@dataclass(frozen=True)
class TypAlias(CoreType):
    """An aliased type ``body as 'name``."""

    body: CoreType
    name: str


@dataclass(frozen=True)
class TypPoly(CoreType):
    """An explicitly quantified type ``'a 'b. body``."""

    bound: Tuple[str, ...]
    body: CoreType


@dataclass(frozen=True)
class RowField:
    """A row of a polymorphic variant type."""


@dataclass(frozen=True)
class RowTag(RowField):
    """A tag row `` `Label of t1 & t2``."""

    label: str
    args: Tuple[CoreType, ...] = ()
    constant: bool = False
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class RowInherit(RowField):
    """An inherited row, another variant type spliced in."""

    typ: CoreType


@dataclass(frozen=True)
class TypVariant(CoreType):
    """A polymorphic variant type ``[ `A | `B of int ]``."""

    rows: Tuple[RowField, ...]
    closed: bool = True


@dataclass(frozen=True)
class TypObject(CoreType):
    """An object type ``< meth : t; .. >``."""

    methods: Tuple[Tuple[str, CoreType], ...] = ()
    open: bool = False


# =============================================================================
# Patterns and Expressions
# =============================================================================

@dataclass(frozen=True)
class Pattern:
    """Base class of patterns."""

    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class PatAny(Pattern):
    """The wildcard pattern ``_``."""


@dataclass(frozen=True)
class PatVar(Pattern):
    """A variable pattern."""

    name: str


@dataclass(frozen=True)
class PatConstruct(Pattern):
    """A constructor pattern such as ``()`` or ``Some x``."""

    ident: Longident
    arg: Optional[Pattern] = None


@dataclass(frozen=True)
class Expression:
    """Base class of expressions."""

    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class ExpIdent(Expression):
    """A value identifier."""

    ident: Longident


@dataclass(frozen=True)
class ExpConstant(Expression):
    """An integer, float or string literal."""

    value: Union[int, float, str]


@dataclass(frozen=True)
class ExpConstruct(Expression):
    """A constructor, including ``true``, ``false`` and ``()``."""

    ident: Longident
    arg: Optional[Expression] = None


@dataclass(frozen=True)
class ExpVariant(Expression):
    """A polymorphic variant tag `` `Label``."""

    label: str
    arg: Optional[Expression] = None


@dataclass(frozen=True)
class ExpApply(Expression):
    """A function application; arguments carry a label ("" when unlabelled)."""

    func: Expression
    args: Tuple[Tuple[str, Expression], ...]


@dataclass(frozen=True)
class ExpFun(Expression):
    """A one-argument function ``fun pattern -> body``."""

    pattern: Pattern
    body: Expression
    label: str = ""
    default: Optional[Expression] = None


@dataclass(frozen=True)
class ValueBinding:
    """A ``pattern = expr`` binding of a let or a toplevel value."""

    pattern: Pattern
    expr: Expression
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class ExpLet(Expression):
    """A local ``let [rec] bindings in body``."""

    bindings: Tuple[ValueBinding, ...]
    body: Expression
    recursive: bool = False


@dataclass(frozen=True)
class ExpLetOpen(Expression):
    """A local open ``let open[!] M in body``."""

    module: Longident
    body: Expression
    override: bool = False


@dataclass(frozen=True)
class ExpRecord(Expression):
    """A record ``{ f1 = e1; M.f2 = e2 }`` or ``{ base with ... }``."""

    fields: Tuple[Tuple[Longident, Expression], ...]
    base: Optional[Expression] = None


@dataclass(frozen=True)
class ExpTuple(Expression):
    """A tuple ``(e1, e2, ...)``."""

    items: Tuple[Expression, ...]


@dataclass(frozen=True)
class ExpSequence(Expression):
    """A sequence ``first; second``."""

    first: Expression
    second: Expression


@dataclass(frozen=True)
class ExpConstraint(Expression):
    """A type constraint ``(expr : typ)``."""

    expr: Expression
    typ: CoreType


@dataclass(frozen=True)
class ExpExtension(Expression):
    """An extension node ``[%name payload]``."""

    name: str
    payload: Payload = field(default_factory=PStr)


# =============================================================================
# Type Declarations and Extensions
# =============================================================================

class Variance(Enum):
    """Variance annotation of a type parameter."""

    INVARIANT = ""
    COVARIANT = "+"
    CONTRAVARIANT = "-"


TypeParam = Tuple[CoreType, Variance]


@dataclass(frozen=True)
class ConstructorDeclaration:
    """A constructor of a variant type ``C of t1 * t2``."""

    name: str
    args: Tuple[CoreType, ...] = ()
    res: Optional[CoreType] = None
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class LabelDeclaration:
    """A field of a record type."""

    name: str
    typ: CoreType
    mutable: bool = False
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class TypeKind:
    """Base class of type declaration kinds."""


@dataclass(frozen=True)
class TypeAbstract(TypeKind):
    """An abstract type or a pure alias."""


@dataclass(frozen=True)
class TypeVariantKind(TypeKind):
    """A variant type."""

    constructors: Tuple[ConstructorDeclaration, ...]


@dataclass(frozen=True)
class TypeRecord(TypeKind):
    """A record type."""

    labels: Tuple[LabelDeclaration, ...]


@dataclass(frozen=True)
class TypeOpen(TypeKind):
    """An extensible type ``..``."""


@dataclass(frozen=True)
class TypeDeclaration:
    """A type declaration ``type ('a, 'b) name = manifest = kind``."""

    name: str
    params: Tuple[TypeParam, ...] = ()
    kind: TypeKind = field(default_factory=TypeAbstract)
    manifest: Optional[CoreType] = None
    private: bool = False
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class ExtensionConstructor:
    """A constructor added by a type extension."""

    name: str
    args: Tuple[CoreType, ...] = ()
    res: Optional[CoreType] = None
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class TypeExtension:
    """A type extension ``type 'a path += C1 | C2``."""

    path: Longident
    params: Tuple[TypeParam, ...] = ()
    constructors: Tuple[ExtensionConstructor, ...] = ()
    private: bool = False
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


# =============================================================================
# Modules
# =============================================================================

@dataclass(frozen=True)
class ModuleExpr:
    """Base class of module expressions."""

    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class ModStructure(ModuleExpr):
    """``struct ... end``."""

    items: Tuple[StructureItem, ...]


@dataclass(frozen=True)
class ModIdent(ModuleExpr):
    """A module path."""

    ident: Longident


@dataclass(frozen=True)
class ModFunctor(ModuleExpr):
    """``functor (Param : param_type) -> body``."""

    param: str
    param_type: Optional[ModuleType]
    body: ModuleExpr


@dataclass(frozen=True)
class ModuleType:
    """Base class of module types."""

    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class MtySignature(ModuleType):
    """``sig ... end``."""

    items: Tuple[SignatureItem, ...]


@dataclass(frozen=True)
class MtyIdent(ModuleType):
    """A module type path."""

    ident: Longident


@dataclass(frozen=True)
class MtyFunctor(ModuleType):
    """``functor (Param : param_type) -> body``."""

    param: str
    param_type: Optional[ModuleType]
    body: ModuleType


@dataclass(frozen=True)
class ModuleBinding:
    """``module Name = expr``."""

    name: str
    expr: ModuleExpr
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class ModuleDeclaration:
    """``module Name : mtype``."""

    name: str
    mtype: ModuleType
    loc: Location = _loc()
    attributes: Tuple[Attribute, ...] = _attrs()


# =============================================================================
# Structures and Signatures
# =============================================================================

@dataclass(frozen=True)
class StructureItem:
    """Base class of structure items."""

    loc: Location = _loc()


@dataclass(frozen=True)
class StrEval(StructureItem):
    """A toplevel expression."""

    expr: Expression
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class StrValue(StructureItem):
    """``let [rec] bindings``."""

    bindings: Tuple[ValueBinding, ...]
    recursive: bool = False


@dataclass(frozen=True)
class StrType(StructureItem):
    """A group of type declarations."""

    decls: Tuple[TypeDeclaration, ...]
    recursive: bool = True


@dataclass(frozen=True)
class StrTypext(StructureItem):
    """A type extension."""

    ext: TypeExtension


@dataclass(frozen=True)
class StrModule(StructureItem):
    """A module binding."""

    binding: ModuleBinding


@dataclass(frozen=True)
class StrRecModule(StructureItem):
    """A group of recursive module bindings."""

    bindings: Tuple[ModuleBinding, ...]


@dataclass(frozen=True)
class SignatureItem:
    """Base class of signature items."""

    loc: Location = _loc()


@dataclass(frozen=True)
class SigValue(SignatureItem):
    """``val name : typ``."""

    name: str
    typ: CoreType
    attributes: Tuple[Attribute, ...] = _attrs()


@dataclass(frozen=True)
class SigType(SignatureItem):
    """A group of type declarations."""

    decls: Tuple[TypeDeclaration, ...]
    recursive: bool = True


@dataclass(frozen=True)
class SigTypext(SignatureItem):
    """A type extension."""

    ext: TypeExtension


@dataclass(frozen=True)
class SigModule(SignatureItem):
    """A module declaration."""

    decl: ModuleDeclaration


@dataclass(frozen=True)
class SigRecModule(SignatureItem):
    """A group of recursive module declarations."""

    decls: Tuple[ModuleDeclaration, ...]


Structure = List[StructureItem]
Signature = List[SignatureItem]
