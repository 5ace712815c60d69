"""
Deriving compiler pass.

This package holds the deriver registry, the [@@deriving] annotation
resolver and the program walker that splices generated code into a
compilation unit.
"""

from .registry import (
    Deriver,
    DeriverRegistry,
    create_deriver,
    get_registry,
    register,
    lookup,
)
from .attributes import find_attr, has_attr, attr
from .resolver import DerivingRequest, parse_deriving, derive, derive_type_decl, derive_type_ext
from .mapper import MapperContext, DerivingMapper, rewrite_structure, rewrite_signature

__all__ = [
    "Deriver",
    "DeriverRegistry",
    "create_deriver",
    "get_registry",
    "register",
    "lookup",
    "find_attr",
    "has_attr",
    "attr",
    "DerivingRequest",
    "parse_deriving",
    "derive",
    "derive_type_decl",
    "derive_type_ext",
    "MapperContext",
    "DerivingMapper",
    "rewrite_structure",
    "rewrite_signature",
]
