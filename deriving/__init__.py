"""
deriving: a [@@deriving] code generation engine.

A syntax-tree-to-syntax-tree pass that expands type declarations
annotated with ``[@@deriving name]`` by running registered derivers
(code generators) on them and splicing their output after the
declaration.

Usage:
    from deriving import create_deriver, register, rewrite_structure

    register(create_deriver("show", type_decl_str=expand_show))
    expanded = rewrite_structure(structure, input_name="shapes.ml")
"""

__version__ = "0.1.0"
__author__ = "deriving Team"
__email__ = "deriving@example.com"

from .compiler import (
    Deriver,
    DeriverRegistry,
    DerivingMapper,
    create_deriver,
    get_registry,
    register,
    lookup,
    rewrite_structure,
    rewrite_signature,
)

from .utils import (
    DerivingConfig,
    DerivingError,
    get_config,
)

__all__ = [
    "Deriver",
    "DeriverRegistry",
    "DerivingMapper",
    "create_deriver",
    "get_registry",
    "register",
    "lookup",
    "rewrite_structure",
    "rewrite_signature",
    "DerivingConfig",
    "DerivingError",
    "get_config",
]
