"""
Code generation helpers for deriver authors.

This package provides the building blocks every deriver needs: option
and attribute decoding, polymorphic wrappers over type parameters, free
variable analysis, hygienic quoting and small expression combinators.
"""

from . import arg
from .arg import Ok, Error, get_attr, get_flag, get_expr
from .quoter import Quoter, quote, sanitize, with_quoter
from .type_params import (
    fold_left_type_params,
    fold_right_type_params,
    fold_left_type_decl,
    fold_left_type_ext,
    fold_right_type_decl,
    fold_right_type_ext,
    poly_fun_of_type_decl,
    poly_fun_of_type_ext,
    poly_apply_of_type_decl,
    poly_apply_of_type_ext,
    poly_arrow_of_type_decl,
    poly_arrow_of_type_ext,
    core_type_of_type_decl,
    core_type_of_type_ext,
)
from .free_vars import free_vars_in_core_type, strong_type_of_type
from .combinators import fold_exprs, seq_reduce, binop_reduce, attr_warning, hash_variant

__all__ = [
    # Argument decoding
    "arg",
    "Ok",
    "Error",
    "get_attr",
    "get_flag",
    "get_expr",

    # Hygiene
    "Quoter",
    "quote",
    "sanitize",
    "with_quoter",

    # Type parameters
    "fold_left_type_params",
    "fold_right_type_params",
    "fold_left_type_decl",
    "fold_left_type_ext",
    "fold_right_type_decl",
    "fold_right_type_ext",
    "poly_fun_of_type_decl",
    "poly_fun_of_type_ext",
    "poly_apply_of_type_decl",
    "poly_apply_of_type_ext",
    "poly_arrow_of_type_decl",
    "poly_arrow_of_type_ext",
    "core_type_of_type_decl",
    "core_type_of_type_ext",

    # Free variables
    "free_vars_in_core_type",
    "strong_type_of_type",

    # Combinators
    "fold_exprs",
    "seq_reduce",
    "binop_reduce",
    "attr_warning",
    "hash_variant",
]
