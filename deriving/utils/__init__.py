"""
Utils package for deriving.

This module provides logging, exceptions, configuration, constants and
naming utilities shared by the syntax, codegen and compiler packages.
"""

from .exceptions import (
    DerivingError,
    DerivingSyntaxError,
    UnknownDeriverError,
    UnsupportedEntryPointError,
    InvalidArgumentError,
    DuplicateDeriverError,
)
from .constants import *
from .naming import (
    Prefix,
    Suffix,
    PrefixSuffix,
    mangle,
    mangle_type_decl,
    mangle_lid,
    expand_path,
    path_of_type_decl,
    module_from_input_name,
    var_name_of_int,
    fresh_var,
)
from .config import (
    DerivingConfig,
    CodegenConfig,
    RegistryConfig,
    LoggingConfig,
    get_config,
    set_config,
    load_config,
)
from .logging import get_logger, setup_logging, DerivingLogger

__all__ = [
    # Exceptions
    "DerivingError",
    "DerivingSyntaxError",
    "UnknownDeriverError",
    "UnsupportedEntryPointError",
    "InvalidArgumentError",
    "DuplicateDeriverError",

    # Naming
    "Prefix",
    "Suffix",
    "PrefixSuffix",
    "mangle",
    "mangle_type_decl",
    "mangle_lid",
    "expand_path",
    "path_of_type_decl",
    "module_from_input_name",
    "var_name_of_int",
    "fresh_var",

    # Configuration
    "DerivingConfig",
    "CodegenConfig",
    "RegistryConfig",
    "LoggingConfig",
    "get_config",
    "set_config",
    "load_config",

    # Logging
    "get_logger",
    "setup_logging",
    "DerivingLogger",
]
