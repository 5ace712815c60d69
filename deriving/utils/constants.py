"""
Constants for the deriving framework.

This module holds the default names the engine and its generators agree
on: attribute and extension names, prefixes of generated identifiers and
the runtime environment opened around generated code.
"""

# =============================================================================
# Annotation Surface
# =============================================================================

DERIVING_ATTRIBUTE = "deriving"
OPTIONAL_OPTION = "optional"
INLINE_EXTENSION_PREFIX = "derive."
WARNING_ATTRIBUTE = "ocaml.warning"

# =============================================================================
# Generated Identifiers
# =============================================================================

DEFAULT_FIXPOINT = "t"
DEFAULT_QUOTE_PREFIX = "__"
DEFAULT_POLY_PREFIX = "poly_"
AFFIX_SEPARATOR = "_"

# =============================================================================
# Hygiene
# =============================================================================

DEFAULT_RUNTIME_MODULE = "Ppx_deriving_runtime"
DEFAULT_WARNING_SPEC = "-A"

# =============================================================================
# Source Identity
# =============================================================================

TOPLEVEL_INPUT_NAME = "//toplevel//"
SOURCE_SUFFIXES = (".ml", ".mli")
