"""
Syntax tree package.

Immutable syntax tree nodes, construction helpers, a source printer and
the default mapper derived traversals build on.
"""

from .nodes import *
from .builders import *
from .mapper import AstMapper
from .printer import (
    string_of_core_type,
    string_of_expression,
    string_of_pattern,
    string_of_structure,
    string_of_signature,
)
