"""
Test package structure and basic imports.

This test module verifies that the package is properly structured
and all modules can be imported without errors.
"""

import pytest
import sys
from pathlib import Path

# Add the project root to the path for testing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_main_package_import():
    """Test that the main deriving package can be imported."""
    import deriving

    assert hasattr(deriving, '__version__')
    assert hasattr(deriving, '__author__')
    assert hasattr(deriving, 'register')
    assert hasattr(deriving, 'rewrite_structure')
    assert hasattr(deriving, 'Deriver')


def test_syntax_imports():
    """Test that syntax submodules can be imported."""
    from deriving.syntax import (
        AstMapper,
        Longident,
        StrType,
        TypeDeclaration,
        evar,
        string_of_structure,
    )

    assert AstMapper is not None
    assert Longident.parse("M.t").last == "t"
    assert StrType is not None
    assert TypeDeclaration is not None
    assert evar is not None
    assert string_of_structure([]) == ""


def test_codegen_imports():
    """Test that codegen helpers can be imported."""
    from deriving.codegen import (
        arg,
        quote,
        sanitize,
        free_vars_in_core_type,
        poly_fun_of_type_decl,
        hash_variant,
    )

    assert callable(arg.get_attr)
    assert callable(quote)
    assert callable(sanitize)
    assert callable(free_vars_in_core_type)
    assert callable(poly_fun_of_type_decl)
    assert callable(hash_variant)


def test_compiler_imports():
    """Test that compiler submodules can be imported."""
    from deriving.compiler import (
        DeriverRegistry,
        DerivingMapper,
        derive,
        parse_deriving,
        rewrite_signature,
    )

    assert DeriverRegistry is not None
    assert DerivingMapper is not None
    assert callable(derive)
    assert callable(parse_deriving)
    assert callable(rewrite_signature)


def test_utils_imports():
    """Test that utility modules can be imported."""
    from deriving.utils import (
        DerivingError,
        DerivingConfig,
        Prefix,
        get_logger,
        mangle,
    )

    assert issubclass(DerivingError, Exception)
    assert DerivingConfig is not None
    assert mangle(Prefix("show"), "t") == "show"
    assert get_logger("x").name == "deriving.x"


def test_version_format():
    """Test that version follows semantic versioning."""
    import deriving

    parts = deriving.__version__.split('.')
    assert len(parts) >= 2
    for part in parts:
        assert part.isdigit()


if __name__ == "__main__":
    pytest.main([__file__])
