"""
Unit tests for the deriver registry.

Tests registration, lookup, duplicate handling and the default entry
points of partially implemented derivers.
"""

import pytest
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import deriving.compiler.registry as registry_module
from deriving.compiler.registry import Deriver, DeriverRegistry, create_deriver
from deriving.utils.config import DerivingConfig, RegistryConfig, set_config
from deriving.utils.exceptions import DuplicateDeriverError, UnsupportedEntryPointError


class TestRegistration:
    """Test register and lookup."""

    def test_register_then_lookup(self, registry, show_deriver):
        registry.register(show_deriver)
        assert registry.lookup("show") is show_deriver
        assert "show" in registry
        assert len(registry) == 1

    def test_lookup_unknown(self, registry):
        assert registry.lookup("nope") is None
        assert "nope" not in registry

    def test_names_sorted(self, registry):
        for name in ["yojson", "eq", "show"]:
            registry.register(create_deriver(name))
        assert registry.names() == ["eq", "show", "yojson"]

    def test_qualified_name(self, registry):
        deriver = create_deriver("Foo.bar")
        registry.register(deriver)
        assert registry.lookup("Foo.bar") is deriver
        assert registry.lookup("bar") is None


class TestDuplicates:
    """Test duplicate registration behavior."""

    def test_last_registration_wins(self, registry):
        first = create_deriver("show")
        second = create_deriver("show")
        registry.register(first)
        registry.register(second)
        assert registry.lookup("show") is second
        assert len(registry) == 1

    def test_shadowing_is_logged(self, registry):
        registry.register(create_deriver("show"))
        with patch.object(registry_module._log.logger, "warning") as mock_warning:
            registry.register(create_deriver("show"))
        mock_warning.assert_called_once()
        assert "show" in mock_warning.call_args[0][0]

    def test_strict_registry_rejects(self):
        strict = DeriverRegistry(reject_duplicates=True)
        original = create_deriver("show")
        strict.register(original)
        with pytest.raises(DuplicateDeriverError) as exc_info:
            strict.register(create_deriver("show"))
        assert exc_info.value.deriver == "show"
        assert strict.lookup("show") is original

    def test_strictness_from_config(self):
        config = DerivingConfig()
        config.registry = RegistryConfig(reject_duplicates=True)
        set_config(config)
        assert DeriverRegistry().reject_duplicates is True

    def test_strictness_from_environment(self, monkeypatch):
        monkeypatch.setenv("DERIVING_STRICT_REGISTRY", "true")
        set_config(None)
        assert DeriverRegistry().reject_duplicates is True


class TestCreateDeriver:
    """Test create_deriver defaults."""

    @pytest.mark.parametrize("mode,message", [
        ("type_decl_str", "Type declarations in structures not supported by deriver only_inline"),
        ("type_decl_sig", "Type declarations in signatures not supported by deriver only_inline"),
        ("type_ext_str", "Extensible types in structures not supported by deriver only_inline"),
        ("type_ext_sig", "Extensible types in signatures not supported by deriver only_inline"),
    ])
    def test_missing_entry_point_fails_with_name(self, mode, message):
        deriver = create_deriver("only_inline", core_type=lambda typ: None)
        with pytest.raises(UnsupportedEntryPointError) as exc_info:
            getattr(deriver, mode)([], [], [])
        assert exc_info.value.message == message
        assert exc_info.value.deriver == "only_inline"
        assert exc_info.value.mode == mode

    def test_supported_entry_points(self, show_deriver):
        assert show_deriver.supported_entry_points() == ["type_decl_str", "type_ext_str", "type_decl_sig", "core_type"]
        assert create_deriver("empty").supported_entry_points() == []

    def test_given_entry_point_is_used(self):
        called = []

        def type_decl_str(options, path, decls):
            called.append((options, path, decls))
            return []

        deriver = create_deriver("d", type_decl_str=type_decl_str)
        assert deriver.type_decl_str([], ["M"], ["decl"]) == []
        assert called == [([], ["M"], ["decl"])]

    def test_deriver_is_immutable(self, show_deriver):
        with pytest.raises(FrozenInstanceError):
            show_deriver.name = "other"


class TestDefaultRegistry:
    """Test the process-wide registry helpers."""

    def test_module_level_register_and_lookup(self):
        with patch.object(registry_module, "_default_registry", None):
            deriver = create_deriver("global_test")
            registry_module.register(deriver)
            assert registry_module.lookup("global_test") is deriver
            assert isinstance(registry_module.get_registry(), DeriverRegistry)
