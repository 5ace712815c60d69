"""
Unit tests for [@@deriving] annotation resolution.

Tests attribute lookup, the payload grammar, optional derivers and
error reporting for unknown derivers and failing entry points.
"""

import pytest
from unittest.mock import Mock, patch

import deriving.compiler.resolver as resolver_module
from deriving.compiler.attributes import attr, find_attr, has_attr
from deriving.compiler.registry import create_deriver
from deriving.compiler.resolver import derive, derive_type_decl, derive_type_ext, parse_deriving
from deriving.syntax import (
    Attribute,
    ExpApply,
    ExpIdent,
    Location,
    PTyp,
    StrType,
    StrTypext,
    StrValue,
    app,
    attribute,
    bool_const,
    evar,
    int_const,
    record,
    str_const,
    tuple_,
    tvar,
)
from deriving.utils.exceptions import (
    DerivingSyntaxError,
    InvalidArgumentError,
    UnknownDeriverError,
    UnsupportedEntryPointError,
)

from conftest import deriving_attr, type_decl, type_ext


class TestAttributeLookup:
    """Test find_attr / has_attr / attr."""

    def test_find_attr_returns_first(self):
        first = attribute("printer", evar("f"))
        attrs = [attribute("other"), first, attribute("printer", evar("g"))]
        assert find_attr("printer", attrs) is first
        assert has_attr("printer", attrs)
        assert find_attr("missing", attrs) is None
        assert not has_attr("missing", attrs)

    def test_attr_prefers_most_specific(self):
        generic = attribute("printer", evar("generic"))
        scoped = attribute("show.printer", evar("scoped"))
        full = attribute("deriving.show.printer", evar("full"))
        assert attr("show", "printer", [generic, scoped, full]) is full
        assert attr("show", "printer", [generic, scoped]) is scoped
        assert attr("show", "printer", [generic]) is generic

    def test_attr_ignores_other_derivers(self):
        assert attr("show", "printer", [attribute("yojson.printer", evar("f"))]) is None


class TestParseDeriving:
    """Test the [@@deriving] payload grammar."""

    def test_bare_name(self):
        requests = parse_deriving([deriving_attr(evar("show"))])
        assert [(r.name, r.options, r.optional) for r in requests] == [("show", (), False)]

    def test_tuple_of_names(self):
        requests = parse_deriving([deriving_attr(tuple_([evar("show"), evar("eq"), evar("ord")]))])
        assert [r.name for r in requests] == ["show", "eq", "ord"]

    def test_options_record(self):
        payload = app(evar("show"), [record([("with_path", bool_const(False)), ("width", int_const(2))])])
        (request,) = parse_deriving([deriving_attr(payload)])
        assert request.name == "show"
        assert request.options == (("with_path", bool_const(False)), ("width", int_const(2)))

    def test_qualified_name(self):
        (request,) = parse_deriving([deriving_attr(evar("Foo.bar"))])
        assert request.name == "Foo.bar"

    def test_optional_is_stripped(self):
        payload = app(evar("yojson"), [record([("optional", bool_const(True)), ("strict", bool_const(False))])])
        (request,) = parse_deriving([deriving_attr(payload)])
        assert request.optional is True
        assert request.options == (("strict", bool_const(False)),)

    def test_optional_must_be_boolean(self):
        payload = app(evar("yojson"), [record([("optional", int_const(1))])])
        with pytest.raises(InvalidArgumentError, match="yojson: boolean expected"):
            parse_deriving([deriving_attr(payload)])

    def test_missing_annotation(self):
        with pytest.raises(DerivingSyntaxError, match="Missing"):
            parse_deriving([attribute("other")])

    @pytest.mark.parametrize("payload", [
        int_const(1),
        str_const("show"),
        app(evar("show"), [evar("x")]),
        app(evar("show"), [record([("a", int_const(1))]), record([("b", int_const(2))])]),
        ExpApply(evar("show"), (("label", record([("a", int_const(1))])),)),
        app(evar("show"), [record([("a", int_const(1))], base=evar("defaults"))]),
        tuple_([evar("show"), int_const(1)]),
    ])
    def test_unrecognized_syntax(self, payload):
        with pytest.raises(DerivingSyntaxError, match="Unrecognized"):
            parse_deriving([deriving_attr(payload)])

    def test_empty_payload(self):
        with pytest.raises(DerivingSyntaxError, match="Unrecognized"):
            parse_deriving([attribute("deriving")])

    def test_type_payload(self):
        with pytest.raises(DerivingSyntaxError):
            parse_deriving([Attribute("deriving", PTyp(tvar("a")))])


class TestDerive:
    """Test running requested derivers."""

    def test_original_item_comes_first(self, show_registry):
        decl = type_decl("t", attrs=[deriving_attr(evar("show"))])
        item = StrType((decl,))
        result = derive_type_decl(show_registry, ["M"], item, [decl], lambda d: d.type_decl_str)
        assert result[0] is item
        assert len(result) == 2
        assert isinstance(result[1], StrValue)

    def test_request_order_is_preserved(self, registry):
        for name in ["a", "b", "c"]:
            registry.register(create_deriver(
                name, type_decl_str=lambda options, path, decls, name=name: [name]
            ))
        decl = type_decl("t", attrs=[deriving_attr(tuple_([evar("c"), evar("a"), evar("b")]))])
        result = derive_type_decl(registry, [], "item", [decl], lambda d: d.type_decl_str)
        assert result == ["item", "c", "a", "b"]

    def test_options_and_path_are_passed(self, registry):
        entry = Mock(return_value=[])
        registry.register(create_deriver("d", type_decl_str=entry))
        payload = app(evar("d"), [record([("k", int_const(1))])])
        decl = type_decl("t", attrs=[deriving_attr(payload)])
        derive_type_decl(registry, ("M", "N"), "item", [decl], lambda d: d.type_decl_str)
        entry.assert_called_once_with([("k", int_const(1))], ["M", "N"], [decl])

    def test_group_attributes_are_combined(self, show_registry):
        plain = type_decl("a")
        annotated = type_decl("b", attrs=[deriving_attr(evar("show"))])
        result = derive_type_decl(show_registry, [], "item", [plain, annotated], lambda d: d.type_decl_str)
        names = [vb.pattern.name for vb in result[1].bindings]
        assert names == ["show_a", "show_b"]

    def test_unknown_deriver(self, registry):
        loc = Location("x.ml", 1, 20, 24)
        decl = type_decl("t", attrs=[deriving_attr(ExpIdent(evar("nope").ident, loc=loc))])
        with pytest.raises(UnknownDeriverError) as exc_info:
            derive_type_decl(registry, [], "item", [decl], lambda d: d.type_decl_str)
        assert exc_info.value.deriver == "nope"
        assert exc_info.value.loc == loc
        assert "Cannot locate deriver nope" in str(exc_info.value)

    def test_optional_unknown_deriver_is_skipped(self, show_registry):
        payload = tuple_([
            app(evar("yojson"), [record([("optional", bool_const(True))])]),
            evar("show"),
        ])
        decl = type_decl("t", attrs=[deriving_attr(payload)])
        with patch.object(resolver_module._log, "log_optional_skip") as mock_skip:
            result = derive_type_decl(show_registry, [], "item", [decl], lambda d: d.type_decl_str)
        mock_skip.assert_called_once_with("yojson")
        assert len(result) == 2

    def test_optional_registered_deriver_runs(self, show_registry):
        payload = app(evar("show"), [record([("optional", bool_const(True))])])
        decl = type_decl("t", attrs=[deriving_attr(payload)])
        result = derive_type_decl(show_registry, [], "item", [decl], lambda d: d.type_decl_str)
        assert len(result) == 2

    def test_unsupported_entry_point_gets_item_location(self, show_registry):
        loc = Location("x.mli", 4, 0, 30)
        ext = type_ext("M.err", ["Oops"], attrs=[deriving_attr(evar("show"))])
        with pytest.raises(UnsupportedEntryPointError) as exc_info:
            derive_type_ext(show_registry, [], "item", ext, lambda d: d.type_ext_sig, loc)
        assert exc_info.value.loc == loc
        assert "Extensible types in signatures not supported by deriver show" in str(exc_info.value)

    def test_type_extension(self, show_registry):
        ext = type_ext("M.err", ["Oops", "Again"], attrs=[deriving_attr(evar("show"))])
        item = StrTypext(ext)
        result = derive_type_ext(show_registry, [], item, ext, lambda d: d.type_ext_str)
        assert result[0] is item
        assert result[1].bindings[0].pattern.name == "show_err_constructors"

    def test_generic_derive(self, show_registry):
        decl = type_decl("t")
        result = derive(
            show_registry, [], "item", [deriving_attr(evar("show"))],
            lambda d: d.type_decl_str, [decl],
        )
        assert result[1].bindings[0].pattern.name == "show"
