"""Tests for naming helpers and Rust syntax fragments."""

import pytest

from fsmentry.core.rust_syntax import (
    generic_params,
    impl_generics,
    param_name,
    type_generics,
    where_clause,
    with_lifetime,
)
from fsmentry.core.strings import (
    escape_identifier,
    is_identifier,
    node_identifier,
    snake_case,
    split_top_level,
    strip_raw,
    type_tokens,
    types_equal,
)


class TestSnakeCase:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("BeautifulBridge", "beautiful_bridge"),
            ("RedAmber", "red_amber"),
            ("End", "end"),
            ("end", "end"),
            ("HTTPServer", "h_t_t_p_server"),
            ("Foo_Bar", "foo__bar"),
            ("r#Match", "match"),
        ],
    )
    def test_snake_case(self, name: str, expected: str) -> None:
        assert snake_case(name) == expected


class TestIdentifiers:
    def test_escape_plain(self) -> None:
        assert escape_identifier("fork") == "fork"

    def test_escape_keyword(self) -> None:
        assert escape_identifier("type") == "r#type"
        assert escape_identifier("match") == "r#match"

    @pytest.mark.parametrize("name", ["self", "Self", "super", "crate", "r#self"])
    def test_escape_non_raw_keyword(self, name: str) -> None:
        assert escape_identifier(name) == f"{strip_raw(name)}_"

    def test_already_raw(self) -> None:
        assert escape_identifier("r#type") == "r#type"

    def test_is_identifier(self) -> None:
        assert is_identifier("Start")
        assert is_identifier("r#type")
        assert is_identifier("_private")
        assert not is_identifier("two words")
        assert not is_identifier("9lives")
        assert not is_identifier("")

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("Start", "Start"), ("r#Start", "Start"), ("r#type", "r#type"), ("Type", "Type")],
    )
    def test_node_identifier(self, name: str, expected: str) -> None:
        assert node_identifier(name) == expected

    def test_node_identifier_rejects_keyword(self) -> None:
        with pytest.raises(ValueError, match="write it as `r#fn`"):
            node_identifier("fn")

    @pytest.mark.parametrize("name", ["self", "Self", "r#super", "crate", "_"])
    def test_node_identifier_rejects_non_raw_keyword(self, name: str) -> None:
        with pytest.raises(ValueError, match="cannot be used as a node name"):
            node_identifier(name)


class TestTypes:
    def test_types_equal_ignores_whitespace(self) -> None:
        assert types_equal("Vec<u8>", "Vec < u8 >")
        assert types_equal("&'a mut T", "&'a mut T")
        assert not types_equal("String", "Vec<u8>")

    def test_types_equal_keeps_token_boundaries(self) -> None:
        assert not types_equal("&'a mut T", "&'amut T")
        assert not types_equal("dyn Fn", "dynFn")

    def test_type_tokens(self) -> None:
        assert type_tokens("&'a mut Vec<u8>") == ["&", "'a", "mut", "Vec", "<", "u8", ">"]

    def test_split_top_level(self) -> None:
        assert split_top_level("'a, T: Into<(u8, u16)>, const N: usize") == [
            "'a",
            "T: Into<(u8, u16)>",
            "const N: usize",
        ]

    def test_split_ignores_function_arrows(self) -> None:
        assert split_top_level("F: Fn(u8) -> u16, T") == ["F: Fn(u8) -> u16", "T"]

    def test_split_drops_trailing_separator(self) -> None:
        assert split_top_level("T: Ord,") == ["T: Ord"]


class TestGenerics:
    def test_generic_params(self) -> None:
        assert generic_params("<'a, T: Ord>") == ["'a", "T: Ord"]
        assert generic_params("") == []

    def test_generic_params_rejects_unbracketed(self) -> None:
        with pytest.raises(ValueError):
            generic_params("T")

    @pytest.mark.parametrize(
        ("param", "expected"),
        [
            ("'a: 'b", "'a"),
            ("T: Ord = u8", "T"),
            ("const N: usize", "N"),
            ("T", "T"),
        ],
    )
    def test_param_name(self, param: str, expected: str) -> None:
        assert param_name(param) == expected

    def test_impl_generics_drop_defaults(self) -> None:
        assert impl_generics(["T: Clone = u8", "const N: usize = 3"]) == "<T: Clone, const N: usize>"

    def test_impl_generics_keep_nested_equals(self) -> None:
        assert impl_generics(["I: Iterator<Item = u8>"]) == "<I: Iterator<Item = u8>>"

    def test_type_generics(self) -> None:
        assert type_generics(with_lifetime("'state", ["'a", "T: Ord"])) == "<'state, 'a, T>"
        assert type_generics([]) == ""

    def test_where_clause(self) -> None:
        assert where_clause(["T: Ord", "U:  Clone"]) == "\nwhere\n    T: Ord,\n    U: Clone,"
        assert where_clause([]) == ""
