"""
String utility functions for fsmentry.

Provides the naming transformations used when deriving transition method
names and comparing payload types.
"""

from __future__ import annotations

import re

# Strict and reserved keywords of Rust 2021
RUST_KEYWORDS = frozenset(
    {
        "abstract",
        "as",
        "async",
        "await",
        "become",
        "box",
        "break",
        "const",
        "continue",
        "crate",
        "do",
        "dyn",
        "else",
        "enum",
        "extern",
        "false",
        "final",
        "fn",
        "for",
        "gen",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "macro",
        "match",
        "mod",
        "move",
        "mut",
        "override",
        "priv",
        "pub",
        "ref",
        "return",
        "self",
        "Self",
        "static",
        "struct",
        "super",
        "trait",
        "true",
        "try",
        "type",
        "typeof",
        "unsafe",
        "unsized",
        "use",
        "virtual",
        "where",
        "while",
        "yield",
    }
)

# Keywords that cannot be written as raw identifiers
NON_RAW_KEYWORDS = frozenset({"crate", "self", "Self", "super", "_"})

_IDENTIFIER_RE = re.compile(r"^(r#)?[A-Za-z_][A-Za-z0-9_]*$")
_TYPE_TOKEN_RE = re.compile(r"'?[A-Za-z0-9_]+|\S")


def snake_case(name: str) -> str:
    """
    Convert a CamelCase node name to a snake_case method name.

    An underscore is inserted before every uppercase character except the
    first, then everything is lowercased. Existing underscores are kept.

    Args:
        name: Node name

    Returns:
        snake_case form of the name

    Examples:
        >>> snake_case("BeautifulBridge")
        'beautiful_bridge'
        >>> snake_case("RedAmber")
        'red_amber'
        >>> snake_case("end")
        'end'
    """
    name = strip_raw(name)
    chars = []
    for i, ch in enumerate(name):
        if i > 0 and ch.isupper():
            chars.append("_")
        chars.append(ch.lower())
    return "".join(chars)


def strip_raw(name: str) -> str:
    """Remove a leading ``r#`` raw identifier marker."""
    return name[2:] if name.startswith("r#") else name


def is_identifier(name: str) -> bool:
    """Check whether ``name`` is a (possibly raw) identifier."""
    return bool(_IDENTIFIER_RE.match(name))


def node_identifier(name: str) -> str:
    """
    Canonical spelling of a node name, as used for enum variants.

    ``r#`` is dropped where the name is not a keyword, so ``r#B`` and ``B``
    name the same node. Bare keywords must be written raw.

    Raises:
        ValueError: If the name cannot be used as a variant name

    Examples:
        >>> node_identifier("r#Bridge")
        'Bridge'
        >>> node_identifier("r#type")
        'r#type'
    """
    bare = strip_raw(name)
    if bare in NON_RAW_KEYWORDS:
        raise ValueError(f"`{bare}` cannot be used as a node name")
    if bare in RUST_KEYWORDS:
        if not name.startswith("r#"):
            raise ValueError(f"`{bare}` is a keyword; write it as `r#{bare}`")
        return name
    return bare


def escape_identifier(name: str) -> str:
    """
    Make ``name`` usable as a Rust method name.

    Keywords become raw identifiers (``type`` -> ``r#type``); the keywords
    that cannot be raw get a trailing underscore (``self`` -> ``self_``).

    Examples:
        >>> escape_identifier("fork")
        'fork'
        >>> escape_identifier("type")
        'r#type'
        >>> escape_identifier("self")
        'self_'
    """
    if name.startswith("r#"):
        bare = name[2:]
        return f"{bare}_" if bare in NON_RAW_KEYWORDS else name
    if name in NON_RAW_KEYWORDS:
        return f"{name}_"
    if name in RUST_KEYWORDS:
        return f"r#{name}"
    return name


def normalize_type(text: str) -> str:
    """Collapse runs of whitespace in a type to single spaces."""
    return " ".join(text.split())


def types_equal(left: str, right: str) -> bool:
    """
    Compare two payload types token by token, ignoring whitespace.

    Examples:
        >>> types_equal("Vec<u8>", "Vec < u8 >")
        True
        >>> types_equal("&'a mut T", "&'amut T")
        False
    """
    return type_tokens(left) == type_tokens(right)


def type_tokens(text: str) -> list[str]:
    """
    Split a type into words, lifetimes and single punctuation characters.

    Examples:
        >>> type_tokens("&'a mut Vec<u8>")
        ['&', "'a", 'mut', 'Vec', '<', 'u8', '>']
    """
    return _TYPE_TOKEN_RE.findall(text)


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """
    Split ``text`` on ``separator`` outside of brackets.

    ``<>``, ``()``, ``[]`` and ``{}`` all nest; ``->`` is not a closing
    angle bracket. Empty pieces are dropped.

    Examples:
        >>> split_top_level("'a, T: Into<(u8, u16)>, const N: usize")
        ["'a", 'T: Into<(u8, u16)>', 'const N: usize']
    """
    pieces = []
    depth = 0
    current: list[str] = []
    previous = ""
    for ch in text:
        if ch in "<([{":
            depth += 1
        elif ch in ")]}" or (ch == ">" and previous != "-"):
            depth -= 1
        if ch == separator and depth == 0:
            pieces.append("".join(current))
            current = []
        else:
            current.append(ch)
        previous = ch
    pieces.append("".join(current))
    return [normalize_type(piece) for piece in pieces if piece.strip()]
