"""
Helpers for the fragments of Rust syntax that the generator re-emits.

Generic parameter lists and where clauses are captured as opaque text by
the parser; these helpers derive the forms needed for impl blocks.
"""

from __future__ import annotations

from .strings import normalize_type, split_top_level

ENTRY_LIFETIME = "'state"


def generic_params(generics: str) -> list[str]:
    """
    Split a generic parameter list into its parameters.

    Examples:
        >>> generic_params("<'a, T: Ord>")
        ["'a", 'T: Ord']
        >>> generic_params("")
        []
    """
    generics = generics.strip()
    if not generics:
        return []
    if not (generics.startswith("<") and generics.endswith(">")):
        raise ValueError(f"not a generic parameter list: {generics!r}")
    return split_top_level(generics[1:-1])


def param_name(param: str) -> str:
    """
    Name of a single generic parameter, without bounds or defaults.

    Examples:
        >>> param_name("'a: 'b")
        "'a"
        >>> param_name("T: Ord = u8")
        'T'
        >>> param_name("const N: usize")
        'N'
    """
    param = param.strip()
    if param.startswith("const "):
        param = param[len("const ") :].strip()
    for stop in (":", "="):
        param = param.split(stop, 1)[0]
    return param.strip()


def impl_generics(params: list[str]) -> str:
    """Parameter list for ``impl<...>``, with bounds but without defaults."""
    if not params:
        return ""
    cleaned = []
    for param in params:
        depth = 0
        cut = len(param)
        previous = ""
        for i, ch in enumerate(param):
            if ch in "<([{":
                depth += 1
            elif ch in ")]}" or (ch == ">" and previous != "-"):
                depth -= 1
            elif ch == "=" and depth == 0:
                cut = i
                break
            previous = ch
        cleaned.append(normalize_type(param[:cut]))
    return f"<{', '.join(cleaned)}>"


def type_generics(params: list[str]) -> str:
    """Argument list naming every parameter: ``<'a, T>``."""
    if not params:
        return ""
    return f"<{', '.join(param_name(p) for p in params)}>"


def with_lifetime(lifetime: str, params: list[str]) -> list[str]:
    """Prepend ``lifetime`` to a parameter list."""
    return [lifetime] + list(params)


def where_clause(predicates: list[str], indent: str = "") -> str:
    """
    Render a where clause on its own lines, or "" when there are none.

    Examples:
        >>> where_clause(["T: Ord"])
        '\\nwhere\\n    T: Ord,'
    """
    if not predicates:
        return ""
    lines = [f"\n{indent}where"]
    lines.extend(f"\n{indent}    {normalize_type(p)}," for p in predicates)
    return "".join(lines)
