"""
Generated source representation.

A SourceUnit is an ordered list of Rust items. Each item carries its outer
documentation separately from its body so that documentation (such as a
rendered diagram) can be attached after generation without touching code.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


def rust_string(text: str) -> str:
    """Quote ``text`` as a Rust string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def doc_lines(docs: list[str] | tuple[str, ...], indent: str = "") -> list[str]:
    """
    Render documentation fragments as outer doc comments.

    Single-line fragments become ``///`` comments; a fragment spanning
    several lines becomes one ``#[doc = "..."]`` attribute.
    """
    lines = []
    for fragment in docs:
        if "\n" in fragment:
            lines.append(f"{indent}#[doc = {rust_string(fragment)}]")
        else:
            lines.append(f"{indent}///{fragment}")
    return lines


@dataclass(frozen=True)
class SourceItem:
    """
    One top-level Rust item.

    Attributes:
        body: Item source, from the visibility to the closing brace or semicolon
        doc: Outer documentation fragments
        attrs: Outer attributes, rendered verbatim after the documentation
    """

    body: str
    doc: tuple[str, ...] = ()
    attrs: tuple[str, ...] = ()

    def render(self) -> str:
        lines = doc_lines(self.doc)
        lines.extend(self.attrs)
        lines.append(self.body)
        return "\n".join(lines)


@dataclass(frozen=True)
class SourceUnit:
    """Generated Rust items, in emission order."""

    items: tuple[SourceItem, ...] = field(default_factory=tuple)

    def render(self) -> str:
        """Render every item, one after another, ending with a newline."""
        return "".join(f"{item.render()}\n" for item in self.items)

    def with_docs(self, docs: list[str], index: int = 0) -> SourceUnit:
        """
        Copy of this unit with ``docs`` appended to one item's documentation.

        A blank line separates the new fragments from existing ones.
        """
        if not docs:
            return self
        items = list(self.items)
        item = items[index]
        separator = ("",) if item.doc else ()
        items[index] = replace(item, doc=item.doc + separator + tuple(docs))
        return SourceUnit(items=tuple(items))

    def __len__(self) -> int:
        return len(self.items)
