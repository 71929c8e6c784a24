"""
Diagram rendering for generated documentation.

Diagrams are pure decoration: a renderer turns graph text into markup for
the generated docs, or returns None to skip. Generated code never depends
on whether a renderer succeeded.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterator
from typing import Protocol, runtime_checkable

from ..core import ir
from ..core.errors import RenderError

logger = logging.getLogger(__name__)

DEFAULT_MERMAID_URL = "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.esm.min.mjs"

# Seconds to wait for `dot`
DOT_TIMEOUT = 30


def _draw(graph: ir.Graph) -> Iterator[tuple[str, str | None]]:
    """Edges in sorted order, then every node that no edge mentions."""
    isolated = set(graph.nodes)
    for source, target in graph.edge_keys():
        isolated.discard(source)
        isolated.discard(target)
        yield source, target
    for node_id in sorted(isolated):
        yield node_id, None


def dot_text(graph: ir.Graph, name: str) -> str:
    """
    Render the graph as a Graphviz digraph, for example:

        digraph Road {
          Fork -> End;
          Fork -> Start;
          Start -> Fork;
        }
    """
    lines = [f"digraph {name} {{"]
    for left, right in _draw(graph):
        lines.append(f"  {left} -> {right};" if right else f"  {left};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def mermaid_text(graph: ir.Graph) -> str:
    """Render the graph as a left-to-right mermaid flowchart."""
    lines = ["graph LR"]
    for left, right in _draw(graph):
        lines.append(f"  {left} --> {right};" if right else f"  {left};")
    return "\n".join(lines) + "\n"


@runtime_checkable
class Renderer(Protocol):
    """Turns diagram text into documentation markup, or None to skip."""

    def render(self, diagram: str) -> str | None: ...


class NullRenderer:
    """Never renders anything."""

    def render(self, diagram: str) -> str | None:
        return None


class OptionalRenderer:
    """Forwards to an inner renderer when there is one."""

    def __init__(self, inner: Renderer | None = None):
        self.inner = inner

    def render(self, diagram: str) -> str | None:
        if self.inner is None:
            return None
        return self.inner.render(diagram)


class CallableRenderer:
    """Adapts a plain function to the Renderer protocol."""

    def __init__(self, func: Callable[[str], str | None]):
        self.func = func

    def render(self, diagram: str) -> str | None:
        return self.func(diagram)


class MermaidRenderer:
    """
    Embeds the diagram with a script that loads mermaid.js in the browser.

    The dark theme is selected when rustdoc is showing a dark theme.
    """

    def __init__(self, url: str = DEFAULT_MERMAID_URL):
        self.url = url

    def render(self, diagram: str) -> str | None:
        return (
            '<pre class="mermaid">\n'
            f"{diagram}\n"
            "</pre>\n"
            '<script type="module">\n'
            f'  import mermaid from "{self.url}";\n'
            '  var doc_theme = localStorage.getItem("rustdoc-theme");\n'
            '  if (doc_theme === "dark" || doc_theme === "ayu") '
            'mermaid.initialize({theme: "dark"});\n'
            "</script>"
        )


class GraphvizRenderer:
    """
    Renders DOT text to SVG by running Graphviz.

    With ``strict`` set, any failure raises RenderError; otherwise failures
    are logged at debug level and the diagram is skipped.
    """

    def __init__(self, executable: str = "dot", strict: bool = False, timeout: int = DOT_TIMEOUT):
        self.executable = executable
        self.strict = strict
        self.timeout = timeout

    def render(self, diagram: str) -> str | None:
        try:
            return self._run(diagram)
        except RenderError as e:
            if self.strict:
                raise
            logger.debug("Skipping SVG diagram: %s", e.message)
            return None

    def _run(self, diagram: str) -> str:
        if shutil.which(self.executable) is None:
            raise RenderError(f"Could not find `{self.executable}`: is Graphviz installed and on the PATH?")
        try:
            result = subprocess.run(
                [self.executable, "-Tsvg"],
                input=diagram,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RenderError(f"`{self.executable}` timed out after {self.timeout}s") from e
        except OSError as e:
            raise RenderError(f"Could not run `{self.executable}`: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            detail = f": {stderr}" if stderr else ""
            raise RenderError(f"`{self.executable}` exited with code {result.returncode}{detail}")
        return result.stdout


def render_svg_docs(graph: ir.Graph, name: str, renderer: Renderer) -> list[str]:
    """Documentation fragments holding the rendered SVG, or [] when skipped."""
    svg = renderer.render(dot_text(graph, name))
    if svg is None:
        return []
    return [f"<div>{svg}</div>"]
