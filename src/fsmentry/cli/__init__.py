"""
fsmentry CLI.

Commands:

- generate: Generate Rust code from a DSL or DOT file (or stdin)
- check: Validate a machine and summarise its states
- diagram: Print the machine as DOT or mermaid text
"""

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from fsmentry._version import get_version
from fsmentry.codegen.diagram import GraphvizRenderer, dot_text, mermaid_text
from fsmentry.core import ir
from fsmentry.core.errors import FsmEntryError
from fsmentry.core.pipeline import InputLanguage, compile_machine, load_machine
from fsmentry.core.topology import TopologyKind, classify_all

from .utils import configure_logging, read_source, report_error, version_callback

__version__ = get_version()

console = Console()


class SvgMode(str, Enum):
    """Whether to shell out to `dot` for an SVG diagram in the docs."""

    FORCE = "force"
    OMIT = "omit"
    AUTO = "auto"


class DiagramFormat(str, Enum):
    DOT = "dot"
    MERMAID = "mermaid"


app = typer.Typer(
    help="""fsmentry – state machine code generator

Reads a state machine in the fsmentry DSL (or a Graphviz digraph) and
generates a Rust typestate "entry API" for it.
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
) -> None:
    """fsmentry CLI main callback for global options."""
    configure_logging(verbose)


@app.command()
def generate(
    file: str = typer.Argument("-", help="Input file, or `-` for stdin"),
    language: InputLanguage = typer.Option(
        InputLanguage.DSL, "--language", "--lang", "-l", help="Input language"
    ),
    svg: SvgMode = typer.Option(
        SvgMode.AUTO,
        "--svg",
        help="Include an SVG rendered by `dot` in the docs: force, omit, or auto (skip on failure)",
    ),
    name: str | None = typer.Option(None, "--name", "-n", help="Override the state enum name"),
    no_rename_methods: bool = typer.Option(
        False, "--no-rename-methods", help="Use destination names verbatim as method names"
    ),
    trusted: bool = typer.Option(
        False,
        "--trusted",
        help="Emit unreachable_unchecked instead of panics for mismatched states",
    ),
    mermaid: bool = typer.Option(
        False, "--mermaid", help="Embed a mermaid diagram in the entry enum docs"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout"
    ),
) -> None:
    """
    Generate Rust code for a state machine.

    Parse and validation errors are printed with their source location and
    exit with status 1.
    """
    text, path = read_source(file)

    overrides: dict[str, object] = {}
    if no_rename_methods:
        overrides["rename_methods"] = False
    if trusted:
        overrides["trust"] = ir.Trust.TRUSTED
    if mermaid:
        overrides["mermaid"] = True

    svg_renderer = None
    if svg != SvgMode.OMIT:
        svg_renderer = GraphvizRenderer(strict=svg == SvgMode.FORCE)

    try:
        machine = compile_machine(
            text,
            language,
            path,
            name=name,
            config=overrides,
            svg_renderer=svg_renderer,
        )
    except FsmEntryError as e:
        report_error(e)

    rendered = machine.render()
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered)
        typer.echo(f"Wrote {len(machine.source)} item(s) to {output}", err=True)
    else:
        typer.echo(rendered, nl=False)


_KIND_STYLES = {
    TopologyKind.ISOLATE: "dim",
    TopologyKind.SOURCE: "green",
    TopologyKind.SINK: "red",
    TopologyKind.NON_TERMINAL: "cyan",
}


@app.command()
def check(
    file: str = typer.Argument("-", help="Input file, or `-` for stdin"),
    language: InputLanguage = typer.Option(
        InputLanguage.DSL, "--language", "--lang", "-l", help="Input language"
    ),
) -> None:
    """
    Validate a state machine and list its states.
    """
    text, path = read_source(file)
    try:
        machine = load_machine(text, language, path)
    except FsmEntryError as e:
        report_error(e)

    table = Table(title=machine.document.name)
    table.add_column("State")
    table.add_column("Data", style="dim")
    table.add_column("Kind")
    table.add_column("Transitions")

    for node_id, node, topology in classify_all(machine.graph):
        style = _KIND_STYLES[topology.kind]
        table.add_row(
            node_id,
            node.ty or "",
            f"[{style}]{topology.kind.value}[/{style}]",
            ", ".join(f"{n.edge.method_name} → {n.node_id}" for n in topology.outgoing),
        )

    console.print(table)
    console.print(
        f"\n[green]✓[/green] {len(machine.graph.nodes)} state(s), "
        f"{len(machine.graph.edges)} transition(s)"
    )


@app.command()
def diagram(
    file: str = typer.Argument("-", help="Input file, or `-` for stdin"),
    language: InputLanguage = typer.Option(
        InputLanguage.DSL, "--language", "--lang", "-l", help="Input language"
    ),
    format: DiagramFormat = typer.Option(
        DiagramFormat.DOT, "--format", "-f", help="Output format: dot or mermaid"
    ),
) -> None:
    """
    Print the state machine graph as DOT or mermaid text.
    """
    text, path = read_source(file)
    try:
        machine = load_machine(text, language, path)
    except FsmEntryError as e:
        report_error(e)

    if format == DiagramFormat.MERMAID:
        typer.echo(mermaid_text(machine.graph), nl=False)
    else:
        typer.echo(dot_text(machine.graph, machine.document.name), nl=False)


def main() -> None:
    """Entry point for the ``fsmentry`` console script."""
    app()


__all__ = ["__version__", "app", "main"]
