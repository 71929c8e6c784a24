"""Tests for the end-to-end pipeline."""

from pathlib import Path

import pytest

from fsmentry.codegen.diagram import CallableRenderer, NullRenderer
from fsmentry.core import ir
from fsmentry.core.errors import ParseError, RenderError, ValidationError
from fsmentry.core.pipeline import (
    InputLanguage,
    apply_overrides,
    compile_machine,
    load_machine,
    parse_machine,
)


class TestParseMachine:
    def test_dsl(self, road_dsl: str) -> None:
        assert parse_machine(road_dsl).name == "Road"

    def test_dot(self) -> None:
        document = parse_machine("digraph Road { A -> B; }", InputLanguage.DOT)
        assert document.name == "Road"

    @pytest.mark.parametrize(
        ("text", "language"),
        [("Road { A -> fn; }", InputLanguage.DSL), ("digraph Road { A -> match; }", InputLanguage.DOT)],
    )
    def test_keyword_node_fails_before_generation(self, text: str, language: InputLanguage) -> None:
        with pytest.raises(ParseError, match="is a keyword"):
            compile_machine(text, language)

    def test_parse_error_names_file(self) -> None:
        with pytest.raises(ParseError, match="road.fsm:1:"):
            parse_machine("A -> ;", file=Path("road.fsm"))


class TestOverrides:
    def test_no_overrides_returns_same_document(self, road_document: ir.MachineDocument) -> None:
        assert apply_overrides(road_document) is road_document

    def test_name_and_visibility(self, road_document: ir.MachineDocument) -> None:
        updated = apply_overrides(road_document, name="Path", vis="pub(crate)")
        assert (updated.name, updated.vis) == ("Path", "pub(crate)")
        assert road_document.name == "Road"

    def test_config_fields(self, full_document: ir.MachineDocument) -> None:
        updated = apply_overrides(full_document, config={"rename_methods": False})
        assert updated.config.rename_methods is False
        # Options from the source are kept
        assert updated.config.entry_name == "MyEntry"


class TestLoadMachine:
    def test_graph_is_validated(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate edge"):
            load_machine("A -> B; A -> B;")

    def test_rename_override_reaches_graph(self) -> None:
        loaded = load_machine("A -> BeautifulBridge;", config={"rename_methods": False})
        assert loaded.graph.edges[("A", "BeautifulBridge")].method_name == "BeautifulBridge"

    def test_name_override_reserves_generated_names(self) -> None:
        with pytest.raises(ValidationError, match="collides with generated type `A`"):
            load_machine("A -> B;", name="A")


class TestCompileMachine:
    def test_road(self, road_dsl: str) -> None:
        machine = compile_machine(road_dsl)
        assert machine.render().startswith("enum Road {\n")
        assert machine.document.name == "Road"
        assert len(machine.graph.edges) == 3

    def test_dot_input(self) -> None:
        machine = compile_machine("digraph Road { Start -> End; }", InputLanguage.DOT)
        assert machine.render().startswith("pub enum Road {\n")

    def test_trusted_override(self, road_dsl: str) -> None:
        machine = compile_machine(road_dsl, config={"trust": ir.Trust.TRUSTED})
        assert "unreachable_unchecked" in machine.render()

    def test_svg_attached_to_state_enum(self, road_dsl: str) -> None:
        machine = compile_machine(road_dsl, svg_renderer=CallableRenderer(lambda text: "<svg/>"))
        assert machine.render().startswith("///<div><svg/></div>\nenum Road {\n")

    def test_svg_after_existing_docs(self) -> None:
        machine = compile_machine(
            "/// Roads\nRoad { A -> B; }", svg_renderer=CallableRenderer(lambda text: "<svg/>")
        )
        assert machine.render().startswith("/// Roads\n///\n///<div><svg/></div>\nenum Road {\n")

    def test_skipped_svg(self, road_dsl: str) -> None:
        plain = compile_machine(road_dsl).render()
        assert compile_machine(road_dsl, svg_renderer=NullRenderer()).render() == plain

    def test_strict_svg_failure(self, road_dsl: str) -> None:
        def fail(text: str) -> str:
            raise RenderError("dot exploded")

        with pytest.raises(RenderError):
            compile_machine(road_dsl, svg_renderer=CallableRenderer(fail))

    def test_mermaid_renderer(self) -> None:
        machine = compile_machine(
            "Road { A -> B; }",
            config={"mermaid": True},
            mermaid_renderer=CallableRenderer(lambda text: " chart"),
        )
        assert "/// chart\nenum RoadEntry" in machine.render()
