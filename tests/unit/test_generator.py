"""Tests for the Rust code generator."""

import pytest

from fsmentry.codegen.diagram import CallableRenderer, NullRenderer
from fsmentry.codegen.generator import PANIC_MESSAGE, accessor_names, generate
from fsmentry.core import ir
from fsmentry.core.dsl_parser_impl import parse_dsl
from fsmentry.core.errors import ValidationError
from fsmentry.core.graph_builder import build_machine_graph
from fsmentry.core.topology import classify

ROAD_RS = """\
enum Road {
    End,
    Fork,
    Start,
}
/// Progress through variants of [`Road`], created by its [`entry`](Road::entry) method.
enum RoadEntry<'state> {
    /// Represents [`Road::End`]
    ///
    /// This state is reachable from the following:
    /// - [`Fork`](Road::Fork) via [`end`](Fork::end)
    End,
    /// Represents [`Road::Fork`]
    ///
    /// This state is reachable from the following:
    /// - [`Start`](Road::Start) via [`fork`](Start::fork)
    ///
    /// This state can transition to the following:
    /// - [`End`](Road::End) via [`end`](Fork::end)
    /// - [`Start`](Road::Start) via [`start`](Fork::start)
    Fork(Fork<'state>),
    /// Represents [`Road::Start`]
    ///
    /// This state is reachable from the following:
    /// - [`Fork`](Road::Fork) via [`start`](Fork::start)
    ///
    /// This state can transition to the following:
    /// - [`Fork`](Road::Fork) via [`fork`](Start::fork)
    Start(Start<'state>),
}
impl<'state> ::core::convert::From<&'state mut Road> for RoadEntry<'state> {
    fn from(value: &'state mut Road) -> Self {
        match value {
            Road::End => RoadEntry::End,
            Road::Fork => RoadEntry::Fork(Fork(value)),
            Road::Start => RoadEntry::Start(Start(value)),
        }
    }
}
impl Road {
    #[allow(clippy::needless_lifetimes)]
    fn entry<'state>(&'state mut self) -> RoadEntry<'state> {
        self.into()
    }
}
/// See [`RoadEntry::Fork`]
struct Fork<'state>(
    /// MUST match [`RoadEntry::Fork`]
    &'state mut Road,
);
/// See [`RoadEntry::Start`]
struct Start<'state>(
    /// MUST match [`RoadEntry::Start`]
    &'state mut Road,
);
#[allow(clippy::needless_lifetimes)]
impl<'state> Fork<'state> {
    /// Transition to [`Road::End`]
    pub fn end(self) {
        match ::core::mem::replace(self.0, Road::End) {
            Road::Fork => {}
            _ => ::core::panic!("entry struct was instantiated with a mismatched state"),
        }
    }
}
#[allow(clippy::needless_lifetimes)]
impl<'state> Fork<'state> {
    /// Transition to [`Road::Start`]
    pub fn start(self) {
        match ::core::mem::replace(self.0, Road::Start) {
            Road::Fork => {}
            _ => ::core::panic!("entry struct was instantiated with a mismatched state"),
        }
    }
}
#[allow(clippy::needless_lifetimes)]
impl<'state> Start<'state> {
    /// Transition to [`Road::Fork`]
    pub fn fork(self) {
        match ::core::mem::replace(self.0, Road::Fork) {
            Road::Start => {}
            _ => ::core::panic!("entry struct was instantiated with a mismatched state"),
        }
    }
}
"""


def render(text: str) -> str:
    return generate(parse_dsl(text)).render()


class TestRoad:
    def test_exact_output(self, road_document: ir.MachineDocument) -> None:
        assert generate(road_document).render() == ROAD_RS

    def test_explicit_graph_matches_built_graph(
        self, road_document: ir.MachineDocument, road_graph: ir.Graph
    ) -> None:
        assert generate(road_document, road_graph).render() == ROAD_RS

    def test_item_count(self, road_document: ir.MachineDocument) -> None:
        # 4 fixed items, 2 connectors, 3 transitions
        assert len(generate(road_document)) == 9

    def test_deterministic_regardless_of_statement_order(self) -> None:
        forward = render("Road { Start -> Fork -> End; Fork -> Start; }")
        backward = render("Road { Fork -> Start; Start -> Fork; Fork -> End; }")
        assert forward == backward == ROAD_RS


class TestFullMachine:
    """Every node shape, generics, a where clause and generator options."""

    @pytest.fixture
    def output(self, full_document: ir.MachineDocument) -> str:
        return generate(full_document).render()

    def test_state_enum(self, output: str) -> None:
        assert output.startswith(
            "/// This is a state machine that explores all vertex types\n"
            "#[derive(Debug)]\n"
            "pub enum State<'a, T>\n"
            "where\n"
            "    T: Ord,\n"
            "{\n"
            "    /// A non-terminal vertex with data\n"
            "    BeautifulBridge(Vec<u8>),\n"
        )

    def test_entry_enum_uses_configured_name_and_visibility(self, output: str) -> None:
        assert "pub(crate) enum MyEntry<'state, 'a, T>\nwhere\n    T: Ord,\n{\n" in output
        assert "    PopulatedIsland(&'state mut String),\n" in output
        assert "    DesertIsland,\n" in output
        assert "    BeautifulBridge(BeautifulBridge<'state, 'a, T>),\n" in output

    def test_from_arms(self, output: str) -> None:
        assert "State::BeautifulBridge(_) => MyEntry::BeautifulBridge(BeautifulBridge(value))," in output
        assert "State::Plank => MyEntry::Plank(Plank(value))," in output
        assert "State::PopulatedIsland(it) => MyEntry::PopulatedIsland(it)," in output
        assert "State::UnmarkedGrave => MyEntry::UnmarkedGrave," in output

    def test_entry_method(self, output: str) -> None:
        assert (
            "impl<'a, T> State<'a, T>\nwhere\n    T: Ord,\n{\n"
            "    #[allow(clippy::needless_lifetimes)]\n"
            "    pub(crate) fn entry<'state>(&'state mut self) -> MyEntry<'state, 'a, T> {\n"
        ) in output

    def test_connector_struct_where_clause(self, output: str) -> None:
        assert (
            "/// See [`MyEntry::Fountain`]\n"
            "pub(crate) struct Fountain<'state, 'a, T>(\n"
            "    /// MUST match [`MyEntry::Fountain`]\n"
            "    &'state mut State<'a, T>,\n"
            ")\n"
            "where\n"
            "    T: Ord;\n"
        ) in output

    def test_only_sources_and_non_terminals_get_connectors(self, output: str) -> None:
        for name in ("BeautifulBridge", "Fountain", "Plank", "Stream"):
            assert f"struct {name}<" in output
        for name in ("DesertIsland", "PopulatedIsland", "Tombstone", "UnmarkedGrave"):
            assert f"struct {name}<" not in output

    def test_trusted_mode_has_no_panics(self, output: str) -> None:
        assert PANIC_MESSAGE not in output
        assert "_ => unsafe { ::core::hint::unreachable_unchecked() }," in output

    def test_transition_with_both_payloads(self, output: str) -> None:
        assert (
            "    /// I've overridden transition method name\n"
            "    ///\n"
            "    /// Transition to [`State::BeautifulBridge`]\n"
            "    pub fn fountain2bridge(self, next: Vec<u8>) -> &'a mut T {\n"
            "        match ::core::mem::replace(self.0, State::BeautifulBridge(next)) {\n"
            "            State::Fountain(it) => it,\n"
        ) in output

    def test_transition_shapes(self, output: str) -> None:
        assert "pub fn plank(self) -> &'a mut T {" in output
        assert "pub fn beautiful_bridge(self, next: Vec<u8>) {" in output
        assert "pub fn unmarked_grave(self) {" in output
        assert "            State::Plank => {}\n" in output

    def test_accessors(self, output: str) -> None:
        assert "    pub fn get(&self) -> &Vec<u8> {\n" in output
        assert "    pub fn get_mut(&mut self) -> &mut Vec<u8> {\n" in output
        assert (
            "impl<'state, 'a, T> ::core::convert::AsRef<&'a mut T> for Fountain<'state, 'a, T>"
        ) in output
        assert "    fn as_mut(&mut self) -> &mut &'a mut T {\n" in output

    def test_reachability_docs(self, output: str) -> None:
        assert (
            "    /// - [`Fountain`](State::Fountain) via [`fountain2bridge`](Fountain::fountain2bridge)\n"
            "    /// - [`Stream`](State::Stream) via [`beautiful_bridge`](Stream::beautiful_bridge)\n"
        ) in output


class TestOptions:
    def test_checked_mode_panics(self) -> None:
        output = render("Road { A: u8 -> B; }")
        assert f'_ => ::core::panic!("{PANIC_MESSAGE}"),' in output

    def test_path_to_core(self) -> None:
        output = render("#[fsmentry(path_to_core = ::my_core)]\nRoad { A -> B; }")
        assert "::my_core::mem::replace(self.0, Road::B)" in output
        assert "::my_core::convert::From<&'state mut Road>" in output
        assert "::core::" not in output

    def test_entry_name_without_visibility(self) -> None:
        output = render("#[fsmentry(entry = Handle)]\npub Road { A -> B; }")
        assert "\nenum Handle<'state> {\n" in output
        assert "\nstruct A<'state>(\n" in output
        assert "    fn entry<'state>(&'state mut self) -> Handle<'state> {\n" in output
        assert output.startswith("pub enum Road {")

    def test_generic_defaults_dropped_from_impls(self) -> None:
        output = render("pub M<T: Clone = u8> { A: T -> B; }")
        assert output.startswith("pub enum M<T: Clone = u8> {")
        assert "pub enum MEntry<'state, T: Clone> {" in output
        assert "impl<T: Clone> M<T> {" in output
        assert "    &'state mut M<T>,\n" in output

    def test_keyword_method_names_are_escaped(self) -> None:
        output = render("Road { A -> Type; }")
        assert "pub fn r#type(self) {" in output

    def test_payloads_on_sink_only(self) -> None:
        output = render("Road { A -> B: String; }")
        assert "pub fn b(self, next: String) {" in output
        assert "    B(&'state mut String),\n" in output


class TestAccessorNames:
    def names(self, text: str, node: str) -> tuple[str, str]:
        graph = build_machine_graph(parse_dsl(text))
        return accessor_names(node, classify(graph, node))

    def test_default(self) -> None:
        assert self.names("A: u8 -> B;", "A") == ("get", "get_mut")

    def test_transition_named_get(self) -> None:
        assert self.names("A: u8 -get-> B;", "A") == ("get_a", "get_a_mut")

    def test_padding(self) -> None:
        assert self.names("A: u8 -get-> B;\nA -get_a_mut-> C;", "A") == ("get_a_", "get_a__mut")

    def test_generated_accessor_names(self) -> None:
        output = render("Road { MyNode: u8 -get_mut-> B; }")
        assert "pub fn get_my_node(&self) -> &u8 {" in output
        assert "pub fn get_my_node_mut(&mut self) -> &mut u8 {" in output


class TestMermaid:
    def test_default_renderer(self) -> None:
        output = render("#[fsmentry(mermaid = true)]\nRoad { A -> B; }")
        assert '#[doc = "<pre class=\\"mermaid\\">\ngraph LR\n  A --> B;\n' in output

    def test_custom_renderer(self) -> None:
        document = parse_dsl("#[fsmentry(mermaid = true)]\nRoad { A -> B; }")
        output = generate(document, renderer=CallableRenderer(lambda text: " DIAGRAM")).render()
        assert "method.\n///\n/// DIAGRAM\nenum RoadEntry" in output

    def test_renderer_may_skip(self) -> None:
        document = parse_dsl("#[fsmentry(mermaid = true)]\nRoad { A -> B; }")
        output = generate(document, renderer=NullRenderer()).render()
        assert "method.\nenum RoadEntry" in output

    def test_disabled_by_default(self) -> None:
        assert "mermaid" not in render("Road { A -> B; }")


def test_generate_validates_when_graph_omitted() -> None:
    with pytest.raises(ValidationError):
        generate(parse_dsl("Road { A -> B; A -> B; }"))
