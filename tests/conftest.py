"""Shared pytest fixtures for fsmentry tests."""

from pathlib import Path

import pytest

from fsmentry.core import ir
from fsmentry.core.dsl_parser_impl import parse_dsl
from fsmentry.core.graph_builder import build_machine_graph

ROAD_DSL = """\
Road {
    Start -> Fork -> End;
    Fork -> Start;
}
"""

FULL_DSL = """\
/// This is a state machine that explores all vertex types
#[derive(Debug)]
#[fsmentry(
    entry = pub(crate) MyEntry,
    unsafe(true),
)]
pub enum State<'a, T>
where
    T: Ord
{
    /// An isolated vertex with data.
    PopulatedIsland: String;
    /// An isolated vertex without data.
    DesertIsland;

    /// A source vertex with data.
    Fountain: &'a mut T;
    /// A non-terminal vertex with data
    BeautifulBridge: Vec<u8>;
    /// A sink vertex with data
    Tombstone: char;

    /// I've overridden transition method name
    Fountain -fountain2bridge-> BeautifulBridge -bridge2tombstone-> Tombstone;

    Fountain -> Plank -> UnmarkedGrave;

    Stream -> BeautifulBridge & Plank;
}
"""


@pytest.fixture
def road_dsl() -> str:
    """Return the DSL for a three-state road with a loop."""
    return ROAD_DSL


@pytest.fixture
def full_dsl() -> str:
    """Return a DSL machine exercising every node shape and option."""
    return FULL_DSL


@pytest.fixture
def road_document(road_dsl: str) -> ir.MachineDocument:
    return parse_dsl(road_dsl)


@pytest.fixture
def road_graph(road_document: ir.MachineDocument) -> ir.Graph:
    return build_machine_graph(road_document)


@pytest.fixture
def full_document(full_dsl: str) -> ir.MachineDocument:
    return parse_dsl(full_dsl)


@pytest.fixture
def full_graph(full_document: ir.MachineDocument) -> ir.Graph:
    return build_machine_graph(full_document)


@pytest.fixture
def road_file(tmp_path: Path, road_dsl: str) -> Path:
    """Write the road machine to a temporary file."""
    path = tmp_path / "road.fsm"
    path.write_text(road_dsl)
    return path
