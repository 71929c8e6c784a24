"""
Generator configuration for fsmentry IR.

Parsed from the optional ``#[fsmentry(...)]`` attribute on a machine:

    #[fsmentry(
        rename_methods = false,
        entry = pub(crate) MyEntry,
        unsafe(true),
        path_to_core = ::core,
        mermaid = true,
    )]
    pub State { ... }
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Trust(str, Enum):
    """
    How generated transitions react to a mismatched container state.

    CHECKED panics with a diagnostic message. TRUSTED compiles the mismatch
    to ``unreachable_unchecked``: the caller guarantees, out of band, that a
    connector handle is only ever built for the state it represents.
    """

    CHECKED = "checked"
    TRUSTED = "trusted"


class GeneratorConfig(BaseModel):
    """
    Options controlling code generation.

    Attributes:
        rename_methods: Derive method names as snake_case of the destination
        entry_vis: Visibility of the entry enum (defaults to the machine's)
        entry_name: Name of the entry enum (defaults to ``<Name>Entry``)
        trust: Checked panics or unchecked fast path on invariant violations
        path_to_core: Path to the core library, for ``no_std`` targets
        mermaid: Attach a mermaid diagram to the entry enum documentation
    """

    rename_methods: bool = True
    entry_vis: str | None = None
    entry_name: str | None = None
    trust: Trust = Trust.CHECKED
    path_to_core: str = "::core"
    mermaid: bool = False

    model_config = ConfigDict(frozen=True)

    def resolve_entry_name(self, machine_name: str) -> str:
        return self.entry_name or f"{machine_name}Entry"

    def resolve_entry_vis(self, machine_vis: str) -> str:
        return machine_vis if self.entry_vis is None else self.entry_vis
