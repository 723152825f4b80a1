"""Harness analysis data model.

Records are created fresh for every analysed text and hold plain values
only (no syntax nodes), so callers may keep them after the tree is gone.
All line numbers are 1-based.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class HarnessKind(Enum):
    """How a harness is run."""

    PROOF = "proof"
    UNIT_TEST = "unit_test"


class AttributeKind(Enum):
    """Closed set of attributes the analyzer models.

    ``UNSUPPORTED`` covers every other attribute; its descriptor keeps the
    raw name so callers can warn about it.
    """

    PROOF = "kani::proof"
    PROOF_FOR_CONTRACT = "kani::proof_for_contract"
    SHOULD_PANIC = "kani::should_panic"
    UNWIND = "kani::unwind"
    STUB = "kani::stub"
    STUB_VERIFIED = "kani::stub_verified"
    SOLVER = "kani::solver"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_name(cls, name: str) -> AttributeKind:
        try:
            kind = cls(name)
        except ValueError:
            return cls.UNSUPPORTED
        return kind

    @property
    def declares_harness(self) -> bool:
        return self in (AttributeKind.PROOF, AttributeKind.PROOF_FOR_CONTRACT)


@dataclass(frozen=True, slots=True)
class AttributeDescriptor:
    """One attribute attached to a harness function."""

    name: str  # normalized path, e.g. "kani::unwind"
    arguments: tuple[str, ...]  # raw argument texts
    supported: bool
    kind: AttributeKind
    line: int

    @property
    def text(self) -> str:
        """Display form, e.g. ``kani::stub(rand::random, mock_random)``."""
        if not self.arguments:
            return self.name
        return f"{self.name}({', '.join(self.arguments)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "arguments": list(self.arguments),
            "supported": self.supported,
            "line": self.line,
        }


@dataclass(frozen=True, slots=True)
class HarnessMetadata:
    """Resolved metadata for one harness."""

    harness_name: str
    kind: HarnessKind
    start_line: int
    end_line: int
    attributes: tuple[AttributeDescriptor, ...]
    total_proofs: int
    module_path: tuple[str, ...] = ()
    doc: str | None = None
    entry_point: str | None = None  # matched callee for invocation-based harnesses

    @property
    def qualified_name(self) -> str:
        return "::".join((*self.module_path, self.harness_name))

    @property
    def is_proof(self) -> bool:
        return self.kind is HarnessKind.PROOF

    def _first(self, kind: AttributeKind) -> AttributeDescriptor | None:
        for attribute in self.attributes:
            if attribute.kind is kind:
                return attribute
        return None

    @property
    def unwind(self) -> str | None:
        """Raw unwind bound text; not evaluated."""
        attribute = self._first(AttributeKind.UNWIND)
        if attribute is None or not attribute.arguments:
            return None
        return attribute.arguments[0]

    @property
    def solver(self) -> str | None:
        attribute = self._first(AttributeKind.SOLVER)
        if attribute is None or not attribute.arguments:
            return None
        return ", ".join(attribute.arguments)

    @property
    def contract_target(self) -> str | None:
        attribute = self._first(AttributeKind.PROOF_FOR_CONTRACT)
        if attribute is None or not attribute.arguments:
            return None
        return attribute.arguments[0]

    @property
    def should_panic(self) -> bool:
        return self._first(AttributeKind.SHOULD_PANIC) is not None

    @property
    def stubs(self) -> list[tuple[str, ...]]:
        """Argument tuples of every ``stub``/``stub_verified`` attribute, in order."""
        return [
            attribute.arguments
            for attribute in self.attributes
            if attribute.kind in (AttributeKind.STUB, AttributeKind.STUB_VERIFIED)
        ]

    @property
    def unsupported_attributes(self) -> list[AttributeDescriptor]:
        return [attribute for attribute in self.attributes if not attribute.supported]

    def to_dict(self) -> dict[str, Any]:
        return {
            "harness_name": self.harness_name,
            "qualified_name": self.qualified_name,
            "kind": self.kind.value,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
            "total_proofs": self.total_proofs,
            "module_path": list(self.module_path),
            "doc": self.doc,
            "entry_point": self.entry_point,
        }


HarnessMetadataMap = dict[str, HarnessMetadata]


@dataclass(frozen=True, slots=True)
class GeneratedTestRecord:
    """A replay unit test generated from a counterexample."""

    test_function_name: str
    originating_harness_name: str
    insertion_line: int  # first line of the item, attributes included
    end_line: int
    playback_id: str | None = None  # numeric suffix of the generated name

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_function_name": self.test_function_name,
            "originating_harness_name": self.originating_harness_name,
            "insertion_line": self.insertion_line,
            "end_line": self.end_line,
            "playback_id": self.playback_id,
        }
