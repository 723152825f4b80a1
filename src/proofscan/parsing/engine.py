"""Tree-sitter grammar adapter for Rust sources.

The Rust grammar is loaded once per process and shared by every caller:

    from proofscan.parsing.engine import parse_source

    result = parse_source(text)
    for child in result.root.named_children:
        ...

Loading is single-flight. Concurrent threads (or coroutines awaiting
``ensure_grammar``) block on the same lock and only the first performs
the import. A failed load raises ``ParserUnavailableError`` and is not
memoized, so the next call retries.

Each ``parse_source`` call builds its own ``tree_sitter.Parser`` and tree;
only the immutable ``Language`` object is shared.
"""

from __future__ import annotations

import asyncio
import importlib
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import structlog
import tree_sitter

from proofscan.core.errors import ParserUnavailableError

log = structlog.get_logger(__name__)

GRAMMAR_MODULE = "tree_sitter_rust"

# Comments are extras in the Rust grammar; they are hidden from named_children
# but remain reachable through ``SyntaxNode.previous`` for doc extraction.
COMMENT_KINDS = frozenset({"line_comment", "block_comment"})


def _load_language() -> tree_sitter.Language:
    """Import the grammar package and wrap it in a ``Language``."""
    try:
        module = importlib.import_module(GRAMMAR_MODULE)
        language = tree_sitter.Language(module.language())
    except (ImportError, AttributeError, TypeError, ValueError) as e:
        log.error("grammar_load_failed", module=GRAMMAR_MODULE, error=str(e))
        raise ParserUnavailableError.load_failed(f"{GRAMMAR_MODULE}: {e}") from e
    log.debug("grammar_loaded", module=GRAMMAR_MODULE)
    return language


class RustGrammar:
    """Process-wide, lazily loaded Rust ``Language``."""

    _language: tree_sitter.Language | None = None
    _lock = threading.Lock()

    @classmethod
    def get(cls) -> tree_sitter.Language:
        """Return the shared language, loading it on first use."""
        language = cls._language
        if language is not None:
            return language
        with cls._lock:
            if cls._language is None:
                cls._language = _load_language()
            return cls._language

    @classmethod
    def is_loaded(cls) -> bool:
        return cls._language is not None

    @classmethod
    def reset(cls) -> None:
        """Drop the shared language (process teardown and tests)."""
        with cls._lock:
            cls._language = None


async def ensure_grammar() -> tree_sitter.Language:
    """Awaitable initialization for async hosts."""
    if RustGrammar.is_loaded():
        return RustGrammar.get()
    return await asyncio.to_thread(RustGrammar.get)


class SyntaxNode:
    """Read-only view over a tree-sitter node.

    Exposes rule kind, 1-based line span, byte span, source text and the
    ordered named children with comments filtered out.
    """

    __slots__ = ("_node",)

    def __init__(self, node: Any) -> None:
        self._node = node

    @property
    def kind(self) -> str:
        return str(self._node.type)

    @property
    def start_line(self) -> int:
        return int(self._node.start_point[0]) + 1

    @property
    def end_line(self) -> int:
        return int(self._node.end_point[0]) + 1

    @property
    def start_byte(self) -> int:
        return int(self._node.start_byte)

    @property
    def end_byte(self) -> int:
        return int(self._node.end_byte)

    @property
    def text(self) -> str:
        raw = self._node.text
        return raw.decode("utf-8", errors="replace") if raw else ""

    @property
    def is_error(self) -> bool:
        return self._node.type == "ERROR" or bool(self._node.is_missing)

    @property
    def is_comment(self) -> bool:
        return self._node.type in COMMENT_KINDS

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [
            SyntaxNode(child)
            for child in self._node.named_children
            if child.type not in COMMENT_KINDS
        ]

    @property
    def previous(self) -> SyntaxNode | None:
        """Preceding named sibling, comments included."""
        prev = self._node.prev_named_sibling
        return SyntaxNode(prev) if prev is not None else None

    def field(self, name: str) -> SyntaxNode | None:
        child = self._node.child_by_field_name(name)
        return SyntaxNode(child) if child is not None else None

    def descendants(self, *, prune: frozenset[str] = frozenset()) -> Iterator[SyntaxNode]:
        """Pre-order walk of named descendants (self excluded).

        Nodes whose kind is in ``prune`` are yielded but not entered.
        """
        stack = list(reversed(self.named_children))
        while stack:
            node = stack.pop()
            yield node
            if node.kind not in prune:
                stack.extend(reversed(node.named_children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return (self.kind, self.start_byte, self.end_byte) == (
            other.kind,
            other.start_byte,
            other.end_byte,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.start_byte, self.end_byte))

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind}, lines {self.start_line}-{self.end_line})"


@dataclass
class ParseResult:
    """Result of parsing one source text."""

    source: str
    tree: Any = field(repr=False)  # tree_sitter.Tree (keeps the nodes alive)
    root: SyntaxNode
    error_count: int
    total_nodes: int

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


def parse_source(source: str) -> ParseResult:
    """Parse Rust source text into a syntax tree.

    Raises:
        ParserUnavailableError: The grammar could not be loaded.
        ValueError: tree-sitter returned no tree for the input.
    """
    parser = tree_sitter.Parser()
    parser.language = RustGrammar.get()
    tree = parser.parse(source.encode("utf-8"))
    if tree is None:
        raise ValueError("parser produced no tree")

    error_count = 0
    total_nodes = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        total_nodes += 1
        if node.type == "ERROR" or node.is_missing:
            error_count += 1
        stack.extend(node.children)

    return ParseResult(
        source=source,
        tree=tree,
        root=SyntaxNode(tree.root_node),
        error_count=error_count,
        total_nodes=total_nodes,
    )
