"""Tests for the Rust grammar adapter (parsing/engine.py).

Tests cover:
- Lazy, shared grammar initialization (sync and awaited)
- ParserUnavailableError on load failure, and retry after it
- SyntaxNode view: kind, spans, text, comment filtering
- Error counting on malformed input
"""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any

import pytest

from proofscan.core.errors import ErrorCode, ParserUnavailableError
from proofscan.parsing import engine
from proofscan.parsing.engine import RustGrammar, SyntaxNode, ensure_grammar, parse_source


@pytest.fixture
def fresh_grammar() -> Generator[None, None, None]:
    """Start and finish with no shared grammar loaded."""
    RustGrammar.reset()
    yield
    RustGrammar.reset()


class TestRustGrammar:
    """Shared grammar lifecycle."""

    def test_get_returns_same_instance(self, fresh_grammar: None) -> None:
        """Repeated calls reuse the loaded language."""
        first = RustGrammar.get()
        second = RustGrammar.get()

        assert first is second
        assert RustGrammar.is_loaded()

    def test_reset_drops_instance(self, fresh_grammar: None) -> None:
        RustGrammar.get()
        RustGrammar.reset()

        assert not RustGrammar.is_loaded()

    def test_missing_grammar_raises_parser_unavailable(
        self, fresh_grammar: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A failed import surfaces as a retryable ParserUnavailableError."""
        monkeypatch.setattr(engine, "GRAMMAR_MODULE", "tree_sitter_no_such_grammar")

        with pytest.raises(ParserUnavailableError) as exc_info:
            RustGrammar.get()

        assert exc_info.value.code is ErrorCode.PARSER_UNAVAILABLE
        assert exc_info.value.retryable is True
        assert "tree_sitter_no_such_grammar" in exc_info.value.message
        assert not RustGrammar.is_loaded()

    def test_failed_load_is_retried(
        self, fresh_grammar: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Failure is not memoized; the next call loads normally."""
        monkeypatch.setattr(engine, "GRAMMAR_MODULE", "tree_sitter_no_such_grammar")
        with pytest.raises(ParserUnavailableError):
            parse_source("fn main() {}")

        monkeypatch.setattr(engine, "GRAMMAR_MODULE", "tree_sitter_rust")
        result = parse_source("fn main() {}")

        assert result.root.kind == "source_file"

    def test_load_happens_once_across_threads(
        self, fresh_grammar: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[int] = []
        real_load = engine._load_language

        def counting_load() -> Any:
            calls.append(1)
            return real_load()

        monkeypatch.setattr(engine, "_load_language", counting_load)

        async def load_concurrently() -> list[Any]:
            return await asyncio.gather(*(ensure_grammar() for _ in range(8)))

        languages = asyncio.run(load_concurrently())

        assert len(calls) == 1
        assert all(language is languages[0] for language in languages)

    @pytest.mark.asyncio
    async def test_ensure_grammar_awaitable(self, fresh_grammar: None) -> None:
        language = await ensure_grammar()

        assert language is RustGrammar.get()


class TestParseSource:
    """parse_source() and the SyntaxNode view."""

    def test_parse_valid_source(self) -> None:
        result = parse_source("fn main() {\n    let x = 1;\n}\n")

        assert result.root.kind == "source_file"
        assert result.error_count == 0
        assert not result.has_errors
        assert result.total_nodes > 1

    def test_parse_with_syntax_errors(self) -> None:
        """Broken input still produces a tree, with errors counted."""
        result = parse_source("fn broken( {\n")

        assert result.root.kind == "source_file"
        assert result.has_errors

    def test_parse_empty_source(self) -> None:
        result = parse_source("")

        assert result.root.kind == "source_file"
        assert result.root.named_children == []

    def test_node_spans_are_one_based(self) -> None:
        result = parse_source("\n\nfn late() {\n}\n")
        function = result.root.named_children[0]

        assert function.kind == "function_item"
        assert function.start_line == 3
        assert function.end_line == 4
        assert function.text.startswith("fn late()")
        assert function.start_byte == 2

    def test_named_children_skip_comments(self) -> None:
        """Comments are hidden from named_children but reachable via previous."""
        result = parse_source("// leading\n/// doc\nfn f() {}\n")
        children = result.root.named_children

        assert [child.kind for child in children] == ["function_item"]
        previous = children[0].previous
        assert previous is not None
        assert previous.is_comment

    def test_field_lookup(self) -> None:
        result = parse_source("fn named() {}")
        function = result.root.named_children[0]

        name = function.field("name")
        assert name is not None
        assert name.text == "named"
        assert function.field("no_such_field") is None

    def test_descendants_prune(self) -> None:
        result = parse_source("fn outer() { fn inner() { let y = 2; } let x = 1; }")
        function = result.root.named_children[0]

        pruned = [node.kind for node in function.descendants(prune=frozenset({"function_item"}))]
        full = [node.kind for node in function.descendants()]

        assert pruned.count("let_declaration") == 1
        assert full.count("let_declaration") == 2

    def test_nodes_compare_by_span(self) -> None:
        result = parse_source("fn a() {}\nfn b() {}\n")
        first, second = result.root.named_children

        assert first == SyntaxNode(result.tree.root_node.named_children[0])
        assert first != second
        assert len({first, second, result.root.named_children[0]}) == 2

    def test_node_view_is_minimal(self) -> None:
        """Only the capabilities the walkers use are exposed."""
        node = parse_source("fn f() {}").root

        assert not hasattr(node, "parent")
        assert not hasattr(node, "has_error")
        assert node.is_error is False

    def test_non_ascii_text(self) -> None:
        result = parse_source('fn greet() { let s = "héllo"; }\n')

        assert "héllo" in result.root.text
