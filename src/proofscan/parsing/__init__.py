"""Rust grammar adapter and tolerant tree-walking primitives."""

from proofscan.parsing.engine import (
    ParseResult,
    RustGrammar,
    SyntaxNode,
    ensure_grammar,
    parse_source,
)

__all__ = [
    "ParseResult",
    "RustGrammar",
    "SyntaxNode",
    "ensure_grammar",
    "parse_source",
]
