"""Tolerant tree-walking primitives over the Rust syntax tree.

Every helper is total: given ``None`` or a node of an unexpected shape it
returns an empty list or ``None`` instead of raising. Editors call the
analysis on every keystroke, so half-typed items are the normal case.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from proofscan.parsing.engine import SyntaxNode

FUNCTION_ITEM = "function_item"
MODULE_ITEM = "mod_item"
ATTRIBUTE_ITEM = "attribute_item"
CALL_EXPRESSION = "call_expression"
MACRO_INVOCATION = "macro_invocation"

_PATH_KINDS = frozenset(
    {"identifier", "scoped_identifier", "crate", "self", "super", "metavariable"}
)
_PAIRS = {"(": ")", "[": "]", "{": "}"}
_WHITESPACE = re.compile(r"\s+")
_CHAR_LITERAL = re.compile(r"'(?:\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F]+\}|.)|[^\\'\n])'")
_RAW_STRING_OPEN = re.compile(r'b?r(#*)"')


def is_rule_kind(node: SyntaxNode | None, kind: str) -> bool:
    """Exact match on the node's grammar rule."""
    return node is not None and node.kind == kind


def normalize_path(text: str) -> str:
    """``kani :: proof`` -> ``kani::proof``."""
    return _WHITESPACE.sub("", text)


def name_of(item: SyntaxNode | None) -> str | None:
    """Declared identifier of a function (or module) item."""
    if item is None:
        return None
    name = item.field("name")
    if name is None or name.is_error:
        return None
    return name.text or None


def attributes_of(item: SyntaxNode | None) -> list[SyntaxNode]:
    """Outer attributes attached to ``item``, in source order.

    Walks preceding siblings, stepping over comments, and stops at the
    first sibling that is neither an attribute nor a comment.
    """
    if item is None:
        return []
    attributes: list[SyntaxNode] = []
    sibling = item.previous
    while sibling is not None:
        if sibling.kind == ATTRIBUTE_ITEM:
            attributes.append(sibling)
        elif not sibling.is_comment:
            break
        sibling = sibling.previous
    attributes.reverse()
    return attributes


def _attribute_body(attribute_item: SyntaxNode | None) -> SyntaxNode | None:
    if attribute_item is None or attribute_item.kind != ATTRIBUTE_ITEM:
        return None
    for child in attribute_item.named_children:
        if child.kind == "attribute":
            return child
    return None


def attribute_path_of(attribute_item: SyntaxNode | None) -> str | None:
    """Normalized path of an attribute (``#[kani::unwind(3)]`` -> ``kani::unwind``)."""
    body = _attribute_body(attribute_item)
    if body is None:
        return None
    children = body.named_children
    if not children or children[0].kind not in _PATH_KINDS:
        return None
    return normalize_path(children[0].text) or None


def literal_arguments_of(attribute_item: SyntaxNode | None) -> list[str]:
    """Raw argument texts of an attribute.

    ``#[kani::stub(a::f, b::g)]`` -> ``["a::f", "b::g"]``,
    ``#[doc = "x"]`` -> ``['"x"']``, ``#[test]`` -> ``[]``.
    """
    body = _attribute_body(attribute_item)
    if body is None:
        return []
    arguments = body.field("arguments")
    if arguments is not None:
        return split_arguments(arguments.text)
    value = body.field("value")
    if value is not None:
        text = value.text.strip()
        return [text] if text else []
    return []


def _strip_delimiters(text: str) -> str:
    text = text.strip()
    if not text or text[0] not in _PAIRS:
        return text
    closer = _PAIRS[text[0]]
    # A missing closer (file being typed) leaves only the opener
    return text[1:-1] if text.endswith(closer) and len(text) >= 2 else text[1:]


def _skip_string(text: str, start: int) -> int:
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i + 1
        i += 1
    return len(text)


def _skip_raw_string(text: str, start: int) -> int | None:
    """End of a raw string literal (``r"..."``, ``r#"..."#``) opening at ``start``."""
    if start > 0 and (text[start - 1].isalnum() or text[start - 1] == "_"):
        return None
    match = _RAW_STRING_OPEN.match(text, start)
    if match is None:
        return None
    closer = '"' + match.group(1)
    end = text.find(closer, match.end())
    return len(text) if end == -1 else end + len(closer)


def split_arguments(token_text: str) -> list[str]:
    """Split a delimited token tree on top-level commas.

    Nested ``()[]{}`` and string/char literals (raw strings included) are
    respected. Each argument is trimmed at its outer boundary only; empty
    segments are dropped.
    """
    text = _strip_delimiters(token_text)
    parts: list[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in "br":
            end = _skip_raw_string(text, i)
            if end is not None:
                i = end
                continue
        if ch == '"':
            i = _skip_string(text, i)
            continue
        if ch == "'":
            match = _CHAR_LITERAL.match(text, i)
            if match is not None:
                i = match.end()
                continue
        elif ch in _PAIRS:
            depth += 1
        elif ch in ")]}":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def identifiers_in(item: SyntaxNode | None) -> list[str]:
    """Distinct identifiers referenced in a function body, first-seen order."""
    if item is None:
        return []
    body = item.field("body")
    if body is None:
        return []
    seen: dict[str, None] = {}
    for node in body.descendants():
        if node.kind == "identifier":
            seen.setdefault(node.text, None)
    return list(seen)


def callee_name_of(node: SyntaxNode | None) -> str | None:
    """Path of the callee of a call or macro invocation.

    Method calls and computed callees have no path and yield ``None``.
    """
    if node is None:
        return None
    if node.kind == MACRO_INVOCATION:
        target = node.field("macro")
    elif node.kind == CALL_EXPRESSION:
        target = node.field("function")
        if target is not None and target.kind == "generic_function":
            target = target.field("function")
    else:
        return None
    if target is None or target.kind not in _PATH_KINDS:
        return None
    return normalize_path(target.text) or None


def call_arguments_of(node: SyntaxNode | None) -> list[SyntaxNode]:
    """Argument expressions of a call expression."""
    if node is None or node.kind != CALL_EXPRESSION:
        return []
    arguments = node.field("arguments")
    return arguments.named_children if arguments is not None else []


def doc_comment_of(item: SyntaxNode | None) -> str | None:
    """Outer doc comment (``///`` or ``/** */``) written above ``item``.

    Attributes and plain comments between the doc lines and the item are
    skipped.
    """
    if item is None:
        return None
    lines: list[str] = []
    sibling = item.previous
    while sibling is not None and (sibling.is_comment or sibling.kind == ATTRIBUTE_ITEM):
        if sibling.is_comment:
            text = sibling.text.strip()
            if text.startswith("///") and not text.startswith("////"):
                lines.append(text[3:].strip())
            elif text.startswith("/**") and not text.startswith("/***"):
                body = text[3:-2] if text.endswith("*/") else text[3:]
                block = [line.strip().lstrip("*").strip() for line in body.splitlines()]
                lines.append("\n".join(line for line in block if line))
        sibling = sibling.previous
    if not lines:
        return None
    lines.reverse()
    doc = "\n".join(lines).strip()
    return doc or None


def iter_items(
    root: SyntaxNode | None, kind: str = FUNCTION_ITEM
) -> Iterator[tuple[SyntaxNode, tuple[str, ...]]]:
    """Yield ``(item, module_path)`` for every ``kind`` item.

    Depth-first, top-to-bottom over the root's named children, entering
    inline module bodies and ERROR nodes left by partial input.
    """
    if root is None:
        return

    def visit(container: SyntaxNode, module_path: tuple[str, ...]) -> Iterator[
        tuple[SyntaxNode, tuple[str, ...]]
    ]:
        for child in container.named_children:
            if child.kind == kind:
                yield child, module_path
            if child.kind == MODULE_ITEM:
                body = child.field("body")
                if body is not None:
                    yield from visit(body, (*module_path, name_of(child) or "_"))
            elif child.is_error:
                yield from visit(child, module_path)

    yield from visit(root, ())
