"""Harness detection.

Two independent strategies over the same tree:

- attribute-based: a function carrying ``#[kani::proof]``,
  ``#[kani::proof_for_contract(..)]`` or either through ``cfg_attr(kani, ..)``
- invocation-based: a function whose body calls a harness-framework entry
  point (``bolero::check!``). Matching is on the callee path text only;
  imports are not resolved.

The aggregator in ``metadata.py`` merges both; attribute-based detection
wins when a function matches both.
"""

from __future__ import annotations

from dataclasses import dataclass

from proofscan.analysis.attributes import classify_attributes, declares_harness
from proofscan.analysis.models import AttributeDescriptor
from proofscan.parsing.engine import SyntaxNode
from proofscan.parsing.walk import (
    CALL_EXPRESSION,
    FUNCTION_ITEM,
    MACRO_INVOCATION,
    callee_name_of,
    iter_items,
    name_of,
)

# Entry points spelled as macros (``bolero::check!()`` or ``check!()`` after a use)
HARNESS_MACROS = frozenset({"bolero::check", "check"})
# Entry points spelled as plain calls; bare ``check(..)`` is too common to count
HARNESS_FUNCTIONS = frozenset({"bolero::check"})

_NOT_SCANNED = frozenset({FUNCTION_ITEM, "closure_expression"})


@dataclass(frozen=True, slots=True)
class HarnessCandidate:
    """A function recognized by one of the detection strategies."""

    node: SyntaxNode
    name: str
    module_path: tuple[str, ...]
    attributes: tuple[AttributeDescriptor, ...]
    declared_by_attribute: bool
    entry_point: str | None = None
    invocation_count: int = 0


def _is_harness_call(node: SyntaxNode) -> str | None:
    if node.kind == MACRO_INVOCATION:
        callee = callee_name_of(node)
        return callee if callee in HARNESS_MACROS else None
    if node.kind == CALL_EXPRESSION:
        callee = callee_name_of(node)
        return callee if callee in HARNESS_FUNCTIONS else None
    return None


def harness_invocations_in(function_item: SyntaxNode | None) -> list[str]:
    """Entry-point callees invoked by a function body, in source order.

    Nested functions and closures are not entered.
    """
    if function_item is None:
        return []
    body = function_item.field("body")
    if body is None:
        return []
    found: list[str] = []
    for statement in body.named_children:
        if statement.kind in _NOT_SCANNED:
            continue
        for node in (statement, *statement.descendants(prune=_NOT_SCANNED)):
            callee = _is_harness_call(node)
            if callee is not None:
                found.append(callee)
    return found


def find_attribute_harnesses(root: SyntaxNode | None) -> list[HarnessCandidate]:
    """Functions declared as harnesses through a proof attribute."""
    candidates: list[HarnessCandidate] = []
    for item, module_path in iter_items(root, FUNCTION_ITEM):
        name = name_of(item)
        if name is None:
            continue
        attributes = classify_attributes(item)
        if not declares_harness(attributes):
            continue
        candidates.append(
            HarnessCandidate(
                node=item,
                name=name,
                module_path=module_path,
                attributes=attributes,
                declared_by_attribute=True,
            )
        )
    return candidates


def find_invocation_harnesses(root: SyntaxNode | None) -> list[HarnessCandidate]:
    """Functions whose body invokes a harness-framework entry point."""
    candidates: list[HarnessCandidate] = []
    for item, module_path in iter_items(root, FUNCTION_ITEM):
        name = name_of(item)
        if name is None:
            continue
        invocations = harness_invocations_in(item)
        if not invocations:
            continue
        candidates.append(
            HarnessCandidate(
                node=item,
                name=name,
                module_path=module_path,
                attributes=classify_attributes(item),
                declared_by_attribute=False,
                entry_point=invocations[0],
                invocation_count=len(invocations),
            )
        )
    return candidates
