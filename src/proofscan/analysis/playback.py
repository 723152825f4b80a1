"""Locate unit tests generated by Kani's concrete playback.

A replay test looks like::

    #[test]
    fn kani_concrete_playback_insert_test_15619039213425592125() {
        let concrete_vals: Vec<Vec<u8>> = vec![vec![1, 0, 0, 0]];
        kani::concrete_playback_run(concrete_vals, insert_test);
    }

The originating harness is read from the runner call's second argument;
the generated name is the fallback when that argument is not a path.
"""

from __future__ import annotations

import re
from collections import defaultdict

import structlog

from proofscan.analysis.models import GeneratedTestRecord
from proofscan.parsing.engine import SyntaxNode, parse_source
from proofscan.parsing.walk import (
    CALL_EXPRESSION,
    FUNCTION_ITEM,
    attributes_of,
    call_arguments_of,
    callee_name_of,
    iter_items,
    name_of,
    normalize_path,
)

log = structlog.get_logger(__name__)

PLAYBACK_PREFIX = "kani_concrete_playback_"
PLAYBACK_RUNNERS = frozenset({"kani::concrete_playback_run", "concrete_playback_run"})

_GENERATED_NAME = re.compile(rf"^{PLAYBACK_PREFIX}(?P<harness>\w+?)(?:_(?P<id>\d+))?$")
_PATH_ARGUMENT_KINDS = frozenset({"identifier", "scoped_identifier"})


def _runner_call(function_item: SyntaxNode) -> SyntaxNode | None:
    body = function_item.field("body")
    if body is None:
        return None
    for node in body.descendants(prune=frozenset({FUNCTION_ITEM, "closure_expression"})):
        if node.kind == CALL_EXPRESSION and callee_name_of(node) in PLAYBACK_RUNNERS:
            return node
    return None


def _harness_argument(call: SyntaxNode) -> str | None:
    arguments = call_arguments_of(call)
    if len(arguments) < 2 or arguments[1].kind not in _PATH_ARGUMENT_KINDS:
        return None
    return normalize_path(arguments[1].text).rsplit("::", 1)[-1] or None


def locate_generated_tests(root: SyntaxNode) -> list[GeneratedTestRecord]:
    """Replay tests in an already parsed tree, by ascending insertion line."""
    records: list[GeneratedTestRecord] = []
    for item, _module_path in iter_items(root, FUNCTION_ITEM):
        name = name_of(item)
        match = _GENERATED_NAME.match(name) if name else None
        if match is None:
            continue
        call = _runner_call(item)
        if call is None:
            continue
        attributes = attributes_of(item)
        records.append(
            GeneratedTestRecord(
                test_function_name=match.group(0),
                originating_harness_name=_harness_argument(call) or match.group("harness"),
                insertion_line=attributes[0].start_line if attributes else item.start_line,
                end_line=item.end_line,
                playback_id=match.group("id"),
            )
        )
    records.sort(key=lambda record: record.insertion_line)
    return records


def extract_generated_tests(source: str) -> list[GeneratedTestRecord]:
    """Replay tests generated into ``source``.

    Raises:
        ParserUnavailableError: The Rust grammar could not be loaded.
    """
    if PLAYBACK_PREFIX not in source:
        return []
    try:
        result = parse_source(source)
    except ValueError as e:
        log.warning("source_parse_failed", error=str(e))
        return []
    records = locate_generated_tests(result.root)
    log.debug("generated_tests_extracted", count=len(records))
    return records


def group_by_harness(records: list[GeneratedTestRecord]) -> dict[str, list[GeneratedTestRecord]]:
    """Nest replay tests under their originating harness, keeping source order."""
    grouped: dict[str, list[GeneratedTestRecord]] = defaultdict(list)
    for record in records:
        grouped[record.originating_harness_name].append(record)
    return dict(grouped)
