"""Per-file harness metadata.

``build_metadata_map`` is the single entry point used by outline
presenters: text in, ordered ``{harness_name: HarnessMetadata}`` out.

Error policy:
- grammar initialization failure propagates as ``ParserUnavailableError``
- anything wrong with the text itself yields the uniform empty result
"""

from __future__ import annotations

import re
from dataclasses import replace

import structlog

from proofscan.analysis.harnesses import (
    HarnessCandidate,
    find_attribute_harnesses,
    find_invocation_harnesses,
)
from proofscan.analysis.models import HarnessKind, HarnessMetadata, HarnessMetadataMap
from proofscan.parsing.engine import SyntaxNode, parse_source
from proofscan.parsing.walk import doc_comment_of

log = structlog.get_logger(__name__)

TEST_ATTRIBUTE = "test"

_PROOF_PATTERN = re.compile(
    r"\bkani\s*::\s*proof\w*"  # attribute marker and its variants
    r"|\bbolero\s*::\s*check\b"  # qualified entry point
    r"|\bcheck\s*!(?!=)"  # entry point macro after `use bolero::check`
)


def check_file_for_proofs(source: str) -> bool:
    """Cheap textual pre-check; never builds a tree."""
    return _PROOF_PATTERN.search(source) is not None


def _kind_of(candidate: HarnessCandidate) -> HarnessKind:
    if candidate.declared_by_attribute:
        return HarnessKind.PROOF
    is_test = any(attribute.name == TEST_ATTRIBUTE for attribute in candidate.attributes)
    if is_test and candidate.invocation_count == 1:
        return HarnessKind.UNIT_TEST
    return HarnessKind.PROOF


def _merge_candidates(
    attribute_based: list[HarnessCandidate],
    invocation_based: list[HarnessCandidate],
) -> list[HarnessCandidate]:
    """Union of both strategies, one candidate per name, in source order."""
    invocations = {candidate.node: candidate for candidate in invocation_based}
    merged: list[HarnessCandidate] = []
    for candidate in attribute_based:
        match = invocations.pop(candidate.node, None)
        if match is not None:
            candidate = replace(
                candidate,
                entry_point=match.entry_point,
                invocation_count=match.invocation_count,
            )
        merged.append(candidate)
    merged.extend(invocations.values())
    merged.sort(key=lambda candidate: candidate.node.start_byte)

    chosen: dict[str, HarnessCandidate] = {}
    for candidate in merged:
        current = chosen.get(candidate.name)
        if current is None:
            chosen[candidate.name] = candidate
            continue
        prefer_new = candidate.declared_by_attribute and not current.declared_by_attribute
        kept, dropped = (candidate, current) if prefer_new else (current, candidate)
        log.warning(
            "harness_name_collision",
            harness=candidate.name,
            kept_line=kept.node.start_line,
            dropped_line=dropped.node.start_line,
        )
        if prefer_new:
            chosen[candidate.name] = candidate
    return sorted(chosen.values(), key=lambda candidate: candidate.node.start_byte)


def collect_harnesses(root: SyntaxNode) -> HarnessMetadataMap:
    """Aggregate detector and classifier output for an already parsed tree."""
    candidates = _merge_candidates(
        find_attribute_harnesses(root),
        find_invocation_harnesses(root),
    )
    kinds = [_kind_of(candidate) for candidate in candidates]
    total_proofs = sum(1 for kind in kinds if kind is HarnessKind.PROOF)

    harnesses: HarnessMetadataMap = {}
    for candidate, kind in zip(candidates, kinds, strict=True):
        harnesses[candidate.name] = HarnessMetadata(
            harness_name=candidate.name,
            kind=kind,
            start_line=candidate.node.start_line,
            end_line=candidate.node.end_line,
            attributes=candidate.attributes,
            total_proofs=total_proofs,
            module_path=candidate.module_path,
            doc=doc_comment_of(candidate.node),
            entry_point=candidate.entry_point,
        )
    return harnesses


def build_metadata_map(source: str) -> HarnessMetadataMap:
    """Map every harness in ``source`` to its metadata, in discovery order.

    Raises:
        ParserUnavailableError: The Rust grammar could not be loaded.
    """
    if not source.strip():
        return {}
    try:
        result = parse_source(source)
    except ValueError as e:
        log.warning("source_parse_failed", error=str(e))
        return {}
    if result.has_errors:
        log.debug(
            "malformed_source",
            error_count=result.error_count,
            total_nodes=result.total_nodes,
        )
    harnesses = collect_harnesses(result.root)
    log.debug("harnesses_extracted", count=len(harnesses))
    return harnesses
