"""Harness discovery over Rust syntax trees."""

from proofscan.analysis.metadata import build_metadata_map, check_file_for_proofs
from proofscan.analysis.models import (
    AttributeDescriptor,
    AttributeKind,
    GeneratedTestRecord,
    HarnessKind,
    HarnessMetadata,
    HarnessMetadataMap,
)
from proofscan.analysis.playback import extract_generated_tests, group_by_harness

__all__ = [
    "AttributeDescriptor",
    "AttributeKind",
    "GeneratedTestRecord",
    "HarnessKind",
    "HarnessMetadata",
    "HarnessMetadataMap",
    "build_metadata_map",
    "check_file_for_proofs",
    "extract_generated_tests",
    "group_by_harness",
]
