"""Attribute classification.

Every attribute attached to a candidate function becomes an
``AttributeDescriptor``. Names in the allow-list (see ``AttributeKind``)
are marked supported; anything else is kept with ``supported=False`` so a
front end can warn that the option is not modeled here.

``#[cfg_attr(kani, ...)]`` is an alias form: its wrapped attributes are
classified as if written directly on the item. Argument text is never
evaluated.
"""

from __future__ import annotations

import re

from proofscan.analysis.models import AttributeDescriptor, AttributeKind
from proofscan.parsing.engine import SyntaxNode
from proofscan.parsing.walk import (
    attribute_path_of,
    attributes_of,
    literal_arguments_of,
    normalize_path,
    split_arguments,
)

CFG_ATTR = "cfg_attr"

_KANI_CFG = re.compile(r"\bkani\b")
_ATTRIBUTE_TEXT = re.compile(
    r"^(?P<path>[A-Za-z_][\w\s:]*?)\s*(?:(?P<args>[(\[{].*)|=\s*(?P<value>.*))?$",
    re.DOTALL,
)


def _descriptor(name: str, arguments: list[str], line: int) -> AttributeDescriptor:
    kind = AttributeKind.from_name(name)
    return AttributeDescriptor(
        name=name,
        arguments=tuple(arguments),
        supported=kind is not AttributeKind.UNSUPPORTED,
        kind=kind,
        line=line,
    )


def _descriptor_from_text(text: str, line: int) -> AttributeDescriptor | None:
    """Classify an attribute written as token text inside ``cfg_attr``."""
    match = _ATTRIBUTE_TEXT.match(text.strip())
    if match is None:
        return None
    name = normalize_path(match.group("path"))
    if not name:
        return None
    if match.group("args") is not None:
        arguments = split_arguments(match.group("args"))
    elif match.group("value"):
        arguments = [match.group("value").strip()]
    else:
        arguments = []
    return _descriptor(name, arguments, line)


def _enables_under_kani(predicate: str) -> bool:
    predicate = normalize_path(predicate)
    return bool(_KANI_CFG.search(predicate)) and not predicate.startswith("not(")


def classify_attribute(attribute_item: SyntaxNode) -> list[AttributeDescriptor]:
    """Descriptors for one attribute item (several for a ``cfg_attr`` alias)."""
    name = attribute_path_of(attribute_item)
    if name is None:
        return []
    arguments = literal_arguments_of(attribute_item)
    line = attribute_item.start_line
    if name == CFG_ATTR and len(arguments) > 1 and _enables_under_kani(arguments[0]):
        expanded = (_descriptor_from_text(text, line) for text in arguments[1:])
        return [descriptor for descriptor in expanded if descriptor is not None]
    return [_descriptor(name, arguments, line)]


def classify_attributes(item: SyntaxNode | None) -> tuple[AttributeDescriptor, ...]:
    """Descriptors for all attributes attached to ``item``.

    Identical ``(name, arguments)`` pairs, e.g. ``#[kani::proof]`` next to
    ``#[cfg_attr(kani, kani::proof)]``, are reported once.
    """
    descriptors: list[AttributeDescriptor] = []
    seen: set[tuple[str, tuple[str, ...]]] = set()
    for attribute_item in attributes_of(item):
        for descriptor in classify_attribute(attribute_item):
            key = (descriptor.name, descriptor.arguments)
            if key in seen:
                continue
            seen.add(key)
            descriptors.append(descriptor)
    return tuple(descriptors)


def declares_harness(descriptors: tuple[AttributeDescriptor, ...]) -> bool:
    return any(descriptor.kind.declares_harness for descriptor in descriptors)
