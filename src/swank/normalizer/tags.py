"""Tag derivation.

A document's tag list comes from its top-level ``tags`` array when that
array is non-empty; otherwise it is inferred from the ``tags`` arrays of
the operations under ``paths``.
"""

from __future__ import annotations

from typing import Any, Hashable, Mapping


def _dedupe(values: list[Any]) -> list[Any]:
    seen: set[Hashable] = set()
    unique: list[Any] = []
    for value in values:
        if not isinstance(value, Hashable) or value in seen:
            continue
        seen.add(value)
        unique.append(value)
    return unique


def collect_values_by_key(tree: Any, key: str) -> list[Any]:
    """Collect the items of every *key* array anywhere in *tree*.

    Walks mappings and lists recursively; the result is deduplicated over
    the whole tree, keeping the first occurrence of each value.
    """
    found: list[Any] = []
    _collect(tree, key, found)
    return _dedupe(found)


def _collect(node: Any, key: str, found: list[Any]) -> None:
    if isinstance(node, Mapping):
        values = node.get(key)
        if isinstance(values, list):
            found.extend(values)
        for child in node.values():
            _collect(child, key, found)
    elif isinstance(node, list):
        for child in node:
            _collect(child, key, found)


def declared_tags(document: Mapping[str, Any]) -> list[str]:
    """Names from the top-level ``tags`` array, deduplicated in order."""
    tags = document.get("tags")
    if not isinstance(tags, list):
        return []
    names = []
    for tag in tags:
        if isinstance(tag, Mapping) and isinstance(tag.get("name"), str):
            names.append(tag["name"])
        elif isinstance(tag, str):
            names.append(tag)
    return _dedupe(names)


def derive_tags(document: Mapping[str, Any]) -> list[str]:
    """Return the document's tag names, declared or inferred from ``paths``."""
    names = declared_tags(document)
    if names:
        return names
    return [
        value
        for value in collect_values_by_key(document.get("paths", {}), "tags")
        if isinstance(value, str)
    ]
