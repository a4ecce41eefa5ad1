"""Regroup a ``paths`` map by route, HTTP method, or tag.

Every grouping maps a group key to ``{route: {method: operation}}``, except
route grouping, which keeps each route's whole path item (so it reproduces
the input ``paths`` map exactly).

Only the seven Swagger 2.0 method keys are operations; ``parameters`` and
``x-`` extensions on a path item are never grouped.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional

from swank.exceptions import InvalidUsageError
from swank.models import NormalizedPaths, Options, OrderPaths
from swank.normalizer.tags import derive_tags

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")
UNTAGGED = "untagged"

PathGroup = dict[str, dict[str, Any]]


def iter_operations(paths: Mapping[str, Any]) -> Iterator[tuple[str, str, Any]]:
    """Yield ``(route, method, operation)`` for every operation in *paths*."""
    for route, path_item in paths.items():
        if not isinstance(path_item, Mapping):
            continue
        for method, operation in path_item.items():
            if method in HTTP_METHODS:
                yield route, method, operation


def group_by_route(paths: Mapping[str, Any]) -> PathGroup:
    """One entry per route holding the route's full path item."""
    return {route: path_item for route, path_item in paths.items()}


def group_by_method(paths: Mapping[str, Any]) -> PathGroup:
    """Fixed buckets ``get``..``patch``; each maps route -> ``{method: operation}``."""
    groups: PathGroup = {method: {} for method in HTTP_METHODS}
    for route, method, operation in iter_operations(paths):
        groups[method][route] = {method: operation}
    return groups


def group_by_tag(paths: Mapping[str, Any], tags: Optional[Iterable[str]] = None) -> PathGroup:
    """Group operations under each of their tags.

    An operation with several tags appears under each of them; one without
    tags goes under ``"untagged"``.  Every name in *tags*, and
    ``"untagged"``, gets a group even when it ends up empty.
    """
    groups: PathGroup = {tag: {} for tag in tags or ()}
    groups.setdefault(UNTAGGED, {})
    for route, method, operation in iter_operations(paths):
        op_tags = operation.get("tags") if isinstance(operation, Mapping) else None
        if not isinstance(op_tags, list) or not op_tags:
            op_tags = [UNTAGGED]
        for tag in op_tags:
            if not isinstance(tag, str):
                continue
            groups.setdefault(tag, {}).setdefault(route, {})[method] = operation
    return groups


def group_paths(
    paths: Mapping[str, Any],
    order: OrderPaths = OrderPaths.TAG,
    tags: Optional[Iterable[str]] = None,
) -> PathGroup:
    """Dispatch to the grouping selected by *order*.

    Raises:
        InvalidUsageError: If *order* is not ``route``, ``method`` or ``tag``.
    """
    try:
        order = OrderPaths(order)
    except ValueError:
        raise InvalidUsageError(f"Unknown path ordering: {order!r}") from None
    if order is OrderPaths.ROUTE:
        return group_by_route(paths)
    if order is OrderPaths.METHOD:
        return group_by_method(paths)
    return group_by_tag(paths, tags)


def normalize(document: dict[str, Any], options: Optional[Options] = None) -> NormalizedPaths:
    """Derive the tag list and regroup ``paths`` according to *options*.

    When the document has no ``tags`` array (or an empty one), the inferred
    tags are attached to it as ``[{"name": ...}]`` entries. A non-empty
    array is never replaced.
    """
    options = options or Options()
    tags = derive_tags(document)
    if tags and not document.get("tags"):
        document["tags"] = [{"name": name} for name in tags]

    paths = document.get("paths")
    if not isinstance(paths, Mapping):
        paths = {}
    grouped = group_paths(paths, options.order_paths, tags)
    logger.debug(
        "Grouped %d route(s) by %s into %d group(s)",
        len(paths),
        options.order_paths.value,
        len(grouped),
    )
    return NormalizedPaths(tags=tags, paths=grouped)
