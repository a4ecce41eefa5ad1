"""Post-validation normalisation: derive tags and regroup ``paths``."""

from swank.normalizer.paths import (
    HTTP_METHODS,
    UNTAGGED,
    group_by_method,
    group_by_route,
    group_by_tag,
    group_paths,
    normalize,
)
from swank.normalizer.tags import collect_values_by_key, derive_tags

__all__ = [
    "HTTP_METHODS",
    "UNTAGGED",
    "collect_values_by_key",
    "derive_tags",
    "group_by_method",
    "group_by_route",
    "group_by_tag",
    "group_paths",
    "normalize",
]
