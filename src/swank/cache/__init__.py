"""Disk-based schema caching for swank.

This package provides :class:`SchemaCache`, an opt-in layer that stores
fetched JSON schemas on disk using :mod:`diskcache`, keyed by schema URL
with a configurable TTL.  It is consumed by the pipeline's schema-fetching
stage and controlled by the ``cache`` section of
:class:`~swank.models.GlobalConfig`.
"""

from swank.cache.cache import SchemaCache

__all__ = ["SchemaCache"]
