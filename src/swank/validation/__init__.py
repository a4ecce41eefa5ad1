"""Document validation -- the declarative rule engine and the JSON-Schema adapter.

Sub-modules:

* :mod:`~swank.validation.registry` -- version-keyed ruleset registry.
* :mod:`~swank.validation.rulesets` -- built-in rulesets (Swagger 2.0).
* :mod:`~swank.validation.engine` -- evaluates a ruleset, accumulating errors.
* :mod:`~swank.validation.schema` -- schema URL derivation and ``jsonschema``
  validation.
"""

from swank.validation.engine import RuleEngine
from swank.validation.registry import RulesetRegistry, declared_version
from swank.validation.rulesets import default_registry
from swank.validation.schema import SchemaValidator, schema_url_for

__all__ = [
    "RuleEngine",
    "RulesetRegistry",
    "SchemaValidator",
    "declared_version",
    "default_registry",
    "schema_url_for",
]
