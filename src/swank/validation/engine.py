"""Declarative rule engine.

Evaluates an ordered ruleset against a document and returns every failure
at once -- the engine never stops at the first invalid path.  Each rule is
evaluated in declaration order and its :class:`~swank.models.RuleResult` is
stored under the rule's path, so later ``requiredIf`` rules can read it.

For one rule the checks are:

1. Resolve the value at the dotted ``path``.  A missing key is not an error
   by itself; ``null`` counts as present.
2. ``required`` -- the value must be present.
3. ``requiredIf: [dep, "exists"]`` -- when the value is present, the
   dependency must exist and be valid.
   ``requiredIf: [dep, "matches", expected]`` -- the dependency must exist,
   be valid, and strictly equal ``expected``.
4. When the value is present: ``matches`` (strict equality) and ``isType``.

A rule is valid only if every applicable check passes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping, Optional, Sequence
from urllib.parse import urlsplit

from swank.models import RuleResult, ValidationReport, ValidationRule
from swank.validation.registry import RulesetRegistry
from swank.validation.rulesets import default_registry

logger = logging.getLogger(__name__)

_MISSING = object()
_UNEVALUATED = RuleResult(exists=False, is_valid=False)


def resolve_path(document: Any, path: str) -> Any:
    """Walk *document* along a dotted *path*.

    Mapping keys are matched literally; list items by decimal index.

    Returns:
        The value, or the module's missing sentinel when any segment is
        absent.  Use :func:`has_path` for a boolean answer.
    """
    current = document
    for segment in path.split("."):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return _MISSING
    return current


def has_path(document: Any, path: str) -> bool:
    return resolve_path(document, path) is not _MISSING


def strictly_equal(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion (``1 != True``, ``"2" != 2``).

    ``int`` and ``float`` compare as numbers since JSON has a single number type.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    numbers = (int, float)
    if isinstance(left, numbers) and isinstance(right, numbers):
        return left == right
    return type(left) is type(right) and left == right


def matches_type(value: Any, type_tag: str) -> bool:
    """Check *value* against one tag of the JSON value model."""
    if type_tag == "string":
        return isinstance(value, str)
    if type_tag == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_tag == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_tag == "boolean":
        return isinstance(value, bool)
    if type_tag == "null":
        return value is None
    if type_tag == "object":
        return isinstance(value, dict)
    if type_tag == "array":
        return isinstance(value, list)
    if type_tag == "url":
        return _is_url(value)
    return False


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class RuleEngine:
    """Evaluate rulesets from a :class:`~swank.validation.registry.RulesetRegistry`.

    Args:
        registry: Where rulesets are looked up by document version.
            Defaults to :func:`~swank.validation.rulesets.default_registry`.
    """

    def __init__(self, registry: Optional[RulesetRegistry] = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def validate(
        self,
        document: Mapping[str, Any],
        ruleset: Optional[Sequence[ValidationRule]] = None,
    ) -> ValidationReport:
        """Run every rule and collect the failures.

        Args:
            document: The loaded document.
            ruleset: Rules to apply.  When omitted the registry picks one
                from the document's declared version.

        Returns:
            A :class:`~swank.models.ValidationReport` with the error messages
            in rule order and one result per unique rule path.

        Raises:
            UnsupportedVersionError: If *ruleset* is omitted and the registry
                has nothing for the document's version.
        """
        if ruleset is None:
            ruleset = self.registry.resolve(document)

        report = ValidationReport()
        for rule in ruleset:
            result = self.evaluate(rule, document, report.results)
            report.results[rule.path] = result
            if not result.is_valid:
                report.errors.append(rule.error_message)

        for error in report.errors:
            logger.info(error)
        return report

    def evaluate(
        self,
        rule: ValidationRule,
        document: Mapping[str, Any],
        results: MutableMapping[str, RuleResult],
    ) -> RuleResult:
        """Evaluate one rule; *results* holds the rules evaluated so far."""
        value = resolve_path(document, rule.path)
        has_data = value is not _MISSING
        valid = True
        conditional: Optional[bool] = None

        if rule.declares_required:
            valid = valid and bool(rule.required) and has_data

        if rule.required_if is not None:
            parent = results.get(rule.dependency)
            if parent is None:
                logger.debug(
                    "Rule '%s' depends on '%s', which has not been evaluated",
                    rule.path,
                    rule.dependency,
                )
                parent = _UNEVALUATED
            parent_ok = parent.exists and parent.is_valid

            if rule.condition == "exists":
                if has_data:
                    conditional = parent_ok
                    valid = valid and conditional
            else:
                parent_value = resolve_path(document, rule.dependency)
                conditional = parent_ok and strictly_equal(parent_value, rule.expected)
                valid = valid and conditional

        if has_data:
            if rule.declares_matches:
                valid = strictly_equal(value, rule.matches) and valid
            if rule.is_type is not None:
                valid = matches_type(value, rule.is_type) and valid

        return RuleResult(exists=has_data, is_valid=valid, conditional=conditional)
