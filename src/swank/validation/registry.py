"""Version-keyed registry of validation rulesets.

A registry is an explicit object handed to the
:class:`~swank.validation.engine.RuleEngine`; there is no process-wide
ruleset table.  Each ruleset is an ordered, immutable tuple of
:class:`~swank.models.ValidationRule` -- order matters because a rule using
``requiredIf`` reads the result of the rule it depends on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from swank.exceptions import ConfigError, ParseError, UnsupportedVersionError
from swank.models import ValidationRule
from swank.parser.loader import format_hint, parse_content

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "2.0"

Ruleset = tuple[ValidationRule, ...]
RuleLike = Union[ValidationRule, Mapping[str, Any]]


def declared_version(document: Mapping[str, Any]) -> str:
    """Return the Swagger/OpenAPI version a document declares.

    Reads ``swagger`` first, then ``openapi``, and defaults to ``"2.0"``.
    Non-string values (YAML turns ``swagger: 2.0`` into a float) are
    converted with :func:`str`.
    """
    for key in ("swagger", "openapi"):
        value = document.get(key)
        if value is not None:
            return str(value)
    return DEFAULT_VERSION


def build_ruleset(rules: Iterable[RuleLike]) -> Ruleset:
    """Validate raw rule mappings into an immutable ruleset."""
    return tuple(
        rule if isinstance(rule, ValidationRule) else ValidationRule.model_validate(rule)
        for rule in rules
    )


class RulesetRegistry:
    """Rulesets keyed by spec version string.

    Args:
        default_version: Ruleset used for Swagger-family documents
            (``swagger`` key, no ``openapi`` key) whose declared version has
            no ruleset of its own, so that e.g. ``swagger: "1.2"`` is
            reported by the 2.0 ruleset's version rule instead of passing.
            ``None`` disables the fallback.
    """

    def __init__(self, default_version: Optional[str] = DEFAULT_VERSION) -> None:
        self._rulesets: dict[str, Ruleset] = {}
        self.default_version = default_version

    def __contains__(self, version: object) -> bool:
        return version in self._rulesets

    def register(self, version: str, rules: Iterable[RuleLike]) -> Ruleset:
        """Register (or replace) the ruleset for *version* and return it."""
        ruleset = build_ruleset(rules)
        self._rulesets[str(version)] = ruleset
        logger.debug("Registered %d rules for version %s", len(ruleset), version)
        return ruleset

    def get(self, version: str) -> Ruleset:
        """Return the ruleset registered for exactly *version*.

        Raises:
            UnsupportedVersionError: If nothing is registered for *version*.
        """
        try:
            return self._rulesets[str(version)]
        except KeyError:
            raise UnsupportedVersionError(
                f"No validation rules registered for version {version}",
                version=str(version),
            ) from None

    def versions(self) -> list[str]:
        """Registered version strings, sorted."""
        return sorted(self._rulesets)

    def resolve(self, document: Mapping[str, Any]) -> Ruleset:
        """Pick the ruleset for *document* by its declared version.

        Raises:
            UnsupportedVersionError: If neither the declared version nor
                (for Swagger-family documents) the default version has a
                ruleset.
        """
        version = declared_version(document)
        if version in self._rulesets:
            return self._rulesets[version]

        swagger_family = "openapi" not in document
        if swagger_family and self.default_version in self._rulesets:
            logger.warning(
                "No ruleset for Swagger version %s; validating against %s",
                version,
                self.default_version,
            )
            return self._rulesets[self.default_version]

        logger.error("Failed to load validation rules for version %s", version)
        raise UnsupportedVersionError(
            f"No validation rules registered for version {version}",
            version=version,
        )

    def load_file(self, path: Union[str, Path], version: Optional[str] = None) -> Ruleset:
        """Register a ruleset read from a JSON or YAML file.

        The file is either a mapping ``{"version": ..., "rules": [...]}`` or,
        when *version* is given, may hold the rule list under ``rules`` alone.

        Raises:
            ConfigError: If the file is missing, malformed, or holds invalid rules.
        """
        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8")
            data = parse_content(content, hint=format_hint(str(file_path)))
        except OSError as exc:
            raise ConfigError(f"Failed to read ruleset file {file_path}: {exc}") from exc
        except ParseError as exc:
            raise ConfigError(f"Invalid ruleset file {file_path}: {exc}") from exc

        resolved_version = version or data.get("version")
        rules = data.get("rules")
        if resolved_version is None or not isinstance(rules, list):
            raise ConfigError(
                f"Ruleset file {file_path} needs a 'version' and a 'rules' list"
            )
        try:
            return self.register(str(resolved_version), rules)
        except ValidationError as exc:
            raise ConfigError(f"Invalid rule in {file_path}: {exc}") from exc
