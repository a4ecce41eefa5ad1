"""Structural validation against the official OpenAPI JSON schemas.

The schema for a document is located by version
(:func:`schema_url_for`) and applied with :mod:`jsonschema`.  Every
violation is collected in one pass via ``iter_errors``; nothing stops at
the first failure.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Mapping, Optional

from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from swank.exceptions import UnsupportedVersionError, ValidatorUnavailableError
from swank.models import DEFAULT_SCHEMA_BASE_URL, SchemaViolation

logger = logging.getLogger(__name__)

_VERSION_TOKEN = re.compile(r"\d+(\.\d+)?")

ValidatorFactory = Callable[[Mapping[str, Any]], Any]
"""Builds an object exposing ``iter_errors(instance)`` from a schema."""


def schema_url_for(version: str, base_url: str = DEFAULT_SCHEMA_BASE_URL) -> str:
    """Build the schema URL for a declared spec version.

    The first ``major[.minor]`` token of *version* is used, padded to
    ``major.minor``: ``"2.0"`` -> ``v2.0``, ``"3.0.3"`` -> ``v3.0``,
    ``"3"`` -> ``v3.0``.

    Raises:
        UnsupportedVersionError: If *version* holds no numeric token.
    """
    match = _VERSION_TOKEN.search(str(version))
    if match is None:
        raise UnsupportedVersionError(
            f"Cannot derive a schema version from {version!r}", version=str(version)
        )
    token = match.group(0)
    if "." not in token:
        token = f"{token}.0"
    return f"{base_url.rstrip('/')}/v{token}/schema.json"


def jsonschema_factory(schema: Mapping[str, Any]) -> Any:
    """Default factory: pick the draft from ``$schema`` (Draft 4 if absent)."""
    cls = validator_for(schema, default=Draft4Validator)
    cls.check_schema(schema)
    return cls(schema)


def _pointer(parts: Any) -> str:
    escaped = (str(p).replace("~", "~0").replace("/", "~1") for p in parts)
    return "#/" + "/".join(escaped)


class SchemaValidator:
    """Apply a JSON schema to a document and report every violation.

    Args:
        validator_factory: Builds the validator from a schema document.
            Defaults to :func:`jsonschema_factory`.
    """

    def __init__(self, validator_factory: Optional[ValidatorFactory] = None) -> None:
        self._factory = validator_factory or jsonschema_factory

    def validate(
        self,
        document: Mapping[str, Any],
        schema_url: str,
        schema_doc: Any,
    ) -> list[SchemaViolation]:
        """Validate *document* against *schema_doc* fetched from *schema_url*.

        Returns:
            Violations ordered by document path.

        Raises:
            ValidatorUnavailableError: If no validator can be built from
                *schema_doc*.
        """
        if not isinstance(schema_doc, Mapping):
            raise ValidatorUnavailableError(
                f"Schema at {schema_url} is not a JSON object"
            )
        try:
            validator = self._factory(schema_doc)
        except SchemaError as exc:
            logger.error("Invalid schema at %s: %s", schema_url, exc.message)
            raise ValidatorUnavailableError(
                f"Cannot build a validator from {schema_url}: {exc.message}"
            ) from exc
        except Exception as exc:
            logger.error("Validator factory failed for %s: %s", schema_url, exc)
            raise ValidatorUnavailableError(
                f"No validator available for {schema_url}: {exc}"
            ) from exc
        if validator is None:
            raise ValidatorUnavailableError(f"No validator available for {schema_url}")

        errors = sorted(
            validator.iter_errors(document),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        violations = [
            SchemaViolation(
                code=str(error.validator),
                message=error.message,
                path=_pointer(error.absolute_path),
            )
            for error in errors
        ]
        logger.debug("%d schema violation(s) against %s", len(violations), schema_url)
        return violations
