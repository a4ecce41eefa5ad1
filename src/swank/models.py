"""Canonical Pydantic models shared across all swank modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Validation models** -- the declarative rule language and what it produces:
    :class:`ValidationRule`, :class:`RuleResult`, :class:`ValidationReport`,
    and :class:`SchemaViolation`.

**Run options and normalizer output** -- :class:`OrderPaths`,
    :class:`ValidatorMode`, :class:`Options`, and :class:`NormalizedPaths`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`SchemaConfig`, :class:`CacheConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

All models use Pydantic v2. Rules are frozen so a ruleset cannot change
while an engine is evaluating it.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SCHEMA_BASE_URL = (
    "https://raw.githubusercontent.com/OAI/OpenAPI-Specification/main/schemas"
)
"""Base of the OpenAPI schema repository; ``/v<major>.<minor>/schema.json`` is appended."""

ROOT_TOKEN = "{ROOT}/"
"""Display replacement for the ``#/`` root marker of a JSON pointer."""

TYPE_TAGS = frozenset(
    {"string", "number", "integer", "boolean", "null", "object", "array", "url"}
)
"""Value types understood by :attr:`ValidationRule.is_type`."""

REQUIRED_IF_CONDITIONS = frozenset({"exists", "matches"})


# --- Validation rules ---


class ValidationRule(BaseModel):
    """A single declarative check against one dotted path of a document.

    Rules are usually written as plain mappings (JSON, YAML, or Python
    dicts) using the camelCase keys ``requiredIf`` and ``isType``; both the
    alias and the snake_case field name are accepted.  Unknown keys are
    ignored.

    ``matches`` is only checked when it was explicitly given, so a rule
    can require a value to be ``null`` by declaring ``matches: null``.

    Example::

        ValidationRule.model_validate(
            {"path": "info.contact.name", "isType": "string",
             "requiredIf": ["info.contact"]}
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    path: str = Field(min_length=1, description="Dotted path into the document")
    required: Optional[bool] = None
    required_if: Optional[tuple[Any, ...]] = Field(
        default=None,
        alias="requiredIf",
        description="[dependency_path, condition ('exists'|'matches'), expected]",
    )
    matches: Any = None
    is_type: Optional[str] = Field(default=None, alias="isType")
    error: Optional[str] = Field(
        default=None, description="Custom message reported when the rule fails"
    )

    @field_validator("required_if", mode="before")
    @classmethod
    def _normalise_required_if(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise ValueError("'requiredIf' must be an array")
        if not value or not isinstance(value[0], str):
            raise ValueError("'requiredIf' must start with a dependency path")
        condition = value[1] if len(value) > 1 and value[1] else "exists"
        condition = str(condition).lower()
        if condition not in REQUIRED_IF_CONDITIONS:
            raise ValueError(f"Unknown 'requiredIf' condition: {condition}")
        expected = value[2] if len(value) > 2 else None
        return (value[0], condition, expected)

    @field_validator("is_type")
    @classmethod
    def _normalise_is_type(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.lower()
        if value not in TYPE_TAGS:
            raise ValueError(
                f"Unknown 'isType' {value!r}; expected one of {sorted(TYPE_TAGS)}"
            )
        return value

    @property
    def declares_required(self) -> bool:
        """Whether ``required`` was given; a declared falsy value always fails."""
        return "required" in self.model_fields_set

    @property
    def declares_matches(self) -> bool:
        """Whether ``matches`` was given explicitly (``None`` is a valid literal)."""
        return "matches" in self.model_fields_set

    @property
    def dependency(self) -> Optional[str]:
        return self.required_if[0] if self.required_if else None

    @property
    def condition(self) -> Optional[str]:
        return self.required_if[1] if self.required_if else None

    @property
    def expected(self) -> Any:
        return self.required_if[2] if self.required_if else None

    @property
    def error_message(self) -> str:
        """The custom ``error`` text, or the generated default."""
        return self.error or f"The path '{self.path}' is invalid."


class RuleResult(BaseModel):
    """Outcome of evaluating one rule, keyed by the rule's path."""

    exists: bool
    is_valid: bool
    conditional: Optional[bool] = None


class ValidationReport(BaseModel):
    """Errors and per-path results of one rule-engine pass."""

    errors: list[str] = Field(default_factory=list)
    results: dict[str, RuleResult] = Field(default_factory=dict)


class SchemaViolation(BaseModel):
    """One JSON-Schema violation reported by the schema validator.

    Attributes:
        code: The schema keyword that failed (``required``, ``type``, ...).
        message: The validator's message.
        path: ``#/``-rooted JSON pointer to the offending value.
    """

    code: str
    message: str
    path: str = "#/"

    @property
    def display_path(self) -> str:
        """The pointer with its ``#/`` root rewritten to ``{ROOT}/``."""
        if self.path.startswith("#/"):
            return ROOT_TOKEN + self.path[2:]
        return self.path

    def __str__(self) -> str:
        return f"{self.display_path}: {self.message} ({self.code})"


# --- Run options ---


class OrderPaths(str, enum.Enum):
    """How the normalizer groups the document's ``paths``."""

    ROUTE = "route"
    METHOD = "method"
    TAG = "tag"


class ValidatorMode(str, enum.Enum):
    """Which validators a pipeline run applies.

    ``RULES`` uses the built-in rule engine only and needs no network.
    ``SCHEMA`` fetches the official JSON schema for the declared version.
    ``BOTH`` runs the rule engine first, then the schema validator.
    """

    RULES = "rules"
    SCHEMA = "schema"
    BOTH = "both"


class Options(BaseModel):
    """Per-run options for the validation pipeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_paths: OrderPaths = Field(default=OrderPaths.TAG, alias="orderPaths")
    validator: ValidatorMode = ValidatorMode.RULES
    schema_base_url: str = DEFAULT_SCHEMA_BASE_URL


class NormalizedPaths(BaseModel):
    """Derived tag list plus the regrouped ``paths`` map."""

    tags: list[str] = Field(default_factory=list)
    paths: dict[str, Any] = Field(default_factory=dict)


# --- Configuration ---


class SchemaConfig(BaseModel):
    """Where official JSON schemas are fetched from."""

    base_url: str = Field(
        default=DEFAULT_SCHEMA_BASE_URL, description="Schema repository base URL"
    )
    timeout: int = Field(default=30, description="Fetch timeout in seconds")


class CacheConfig(BaseModel):
    """On-disk schema cache settings stored in :class:`GlobalConfig`.

    Disabled by default: without it every run fetches its schema afresh.
    """

    enabled: bool = Field(default=False, description="Cache fetched schemas on disk")
    ttl_seconds: int = Field(default=86400, description="Cache TTL in seconds")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/swank/config.json``.

    Loaded and saved by :func:`~swank.config.load_global_config` and
    :func:`~swank.config.save_global_config`. Fields here have the lowest
    precedence; see :func:`~swank.config.resolve_config`.
    """

    order_paths: OrderPaths = OrderPaths.TAG
    validator: ValidatorMode = ValidatorMode.RULES
    schemas: SchemaConfig = Field(default_factory=SchemaConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_options(self) -> Options:
        """Build the run :class:`Options` described by this configuration."""
        return Options(
            order_paths=self.order_paths,
            validator=self.validator,
            schema_base_url=self.schemas.base_url,
        )
