"""Built-in rulesets.

Rules are written as plain mappings, in dependency order: a rule with
``requiredIf`` must come after the rule for its dependency path.
"""

from __future__ import annotations

from typing import Any

from swank.validation.registry import RulesetRegistry

SWAGGER_2_0_RULES: list[dict[str, Any]] = [
    {
        "path": "swagger", "required": True, "matches": "2.0",
        "error": "The 'swagger' key must exist at the root of the JSON and only version 2.0 is accepted.",
    },
    {
        "path": "info", "required": True, "isType": "object",
        "error": "The 'info' key must exist at the root of the JSON and be an object.",
    },
    {
        "path": "info.title", "isType": "string", "required": True,
        "error": "The 'info.title' is missing or is invalid.",
    },
    {
        "path": "info.version", "isType": "string", "required": True,
        "error": "The 'info.version' is missing or is invalid.",
    },
    {
        "path": "info.description", "isType": "string",
        "error": "The 'info.description' is invalid. It must be a string.",
    },
    {
        "path": "info.termsOfService", "isType": "string",
        "error": "The 'info.termsOfService' is invalid. It must be a string.",
    },
    {
        "path": "info.contact", "isType": "object",
        "error": "The 'info.contact' object is invalid.",
    },
    {
        "path": "info.contact.name", "isType": "string", "requiredIf": ["info.contact"],
        "error": "The 'info.contact.name' value is invalid. It must be a string.",
    },
    {
        "path": "info.contact.url", "isType": "url",
        "error": "The 'info.contact.url' value is invalid. It must be a complete URL.",
    },
    {
        "path": "info.contact.email", "isType": "string",
        "error": "The 'info.contact.email' value is invalid. It must be a valid email.",
    },
    {
        "path": "info.license", "isType": "object",
        "error": "The 'info.license' object is invalid.",
    },
    {
        "path": "info.license.name", "isType": "string", "requiredIf": ["info.license"],
        "error": "The 'info.license.name' value is invalid. It must be a string.",
    },
    {
        "path": "info.license.url", "isType": "url",
        "error": "The 'info.license.url' value is invalid. It must be a complete URL.",
    },
    {
        "path": "paths", "required": True, "isType": "object",
        "error": "The 'paths' key must exist at the root of the JSON and be an object.",
    },
    {
        "path": "host", "isType": "string",
        "error": "The 'host' value is invalid. It must be a string.",
    },
    {
        "path": "basePath", "isType": "string",
        "error": "The 'basePath' value is invalid. It must be a string.",
    },
    {
        "path": "schemes", "isType": "array",
        "error": "The 'schemes' value is invalid. It must be an array.",
    },
    {
        "path": "consumes", "isType": "array",
        "error": "The 'consumes' value is invalid. It must be an array.",
    },
    {
        "path": "produces", "isType": "array",
        "error": "The 'produces' value is invalid. It must be an array.",
    },
    {
        "path": "definitions", "isType": "object",
        "error": "The 'definitions' value is invalid. It must be an object.",
    },
    {
        "path": "securityDefinitions", "isType": "object",
        "error": "The 'securityDefinitions' value is invalid. It must be an object.",
    },
    {
        "path": "tags", "isType": "array",
        "error": "The 'tags' value is invalid. It must be an array.",
    },
    {
        "path": "externalDocs", "isType": "object",
        "error": "The 'externalDocs' object is invalid.",
    },
    {
        "path": "externalDocs.url", "isType": "url", "requiredIf": ["externalDocs"],
        "error": "The 'externalDocs.url' value is invalid. It must be a complete URL.",
    },
]


def default_registry() -> RulesetRegistry:
    """Return a new registry holding the built-in rulesets."""
    registry = RulesetRegistry()
    registry.register("2.0", SWAGGER_2_0_RULES)
    return registry
