"""swank -- validate and normalise Swagger / OpenAPI documents.

This package loads a Swagger or OpenAPI document from a URL, a file, raw
JSON/YAML text, or an in-memory mapping, checks it against a declarative
per-version ruleset (and optionally the official JSON schema), derives its
tag list, and regroups its ``paths`` by route, HTTP method, or tag.

Typical workflow::

    swank validate https://petstore.swagger.io/v2/swagger.json
    swank paths --order-paths method petstore.yaml

Or from Python::

    from swank.pipeline import run_pipeline

    result = await run_pipeline("petstore.yaml")

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Document loading and parsing.
    validation: Rule engine, ruleset registry, and JSON-Schema validator.
    normalizer: Tag derivation and path grouping.
    pipeline: The async stage orchestrator.
"""

__version__ = "0.1.0"
