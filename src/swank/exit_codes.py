"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~swank.exceptions.SwankError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ swank validate https://petstore.swagger.io/v2/swagger.json
    $ echo $?
    8   # EXIT_VALIDATION_FAILED -- the document has rule or schema violations
"""

EXIT_SUCCESS = 0
"""The command completed successfully and the document is valid."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_FETCH_ERROR = 6
"""A network-level error occurred while fetching a document or schema."""

EXIT_PARSE_ERROR = 7
"""The input document could not be parsed as JSON or YAML."""

EXIT_VALIDATION_FAILED = 8
"""The pipeline completed but reported rule or schema violations."""

EXIT_UNSUPPORTED_VERSION = 9
"""No ruleset or schema is known for the document's declared version."""

EXIT_VALIDATOR_UNAVAILABLE = 10
"""The JSON-Schema validation capability could not be constructed."""
