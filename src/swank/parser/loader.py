"""Load Swagger/OpenAPI documents from a URL, local file, raw text, or mapping.

This module normalises every supported kind of input into a single in-memory
document (a plain ``dict``).  It supports both JSON and YAML:

* URLs and files pick the parser from the extension -- ``.yaml``/``.yml``
  means YAML, anything else JSON.
* Raw text starting with ``{`` or ``[`` is parsed as JSON, anything else
  as YAML (every JSON document is also YAML, but JSON errors are clearer).
* A mapping is used as-is; the pipeline takes ownership of it.

Parse failures raise :class:`~swank.exceptions.ParseError`; network failures
surface from the fetcher as :class:`~swank.exceptions.FetchError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlsplit

import yaml

from swank.exceptions import ParseError
from swank.parser.fetcher import Fetcher, HttpxFetcher

logger = logging.getLogger(__name__)

Source = Union[str, Path, Mapping[str, Any]]

_YAML_SUFFIXES = (".yaml", ".yml")
_PARSER_NOISE = "in JSON"


def is_url(source: Any) -> bool:
    """Return ``True`` for ``http://`` and ``https://`` strings."""
    return isinstance(source, str) and source.strip().startswith(("http://", "https://"))


def format_hint(location: str) -> str:
    """Pick ``"yaml"`` or ``"json"`` from the extension of a path or URL."""
    path = urlsplit(location).path if is_url(location) else location
    return "yaml" if path.lower().endswith(_YAML_SUFFIXES) else "json"


def clean_parser_message(message: str) -> str:
    """Drop a verbose parser suffix, cutting at the literal ``in JSON``."""
    return message.split(_PARSER_NOISE)[0].strip()


class DocumentLoader:
    """Turn heterogeneous input into a document mapping.

    Args:
        fetcher: Async fetch capability for URL input.  Defaults to a fresh
            :class:`~swank.parser.fetcher.HttpxFetcher`.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None) -> None:
        self._fetcher = fetcher or HttpxFetcher()

    async def load(self, source: Source) -> dict[str, Any]:
        """Load *source* and return the parsed document.

        Raises:
            ParseError: If the content is not a JSON/YAML mapping.
            FetchError: If *source* is a URL and the fetch fails.
        """
        if isinstance(source, Mapping):
            return source if isinstance(source, dict) else dict(source)
        if isinstance(source, Path):
            return _load_from_file(source)
        if is_url(source):
            url = source.strip()
            text = await self._fetcher(url)
            return parse_content(text, hint=format_hint(url))
        if isinstance(source, str):
            return parse_content(source, hint=_text_hint(source))
        raise ParseError(
            f"Unsupported document source of type {type(source).__name__}"
        )


def _text_hint(text: str) -> str:
    return "json" if text.lstrip().startswith(("{", "[")) else "yaml"


def _load_from_file(path: Path) -> dict[str, Any]:
    """Load a document from a local file, choosing the parser by extension."""
    if not path.is_file():
        raise ParseError(f"Document file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ParseError(f"Failed to read document file {path}: {exc}") from exc
    return parse_content(content, hint=format_hint(str(path)))


def parse_content(content: str, hint: str = "json") -> dict[str, Any]:
    """Parse *content* as JSON or YAML according to *hint*.

    Args:
        content: The raw text.
        hint: ``"json"`` or ``"yaml"``.

    Returns:
        The parsed mapping.

    Raises:
        ParseError: If the content is empty, malformed, or not a mapping.
    """
    if not content.strip():
        raise ParseError("Document is empty")

    if hint == "yaml":
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ParseError(f"Invalid YAML: {clean_parser_message(str(exc))}") from exc
    else:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {clean_parser_message(str(exc))}") from exc

    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ParseError(f"Document must be a JSON/YAML object (got {kind})")
    logger.debug("Parsed %s document with %d top-level keys", hint, len(result))
    return result
