"""Document loading -- turn a URL, file, raw text, or mapping into a document.

Typical usage::

    from swank.parser import DocumentLoader

    loader = DocumentLoader()
    document = await loader.load("https://petstore.swagger.io/v2/swagger.json")

Sub-modules:

* :mod:`~swank.parser.fetcher` -- the async HTTP fetch capability.
* :mod:`~swank.parser.loader` -- input dispatch plus JSON/YAML parsing.
"""

from swank.parser.fetcher import Fetcher, HttpxFetcher
from swank.parser.loader import DocumentLoader, parse_content

__all__ = ["DocumentLoader", "Fetcher", "HttpxFetcher", "parse_content"]
