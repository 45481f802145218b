"""Document loading for schema2dts.

This module reads schema documents from local files, glob patterns and
http(s) URLs and parses them as JSON or YAML. The generator receives the
parsed trees together with the URL they were fetched from, and uses the
same loader to fetch documents referenced by remote `$ref`s.
"""

import asyncio
import glob
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from schema2dts.codegen.utils import is_url
from schema2dts.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)

__all__ = ['DocumentLoader']

_GLOB_CHARACTERS = ('*', '?', '[')
_YAML_SUFFIXES = ('.yaml', '.yml')


class DocumentLoader:
    """Loads schema documents from URLs or file paths.

    Features:
        - Load from URLs (http/https) or local file paths
        - Expand glob patterns into sorted file lists
        - Support for both JSON and YAML formats
        - Concurrent loading of several sources

    Example:
        >>> loader = DocumentLoader()
        >>> inputs = asyncio.run(loader.load_inputs(['schemas/*.json']))
        >>> content = asyncio.run(loader.load('https://example.com/pet.json'))
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        base_path: str | Path | None = None,
    ):
        """Initialize the document loader.

        Args:
            http_client: Optional async HTTP client to use for URL requests.
                        If not provided, a client is created per request.
            timeout: Timeout in seconds for HTTP requests.
            base_path: Base path for resolving relative file paths.
                      Defaults to current working directory.
        """
        self._http_client = http_client
        self._timeout = timeout
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def expand_sources(self, sources: list[str]) -> list[str]:
        """Expand glob patterns; URLs and plain paths pass through.

        Raises:
            DocumentLoadError: If a glob pattern matches no file.
        """
        expanded: list[str] = []
        for source in sources:
            if is_url(source) or not any(c in source for c in _GLOB_CHARACTERS):
                expanded.append(source)
                continue
            pattern = source
            if not Path(source).is_absolute():
                pattern = str(self._base_path / source)
            matches = sorted(glob.glob(pattern, recursive=True))
            if not matches:
                raise DocumentLoadError(
                    source, cause=FileNotFoundError('pattern matched no files')
                )
            logger.debug(f'expanded {source} to {len(matches)} file(s)')
            expanded.extend(matches)
        return expanded

    async def load(self, source: str) -> Any:
        """Load and parse one document from a URL or file path.

        Args:
            source: URL or file path of the document.

        Returns:
            The parsed JSON/YAML tree.

        Raises:
            DocumentLoadError: If the document cannot be read or parsed.
        """
        try:
            if is_url(source):
                content = await self._load_from_url(source)
            else:
                content = self._load_from_file(source)
        except DocumentLoadError:
            raise
        except Exception as e:
            raise DocumentLoadError(source, cause=e)

        if content is None:
            raise DocumentLoadError(source, cause=ValueError('document is empty'))
        return content

    async def load_inputs(self, sources: list[str]) -> list[tuple[Any, str | None]]:
        """Load every source concurrently.

        Returns:
            `(content, source_url)` pairs in source order. `source_url` is
            the URL for remote documents and None for files, which are
            identified by their own ids.
        """
        expanded = self.expand_sources(sources)
        contents = await asyncio.gather(*(self.load(source) for source in expanded))
        return [
            (content, source if is_url(source) else None)
            for content, source in zip(contents, expanded)
        ]

    async def _load_from_url(self, url: str) -> Any:
        logger.debug(f'fetching {url}')
        try:
            if self._http_client:
                response = await self._http_client.get(url)
            else:
                async with httpx.AsyncClient(
                    follow_redirects=True, timeout=self._timeout
                ) as client:
                    response = await client.get(url)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')
            text = response.text

            if 'yaml' in content_type or url.endswith(_YAML_SUFFIXES):
                return yaml.safe_load(text)
            return json.loads(text)

        except httpx.HTTPError as e:
            raise DocumentLoadError(url, cause=e)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DocumentLoadError(url, cause=e)

    def _load_from_file(self, file_path: str) -> Any:
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_path / path

        if not path.exists():
            raise DocumentLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            text = path.read_text(encoding='utf-8')
            if path.suffix.lower() in _YAML_SUFFIXES:
                return yaml.safe_load(text)
            return json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DocumentLoadError(str(file_path), cause=e)
        except OSError as e:
            raise DocumentLoadError(str(file_path), cause=e)
