"""File writing utilities for generated declarations."""

import logging
from pathlib import Path

from upath import UPath

from schema2dts.exceptions import OutputError

logger = logging.getLogger(__name__)

__all__ = ['DeclarationFileWriter']


class DeclarationFileWriter:
    """Writes declaration text to a local or remote path.

    Example:
        >>> writer = DeclarationFileWriter()
        >>> writer.write('declare type Id = string;\\n', 'types/schema.d.ts')
    """

    def write(self, content: str, path: UPath | Path | str) -> UPath:
        """Write `content` to `path`, creating parent directories.

        Returns:
            The path that was written.

        Raises:
            OutputError: If the file cannot be written.
        """
        path = UPath(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(path), cause=e)
        logger.debug(f'wrote {len(content)} characters to {path}')
        return path
