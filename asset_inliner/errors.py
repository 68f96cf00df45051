"""Exceptions raised by the build pipeline.

Every error ends the run. ``step`` names the pipeline stage that failed so
the command line can report it.
"""

from pathlib import Path
from typing import List, Optional, Union


class BuildError(Exception):
    """Base class for build failures."""

    step = 'build'

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ConfigError(BuildError):
    """Raised when the build configuration can't be loaded or validated."""

    step = 'config'

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 errors: Optional[List[str]] = None):
        self.errors = errors or []
        super().__init__(message, path)


class InputReadError(BuildError):
    """Raised when the template or an asset bundle can't be read as UTF-8 text."""

    step = 'read'
    prefix = 'Cannot read input'

    def __init__(self, name: str, path: Union[str, Path], reason: Optional[str] = None):
        self.name = name
        message = f"{self.prefix} '{name}': {path}"
        super().__init__(f"{message} ({reason})" if reason else message, path)


class MissingInputError(InputReadError):
    """Raised when the template or an asset bundle is missing."""

    prefix = 'Missing input'


class RenderError(BuildError):
    """Raised when the template can't be rendered."""

    step = 'render'


class MarkerNotFoundError(RenderError):
    """Raised when a substitution marker is absent from the template."""

    def __init__(self, marker: str, asset: Optional[str] = None):
        self.marker = marker
        self.asset = asset
        where = f" for asset '{asset}'" if asset else ""
        super().__init__(f"Marker not found{where}: {marker!r}")


class CompressionError(BuildError):
    """Raised when the rendered document can't be compressed."""

    step = 'compress'


class OutputWriteError(BuildError):
    """Raised when an output file or directory can't be written."""

    step = 'write'


class OutputMismatchError(BuildError):
    """Raised in check mode when outputs on disk are stale."""

    step = 'check'

    def __init__(self, stale: List[Path]):
        self.stale = list(stale)
        names = ', '.join(str(p) for p in self.stale)
        super().__init__(f"Outputs out of date: {names}")
