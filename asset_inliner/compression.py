"""Compression of the rendered page.

Two on-disk formats are supported and they are NOT interchangeable:

- gzip:    gzip container (header + CRC). The ESP32 firmware serves this
           file as-is with ``Content-Encoding: gzip``.
- deflate: raw deflate stream, no zlib or gzip header.

gzip output uses a fixed mtime so unchanged inputs give identical bytes.
"""

import gzip
import zlib

from asset_inliner.errors import CompressionError

FORMATS = ('gzip', 'deflate')

# Negative wbits selects a raw deflate stream
_RAW_DEFLATE_WBITS = -zlib.MAX_WBITS


def compress(data: bytes, fmt: str = 'gzip', level: int = 9) -> bytes:
    """Compress ``data`` in the given format."""
    if fmt not in FORMATS:
        raise CompressionError(f"Unknown compression format: {fmt!r}")

    try:
        if fmt == 'gzip':
            return gzip.compress(data, compresslevel=level, mtime=0)
        compressor = zlib.compressobj(level, zlib.DEFLATED, _RAW_DEFLATE_WBITS)
        return compressor.compress(data) + compressor.flush()
    except (zlib.error, ValueError, TypeError) as e:
        raise CompressionError(f"{fmt} compression failed: {e}") from e


def decompress(data: bytes, fmt: str = 'gzip') -> bytes:
    """Inverse of compress()."""
    if fmt not in FORMATS:
        raise CompressionError(f"Unknown compression format: {fmt!r}")

    try:
        if fmt == 'gzip':
            return gzip.decompress(data)
        return zlib.decompress(data, _RAW_DEFLATE_WBITS)
    except (OSError, EOFError, zlib.error) as e:
        raise CompressionError(f"{fmt} decompression failed: {e}") from e
