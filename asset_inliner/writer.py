"""Writes the rendered page (and its compressed copies) to disk."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from asset_inliner.compression import compress
from asset_inliner.config import BuildConfig, BuildMode
from asset_inliner.errors import OutputWriteError
from asset_inliner.logging import get_logger

log = get_logger('writer')

GZ_SUFFIX = '.gz'


@dataclass
class RenderedOutputs:
    """Bytes destined for each output file, computed before any write."""
    document: bytes
    compressed: Optional[bytes] = None
    files: List[Path] = field(default_factory=list)


def _write_bytes(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise OutputWriteError(f"Could not write {path}: {e}", path) from e


class OutputWriter:
    """
    Writes index.html and, in dist mode, its compressed sibling.

    Compression happens in memory before anything touches the disk, so a
    compression failure leaves no partial output behind.

    Args:
        config: Build configuration (compression format/level, firmware path)
        publish_firmware: Copy the compressed page to the firmware asset path
    """

    def __init__(self, config: BuildConfig, publish_firmware: bool = True):
        self.config = config
        self.publish_firmware = publish_firmware and config.firmware_path is not None

    @property
    def compressed_name(self) -> str:
        return self.config.output_name + GZ_SUFFIX

    def prepare(self, target_dir: Path, document: str, mode: BuildMode) -> RenderedOutputs:
        """Encode (and compress) the document and list the files it maps to."""
        target_dir = Path(target_dir)
        outputs = RenderedOutputs(document=document.encode('utf-8'))
        outputs.files.append(target_dir / self.config.output_name)

        if mode is BuildMode.DIST:
            outputs.compressed = compress(
                outputs.document,
                self.config.compression,
                self.config.compress_level,
            )
            outputs.files.append(target_dir / self.compressed_name)
            if self.publish_firmware:
                outputs.files.append(self.config.firmware_path)

        return outputs

    def write(self, target_dir: Path, document: str, mode: BuildMode) -> List[Path]:
        """
        Write the document to ``target_dir``.

        Returns:
            Paths written, in order

        Raises:
            CompressionError: If compression fails (nothing is written)
            OutputWriteError: If a file can't be written
        """
        target_dir = Path(target_dir)
        outputs = self.prepare(target_dir, document, mode)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(f"Could not create {target_dir}: {e}", target_dir) from e

        written = []
        index_path = target_dir / self.config.output_name
        _write_bytes(index_path, outputs.document)
        written.append(index_path)
        log.info("Wrote %s (%d bytes)", index_path, len(outputs.document))

        if outputs.compressed is not None:
            gz_path = target_dir / self.compressed_name
            _write_bytes(gz_path, outputs.compressed)
            written.append(gz_path)
            log.info("Wrote %s (%d bytes, %s)", gz_path, len(outputs.compressed),
                     self.config.compression)

            if self.publish_firmware:
                written.append(self.publish_firmware_asset(outputs.compressed))

        return written

    def publish_firmware_asset(self, compressed: bytes) -> Path:
        """Copy the compressed page to the ESP32 firmware's asset path.

        The firmware embeds this file and serves it with
        ``Content-Encoding: gzip``.
        """
        path = self.config.firmware_path
        if path is None:
            raise OutputWriteError("No firmware asset path configured")
        if self.config.compression != 'gzip':
            log.warning("Firmware serves gzip but the build is using %s",
                        self.config.compression)
        _write_bytes(path, compressed)
        log.info("Published firmware asset %s", path)
        return path
