"""
Build pipeline: read inputs, render, then write (or verify) the outputs.

Usage:
    from asset_inliner.build import run_build
    from asset_inliner.config import BuildMode, load_config

    result = run_build(load_config(), BuildMode.DIST)
    print(result.written)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from asset_inliner.config import BuildConfig, BuildMode
from asset_inliner.errors import InputReadError, MissingInputError, OutputMismatchError
from asset_inliner.logging import get_logger
from asset_inliner.render import render
from asset_inliner.writer import OutputWriter

log = get_logger('build')


@dataclass
class BuildInputs:
    """Template and bundle sources for one run."""
    template: str
    payloads: Dict[str, str] = field(default_factory=dict)


@dataclass
class BuildResult:
    """What a build produced."""
    mode: BuildMode
    output_dir: Path
    document: str
    written: List[Path] = field(default_factory=list)
    checked: bool = False


def _read_text(name: str, path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except (FileNotFoundError, IsADirectoryError) as e:
        raise MissingInputError(name, path) from e
    except UnicodeDecodeError as e:
        raise InputReadError(name, path, "not valid UTF-8") from e
    except OSError as e:
        raise InputReadError(name, path, e.strerror or str(e)) from e


def read_inputs(config: BuildConfig) -> BuildInputs:
    """Read every bundle and the template.

    Raises:
        MissingInputError: Naming the first input that is absent
        InputReadError: If an input exists but can't be read as UTF-8
    """
    payloads = {}
    for asset in config.assets:
        path = config.asset_path(asset)
        payloads[asset.name] = _read_text(asset.name, path)
        log.debug("Read %s from %s (%d chars)", asset.name, path, len(payloads[asset.name]))

    template = _read_text('template', config.template_path)
    log.debug("Read template %s", config.template_path)
    return BuildInputs(template=template, payloads=payloads)


def _stale_outputs(files: List[Path], expected: List[bytes]) -> List[Path]:
    stale = []
    for path, data in zip(files, expected):
        if not path.exists() or path.read_bytes() != data:
            stale.append(path)
    return stale


def run_build(
    config: BuildConfig,
    mode: BuildMode,
    check: bool = False,
    publish_firmware: bool = True,
    inputs: Optional[BuildInputs] = None,
) -> BuildResult:
    """
    Run one build.

    Args:
        config: Build configuration
        mode: DOCS or DIST
        check: Compare against existing outputs instead of writing
        publish_firmware: Include the firmware asset copy (dist mode only)
        inputs: Pre-read inputs (read from disk when None)

    Returns:
        BuildResult with the rendered document and the files written

    Raises:
        BuildError: On any failure; nothing is retried
    """
    if inputs is None:
        inputs = read_inputs(config)

    document = render(inputs.template, inputs.payloads, mode, config.assets)

    output_dir = config.output_dir(mode)
    writer = OutputWriter(config, publish_firmware=publish_firmware)
    result = BuildResult(mode=mode, output_dir=output_dir, document=document)

    if check:
        outputs = writer.prepare(output_dir, document, mode)
        expected = [outputs.document]
        if outputs.compressed is not None:
            expected += [outputs.compressed] * (len(outputs.files) - 1)
        stale = _stale_outputs(outputs.files, expected)
        if stale:
            raise OutputMismatchError(stale)
        result.checked = True
        log.info("OK: %d output(s) up to date", len(outputs.files))
        return result

    result.written = writer.write(output_dir, document, mode)
    return result
