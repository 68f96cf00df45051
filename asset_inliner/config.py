"""
Pydantic v2 models for the build configuration.

The asset table (name, bundle path, CDN URL, template marker) drives the
whole build. It ships with the three mojs bundles the curve editor uses and
can be replaced by a build.yaml file:

    template: index.html
    dist_dir: dist
    docs_dir: docs
    compression: gzip
    firmware_asset: esp32/src/assets/index.html.gz
    assets:
      - name: core
        path: node_modules/@mojs/core/dist/mo.umd.js
        cdn_url: https://cdn.jsdelivr.net/npm/@mojs/core
        marker: '<script id="allape_dev_id_core" src="..."></script>'

Environment overrides (read from .env in the project root):
    INLINER_COMPRESSION=deflate
    INLINER_COMPRESS_LEVEL=6
    INLINER_FIRMWARE_ASSET=           # empty disables the firmware copy
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from asset_inliner.errors import ConfigError
from asset_inliner.logging import get_logger, load_env_config

log = get_logger('config')

CONFIG_FILENAME = 'build.yaml'

CompressionFormat = Literal['gzip', 'deflate']


class BuildMode(str, Enum):
    """Which flavour of index.html to produce."""
    DOCS = 'docs'   # published: CDN references, no compression
    DIST = 'dist'   # local/distributable: inlined bundles, compressed copy

    @classmethod
    def from_flag(cls, docs: bool) -> 'BuildMode':
        return cls.DOCS if docs else cls.DIST


class AssetSpec(BaseModel):
    """One pre-built script bundle and where it goes in the template."""
    model_config = {"frozen": True}

    name: str = Field(min_length=1, description="Asset name, e.g. 'core'")
    path: Path = Field(description="Bundle path, relative to the project root")
    cdn_url: str = Field(min_length=1, description="Hosted copy used in docs mode")
    marker: str = Field(min_length=1, description="Exact template text to replace")


DEFAULT_ASSETS: List[AssetSpec] = [
    AssetSpec(
        name='core',
        path=Path('node_modules/@mojs/core/dist/mo.umd.js'),
        cdn_url='https://cdn.jsdelivr.net/npm/@mojs/core',
        marker='<script id="allape_dev_id_core" src="node_modules/@mojs/core/dist/mo.umd.js"></script>',
    ),
    AssetSpec(
        name='player',
        path=Path('node_modules/@mojs/player/build/mojs-player.min.js'),
        cdn_url='https://cdn.jsdelivr.net/npm/@mojs/player',
        marker='<script id="allape_dev_id_player" src="node_modules/@mojs/player/build/mojs-player.js"></script>',
    ),
    AssetSpec(
        name='curve_editor',
        path=Path('node_modules/@mojs/curve-editor/app/build/mojs-curve-editor.min.js'),
        cdn_url='https://cdn.jsdelivr.net/npm/@mojs/curve-editor',
        marker=(
            '<script id="allape_dev_id_curve_editor" '
            'src="node_modules/@mojs/curve-editor/app/build/mojs-curve-editor.js"></script>'
        ),
    ),
]


class BuildConfig(BaseModel):
    """
    Complete description of one build.

    Relative paths resolve against ``root``. ``firmware_asset`` is the
    ESP32 web-server copy of the compressed page; None skips that step.
    """
    model_config = {"frozen": True}

    root: Path = Field(default_factory=Path.cwd)
    template: Path = Path('index.html')
    dist_dir: Path = Path('dist')
    docs_dir: Path = Path('docs')
    output_name: str = Field(default='index.html', min_length=1)
    assets: List[AssetSpec] = Field(default_factory=lambda: list(DEFAULT_ASSETS), min_length=1)
    compression: CompressionFormat = 'gzip'
    compress_level: int = Field(default=9, ge=1, le=9)
    firmware_asset: Optional[Path] = Path('esp32/src/assets/index.html.gz')

    @field_validator('assets')
    @classmethod
    def _unique_assets(cls, assets: List[AssetSpec]) -> List[AssetSpec]:
        names = [a.name for a in assets]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"duplicate asset names: {', '.join(dupes)}")
        markers = [a.marker for a in assets]
        if len(set(markers)) != len(markers):
            raise ValueError("each asset needs its own marker")
        return assets

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the project root."""
        return path if path.is_absolute() else self.root / path

    @property
    def template_path(self) -> Path:
        return self.resolve(self.template)

    @property
    def firmware_path(self) -> Optional[Path]:
        if self.firmware_asset is None:
            return None
        return self.resolve(self.firmware_asset)

    def asset_path(self, asset: AssetSpec) -> Path:
        return self.resolve(asset.path)

    def output_dir(self, mode: BuildMode) -> Path:
        """Target directory for the given mode (docs/ or dist/)."""
        return self.resolve(self.docs_dir if mode is BuildMode.DOCS else self.dist_dir)


def _env_overrides(root: Path) -> Dict[str, Any]:
    """Collect INLINER_* overrides from the environment and root/.env."""
    load_dotenv(root / '.env')
    load_env_config()

    overrides: Dict[str, Any] = {}
    compression = os.getenv('INLINER_COMPRESSION')
    if compression:
        overrides['compression'] = compression.strip().lower()
    level = os.getenv('INLINER_COMPRESS_LEVEL')
    if level:
        overrides['compress_level'] = level.strip()
    if 'INLINER_FIRMWARE_ASSET' in os.environ:
        firmware = os.environ['INLINER_FIRMWARE_ASSET'].strip()
        overrides['firmware_asset'] = firmware or None
    return overrides


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}", path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config {path}: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}", path)
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    root: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> BuildConfig:
    """
    Load and validate the build configuration.

    Args:
        path: YAML config file. Defaults to <root>/build.yaml when present,
            otherwise the built-in mojs asset table is used.
        root: Project root. Defaults to the config file's directory, or the
            current directory.
        **overrides: Field values that win over file and environment
            (None values are ignored).

    Returns:
        Validated BuildConfig

    Raises:
        ConfigError: If the file is unreadable or fails validation
    """
    data: Dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        data = _read_yaml(path)
        base = Path(root) if root is not None else path.resolve().parent
        log.debug("Loaded config from %s", path)
    else:
        base = Path(root) if root is not None else Path.cwd()
        default_file = base / CONFIG_FILENAME
        if default_file.exists():
            path = default_file
            data = _read_yaml(default_file)
            log.debug("Loaded config from %s", default_file)
        else:
            log.debug("No %s in %s, using built-in asset table", CONFIG_FILENAME, base)

    if 'root' in data:
        if not isinstance(data['root'], str) or not data['root'].strip():
            raise ConfigError(f"'root' must be a non-empty path string ({path})", path)
        configured_root = Path(data['root'])
        data['root'] = configured_root if configured_root.is_absolute() else base / configured_root
    else:
        data['root'] = base

    data.update(_env_overrides(data['root']))
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BuildConfig.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        where = path if path is not None else base
        raise ConfigError(f"Invalid build configuration ({where}): {'; '.join(errors)}",
                          path, errors) from e
