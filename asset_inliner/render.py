"""
Template rendering: swap each asset marker for a script tag.

In docs mode a marker becomes a CDN reference:
    <script src="https://cdn.jsdelivr.net/npm/@mojs/core"></script>

In dist mode it becomes the bundle itself:
    <script>...bundle source...</script>

Markers are located in the untouched template first and spliced in one
pass, so bundle text can never be mistaken for a later marker.

Usage:
    from asset_inliner.render import render

    html = render(template, {'core': core_js, ...}, BuildMode.DIST, config.assets)
"""

from typing import List, Mapping, Optional, Sequence, Tuple

from asset_inliner.config import AssetSpec, BuildMode
from asset_inliner.errors import MarkerNotFoundError, RenderError
from asset_inliner.logging import get_logger

log = get_logger('render')


def find_marker(document: str, marker: str, asset: Optional[str] = None) -> int:
    """Index of the first occurrence of ``marker``.

    Raises:
        MarkerNotFoundError: If the marker is not in the document
    """
    if not marker:
        raise RenderError("Empty marker" + (f" for asset '{asset}'" if asset else ""))
    index = document.find(marker)
    if index < 0:
        raise MarkerNotFoundError(marker, asset)
    return index


def replace_first(document: str, marker: str, replacement: str,
                  asset: Optional[str] = None) -> str:
    """Replace the first occurrence of ``marker`` only."""
    start = find_marker(document, marker, asset)
    return document[:start] + replacement + document[start + len(marker):]


def script_tag(spec: AssetSpec, mode: BuildMode, payload: Optional[str] = None) -> str:
    """Replacement text for one asset."""
    if mode is BuildMode.DOCS:
        return f'<script src="{spec.cdn_url}"></script>'
    if payload is None:
        raise RenderError(f"No payload for asset '{spec.name}'")
    return f'<script>{payload}</script>'


def _locate(template: str, specs: Sequence[AssetSpec]) -> List[Tuple[int, AssetSpec]]:
    spans = sorted(
        ((find_marker(template, spec.marker, spec.name), spec) for spec in specs),
        key=lambda item: item[0],
    )
    for (start, spec), (next_start, next_spec) in zip(spans, spans[1:]):
        if start + len(spec.marker) > next_start:
            raise RenderError(
                f"Markers for '{spec.name}' and '{next_spec.name}' overlap in the template"
            )
    return spans


def render(template: str, assets: Mapping[str, str], mode: BuildMode,
           specs: Sequence[AssetSpec]) -> str:
    """
    Substitute every configured asset into the template.

    Args:
        template: HTML shell containing each asset's marker
        assets: Asset name -> bundle source (unused in docs mode)
        mode: DOCS for CDN references, DIST for inlined bundles
        specs: Asset table, in substitution order

    Returns:
        The rendered document. Text outside the markers is unchanged.

    Raises:
        MarkerNotFoundError: If any marker is missing from the template
        RenderError: If a payload is missing or markers overlap
    """
    if mode is BuildMode.DIST:
        missing = [spec.name for spec in specs if spec.name not in assets]
        if missing:
            raise RenderError(f"No payload for asset(s): {', '.join(missing)}")

    spans = _locate(template, specs)

    parts = []
    cursor = 0
    for start, spec in spans:
        parts.append(template[cursor:start])
        parts.append(script_tag(spec, mode, assets.get(spec.name)))
        cursor = start + len(spec.marker)
        log.debug("Substituted %s (%s)", spec.name, mode.value)
    parts.append(template[cursor:])

    return ''.join(parts)
