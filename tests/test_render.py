"""
Render Tests

Tests for marker lookup and docs/dist substitution of the mojs bundles.

Run with: pytest tests/test_render.py -v
"""

from pathlib import Path

import pytest

from asset_inliner.config import DEFAULT_ASSETS, AssetSpec, BuildMode
from asset_inliner.errors import MarkerNotFoundError, RenderError
from asset_inliner.render import find_marker, render, replace_first, script_tag

CDN_URLS = [a.cdn_url for a in DEFAULT_ASSETS]


def single_asset(marker="<script id=X></script>", name="core"):
    return AssetSpec(
        name=name,
        path=Path("core.js"),
        cdn_url="https://cdn.jsdelivr.net/npm/@mojs/core",
        marker=marker,
    )


class TestFindMarker:
    """Test find-or-fail marker lookup."""

    def test_returns_first_index(self):
        assert find_marker("abcXdefX", "X") == 3

    def test_marker_at_start(self):
        assert find_marker("X...", "X") == 0

    def test_missing_marker_raises(self):
        with pytest.raises(MarkerNotFoundError, match="Marker not found for asset 'core'"):
            find_marker("<html></html>", "<script id=X></script>", asset="core")

    def test_missing_marker_error_fields(self):
        with pytest.raises(MarkerNotFoundError) as exc_info:
            find_marker("nothing here", "MARK", asset="player")
        assert exc_info.value.marker == "MARK"
        assert exc_info.value.asset == "player"
        assert exc_info.value.step == "render"

    def test_empty_marker_rejected(self):
        with pytest.raises(RenderError):
            find_marker("abc", "")


class TestReplaceFirst:
    """Test positional single replacement."""

    def test_replaces_only_first_occurrence(self):
        assert replace_first("a-M-b-M-c", "M", "Z") == "a-Z-b-M-c"

    def test_surrounding_text_untouched(self):
        assert replace_first("<head>MARK</head>", "MARK", "<script></script>") == \
            "<head><script></script></head>"

    def test_missing_marker_does_not_splice(self):
        """A missing marker raises instead of producing a shifted splice."""
        with pytest.raises(MarkerNotFoundError):
            replace_first("<html></html>", "MARK", "<script></script>")


class TestScriptTag:
    """Test replacement text for each mode."""

    def test_docs_mode_references_cdn(self):
        tag = script_tag(single_asset(), BuildMode.DOCS)
        assert tag == '<script src="https://cdn.jsdelivr.net/npm/@mojs/core"></script>'

    def test_docs_mode_ignores_payload(self):
        tag = script_tag(single_asset(), BuildMode.DOCS, payload="console.log(1)")
        assert "console.log" not in tag

    def test_dist_mode_inlines_payload(self):
        assert script_tag(single_asset(), BuildMode.DIST, "console.log(1)") == \
            "<script>console.log(1)</script>"

    def test_dist_mode_requires_payload(self):
        with pytest.raises(RenderError, match="No payload"):
            script_tag(single_asset(), BuildMode.DIST)


class TestRenderScenarios:
    """Single-marker scenarios."""

    def test_local_mode_inlines_payload(self):
        out = render("<script id=X></script>", {"core": "console.log(1)"},
                     BuildMode.DIST, [single_asset()])
        assert out == "<script>console.log(1)</script>"

    def test_docs_mode_emits_cdn_reference(self):
        out = render("<script id=X></script>", {"core": "console.log(1)"},
                     BuildMode.DOCS, [single_asset()])
        assert '<script src="https://cdn.jsdelivr.net/npm/@mojs/core"></script>' in out

    def test_marker_absent_fails(self):
        with pytest.raises(MarkerNotFoundError):
            render("<html></html>", {"core": "console.log(1)"},
                   BuildMode.DIST, [single_asset()])

    def test_duplicate_marker_uses_first(self):
        template = "<script id=X></script>|<script id=X></script>"
        out = render(template, {"core": "1"}, BuildMode.DIST, [single_asset()])
        assert out == "<script>1</script>|<script id=X></script>"


class TestRenderDefaultAssets:
    """Rendering the three mojs bundles into the HTML shell."""

    def test_dist_inlines_every_payload(self, template, payloads):
        out = render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)
        for name, source in payloads.items():
            assert f"<script>{source}</script>" in out

    def test_dist_has_no_cdn_urls(self, template, payloads):
        out = render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)
        for url in CDN_URLS:
            assert url not in out

    def test_docs_has_only_cdn_urls(self, template, payloads):
        out = render(template, payloads, BuildMode.DOCS, DEFAULT_ASSETS)
        for url in CDN_URLS:
            assert f'<script src="{url}"></script>' in out
        for source in payloads.values():
            assert source not in out

    def test_markers_removed(self, template, payloads):
        for mode in BuildMode:
            out = render(template, payloads, mode, DEFAULT_ASSETS)
            for asset in DEFAULT_ASSETS:
                assert asset.marker not in out

    def test_text_outside_markers_unchanged(self, template, payloads):
        out = render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)
        expected = template
        for asset in DEFAULT_ASSETS:
            expected = expected.replace(asset.marker, f"<script>{payloads[asset.name]}</script>")
        assert out == expected

    def test_template_order_preserved(self, template, payloads):
        out = render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)
        positions = [out.index(payloads[a.name]) for a in DEFAULT_ASSETS]
        assert positions == sorted(positions)

    def test_docs_mode_needs_no_payloads(self, template):
        out = render(template, {}, BuildMode.DOCS, DEFAULT_ASSETS)
        assert DEFAULT_ASSETS[0].cdn_url in out

    def test_missing_payload_raises(self, template, payloads):
        del payloads['player']
        with pytest.raises(RenderError, match="player"):
            render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)

    def test_payload_containing_later_marker_is_not_substituted(self, template, payloads):
        """Marker text inside an inlined bundle is left alone."""
        player_marker = DEFAULT_ASSETS[1].marker
        payloads['core'] = f"var html = '{player_marker}';"
        out = render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)
        assert f"<script>var html = '{player_marker}';</script>" in out
        assert out.count(f"<script>{payloads['player']}</script>") == 1

    def test_missing_one_marker_names_asset(self, payloads):
        template = "<html>" + DEFAULT_ASSETS[0].marker + DEFAULT_ASSETS[2].marker + "</html>"
        with pytest.raises(MarkerNotFoundError, match="player"):
            render(template, payloads, BuildMode.DIST, DEFAULT_ASSETS)

    def test_overlapping_markers_rejected(self):
        specs = [single_asset(marker="<a><b>", name="a"), single_asset(marker="<b></b>", name="b")]
        with pytest.raises(RenderError, match="overlap"):
            render("<a><b></b>", {"a": "1", "b": "2"}, BuildMode.DIST, specs)
