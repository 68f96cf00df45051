"""Pytest fixtures for the page build tests."""
import os

import pytest

import asset_inliner.logging as build_logging
from asset_inliner.config import DEFAULT_ASSETS, load_config

PAYLOADS = {
    'core': "/* mojs core */ window.mojs = {version: '1.7.1'};",
    'player': "/* mojs player */ window.MojsPlayer = function () {};",
    'curve_editor': "/* curve editor */ window.MojsCurveEditor = function () {};",
}


def make_template(assets=DEFAULT_ASSETS) -> str:
    """HTML shell with one marker per asset."""
    markers = "\n    ".join(a.marker for a in assets)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        "    <meta charset=\"utf-8\">\n"
        "    <title>Fan Curve</title>\n"
        f"    {markers}\n"
        "</head>\n"
        "<body><div id=\"app\"></div></body>\n"
        "</html>\n"
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep INLINER_* settings (including ones loaded from .env) out of tests."""
    for key in list(os.environ):
        if key.startswith('INLINER_'):
            monkeypatch.delenv(key)
    build_logging.reset_logging()
    yield
    for key in list(os.environ):
        if key.startswith('INLINER_'):
            del os.environ[key]
    build_logging.reset_logging()


@pytest.fixture
def project(tmp_path):
    """Project tree with the three bundles and the HTML shell."""
    for asset in DEFAULT_ASSETS:
        path = tmp_path / asset.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(PAYLOADS[asset.name], encoding='utf-8')
    (tmp_path / 'index.html').write_text(make_template(), encoding='utf-8')
    return tmp_path


@pytest.fixture
def config(project):
    """Default configuration rooted at the project fixture."""
    return load_config(root=project)


@pytest.fixture
def payloads():
    """Bundle sources written by the project fixture, keyed by asset name."""
    return dict(PAYLOADS)


@pytest.fixture
def template():
    """HTML shell containing the three default markers once each."""
    return make_template()
