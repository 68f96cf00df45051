"""
asset-inliner

Builds the curve editor's single-file index.html from its HTML shell and the
pre-built mojs bundles, either inlined (dist) or as CDN references (docs).

Logging goes through asset_inliner.logging.get_logger().
"""
