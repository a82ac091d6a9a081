"""Web manifest shape consumed by option derivation.

Fetching and validating manifests is somebody else's job; these types only
describe the keys derive_options reads.
"""

import json
from pathlib import Path
from typing import TypedDict


class ManifestIcon(TypedDict, total=False):
    src: str
    sizes: str  # Space-separated "WxH" tokens, e.g. "192x192 512x512".
    type: str
    size_hint: int  # Square edge length; used when "sizes" is absent.


class Manifest(TypedDict, total=False):
    name: str
    start_url: str
    scope: str
    icons: list[ManifestIcon]
    background_color: str
    theme_color: str
    manifest_url: str  # Where the manifest was served from, if known.


def load_manifest(path: str | Path) -> Manifest:
    """Read a manifest JSON file. Raises ValueError if it is not a JSON object."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Manifest at {path} must be a JSON object.")
    return data
