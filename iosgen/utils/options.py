"""Default iOS package options derived from a web manifest.

derive_options is pure and never raises: every missing manifest field falls
back to a documented default. Colors are passed through unvalidated.
"""

import re
from typing import TypedDict
from urllib.parse import urljoin, urlsplit

from iosgen.manifest import Manifest, ManifestIcon

DEFAULT_APP_NAME = "My Awesome PWA"
DEFAULT_COLOR = "#FFFFFF"
PLACEHOLDER_ICON_URL = "/assets/icons/icon_512.png"
MIN_ICON_SIZE = 512

_SIZE_RE = re.compile(r"^(\d+)[xX](\d+)$")


class PackageOptions(TypedDict):
    app_name: str
    app_url: str
    icon_url: str
    splash_color: str
    status_bar_color: str
    progress_bar_color: str
    permitted_urls: list[str]  # URLs reachable outside the app scope, e.g. OAuth providers.


OPTION_KEYS = frozenset(PackageOptions.__annotations__)


def _is_absolute(url: str) -> bool:
    return bool(urlsplit(url).scheme)


def _origin(manifest: Manifest) -> str | None:
    """Scheme + host of the scope URL, else of the manifest URL."""
    for key in ("scope", "manifest_url"):
        value = manifest.get(key)
        if isinstance(value, str) and value:
            parts = urlsplit(value)
            if parts.scheme and parts.netloc:
                return f"{parts.scheme}://{parts.netloc}"
    return None


def _resolve(url: str, origin: str | None) -> str:
    if _is_absolute(url) or origin is None:
        return url
    return urljoin(origin + "/", url)


def _icon_dimensions(icon: ManifestIcon) -> list[tuple[int, int]]:
    sizes = icon.get("sizes")
    if isinstance(sizes, str):
        dims = []
        for token in sizes.split():
            match = _SIZE_RE.match(token)
            if match:
                dims.append((int(match.group(1)), int(match.group(2))))
        return dims
    hint = icon.get("size_hint")
    if isinstance(hint, int) and not isinstance(hint, bool):
        return [(hint, hint)]
    return []


def _is_png(icon: ManifestIcon) -> bool:
    icon_type = icon.get("type")
    if isinstance(icon_type, str) and icon_type:
        return icon_type.lower() == "image/png"
    return urlsplit(icon.get("src", "")).path.lower().endswith(".png")


def _pick_icon(icons: list[ManifestIcon]) -> ManifestIcon | None:
    """Largest PNG icon that is at least MIN_ICON_SIZE on both edges. First one wins ties."""
    best = None
    best_area = 0
    for icon in icons:
        if not isinstance(icon, dict) or not isinstance(icon.get("src"), str) or not icon["src"]:
            continue
        if not _is_png(icon):
            continue
        for width, height in _icon_dimensions(icon):
            if width >= MIN_ICON_SIZE and height >= MIN_ICON_SIZE and width * height > best_area:
                best, best_area = icon, width * height
    return best


def derive_options(manifest: Manifest) -> PackageOptions:
    """Map a manifest to the default options shown before generation.

    - app_name: manifest name, or DEFAULT_APP_NAME
    - app_url: start_url joined onto the manifest origin; absolute start_urls pass through
    - icon_url: largest >=512x512 PNG icon, or PLACEHOLDER_ICON_URL
    - splash/status bar: background_color; progress bar: theme_color (default white)
    """
    manifest = manifest or {}
    origin = _origin(manifest)

    start_url = manifest.get("start_url")
    if not isinstance(start_url, str) or not start_url:
        start_url = "/"
    app_url = _resolve(start_url, origin)

    icon = _pick_icon(manifest.get("icons") or [])
    icon_url = _resolve(icon["src"], origin) if icon else PLACEHOLDER_ICON_URL

    # Derived independently so they can diverge.
    splash_color = manifest.get("background_color") or DEFAULT_COLOR
    status_bar_color = manifest.get("background_color") or DEFAULT_COLOR

    return {
        "app_name": manifest.get("name") or DEFAULT_APP_NAME,
        "app_url": app_url,
        "icon_url": icon_url,
        "splash_color": splash_color,
        "status_bar_color": status_bar_color,
        "progress_bar_color": manifest.get("theme_color") or DEFAULT_COLOR,
        "permitted_urls": [],
    }


def apply_overrides(options: PackageOptions, overrides: dict) -> PackageOptions:
    """Return a copy of ``options`` with user-entered values applied.

    None and blank strings keep the derived default. Unknown keys raise ValueError.
    """
    unknown = set(overrides) - OPTION_KEYS
    if unknown:
        raise ValueError(f"Unknown package option(s): {sorted(unknown)}")

    merged = {**options, "permitted_urls": list(options["permitted_urls"])}
    for key, value in overrides.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if key == "permitted_urls":
            if isinstance(value, str):
                value = [u for u in re.split(r"[\s,]+", value) if u]
            merged[key] = list(value)
        else:
            merged[key] = value.strip() if isinstance(value, str) else value
    return merged
