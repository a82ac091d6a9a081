"""Entry point: show default package options or run a generation request."""

import json
import sys

from iosgen.graph import GenerationRequestAction
from iosgen.manifest import load_manifest
from iosgen.utils.options import apply_overrides, derive_options

USAGE = """\
Usage:
  iosgen options <manifest.json> [key=value ...]
  iosgen generate <request-id>"""


def _parse_overrides(pairs: list[str]) -> dict:
    """Turn ``key=value`` arguments into an overrides dict."""
    overrides = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got '{pair}'.")
        overrides[key.strip()] = value
    return overrides


def show_options(manifest_path: str, pairs: list[str]) -> int:
    options = derive_options(load_manifest(manifest_path))
    options = apply_overrides(options, _parse_overrides(pairs))
    print(json.dumps(options, indent=2))
    return 0


def generate(raw_id: str) -> int:
    # Non-numeric ids are passed through so the flow reports them as invalid.
    try:
        request_id = int(raw_id)
    except ValueError:
        request_id = None
    state = GenerationRequestAction().generate(request_id)
    print(json.dumps(state, indent=2))
    if state["error"]:
        print(f"[iosgen] Generation failed: {state['error']}", file=sys.stderr)
        return 1
    print(f"[iosgen] Archive ready: {state['archive_ref']}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = list(sys.argv[1:] if argv is None else argv)

    if len(args) >= 2 and args[0] == "options":
        try:
            return show_options(args[1], args[2:])
        except (OSError, ValueError) as exc:
            print(f"[iosgen] {exc}", file=sys.stderr)
            return 2

    if len(args) == 2 and args[0] == "generate":
        return generate(args[1])

    print(USAGE, file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())
