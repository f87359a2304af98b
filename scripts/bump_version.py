#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path

MANIFEST_PATH = Path("custom_components/program_builder/manifest.json")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Set the Program Builder manifest version.")
    p.add_argument("--version", required=True, help="New version, e.g. 0.1.1")
    p.add_argument("--manifest", default=str(MANIFEST_PATH), help="Path to manifest.json")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    version = str(args.version).strip()
    if not version or "." not in version:
        raise SystemExit("Invalid --version")

    manifest_path = Path(args.manifest)
    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    previous = manifest.get("version")
    manifest["version"] = version
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    print(f"Updated {manifest_path} version {previous} -> {version}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
