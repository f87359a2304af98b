from __future__ import annotations

import json
import logging
from pathlib import Path

_LOGGER = logging.getLogger(__name__)


def _read_manifest_version() -> str:
    try:
        manifest_path = Path(__file__).with_name("manifest.json")
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
        version = str(data.get("version") or "").strip()
        return version or "0.0.0"
    except (OSError, ValueError):
        _LOGGER.warning("Could not read program builder manifest version")
        return "0.0.0"


BACKEND_VERSION = _read_manifest_version()
