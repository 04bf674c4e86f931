"""package.json loading helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_MANIFEST
from .logging import get_logger
from .models import PackageManifest

_LOGGER = get_logger("manifest")


def load_package_json(root: Path, filename: str = DEFAULT_MANIFEST) -> Optional[Dict[str, Any]]:
    """Return the parsed manifest mapping, or None when absent or unparseable."""
    manifest_path = root / filename
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _LOGGER.debug("No %s found in %s", filename, root)
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _LOGGER.warning("Could not parse %s: %s", manifest_path, exc)
        return None
    if isinstance(data, dict):
        return data
    _LOGGER.warning("%s does not contain a JSON object", manifest_path)
    return None


def load_manifest(root: Path, filename: str = DEFAULT_MANIFEST) -> Optional[PackageManifest]:
    """Return a PackageManifest for ``root`` or None when no usable manifest exists."""
    data = load_package_json(root, filename)
    if data is None:
        return None

    return PackageManifest(
        name=_as_str(data.get("name")),
        version=_as_str(data.get("version")),
        dependencies=_as_str_mapping(data.get("dependencies")),
        dev_dependencies=_as_str_mapping(data.get("devDependencies")),
        raw=data,
    )


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _as_str_mapping(value: Any) -> Dict[str, str]:
    """Keep every declared name; non-string versions such as null become "" (undeclared)."""
    if not isinstance(value, dict):
        return {}
    return {
        str(key): version if isinstance(version, str) else ""
        for key, version in value.items()
    }


__all__ = ["load_manifest", "load_package_json"]
