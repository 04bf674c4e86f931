"""Configuration loading for webmap (.webmap.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .logging import get_logger

CONFIG_FILENAME = ".webmap.yml"

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = ("node_modules", "dist", "build", ".git")
DEFAULT_READ_CONCURRENCY = 8
DEFAULT_MANIFEST = "package.json"


_LOGGER = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class Limits:
    """Output caps applied by the aggregators.

    ``*_files`` limits bound how many enumerated files are read; the others bound
    list lengths in the returned reports.
    """

    component_files: int = 20
    routes: int = 20
    styling_files: int = 50
    top_classes: int = 30
    class_bucket: int = 10
    class_file_usage: int = 10
    classes_per_file: int = 10
    hook_files: int = 50
    top_hooks: int = 20
    hook_file_usage: int = 15
    api_files: int = 50
    api_calls: int = 20
    schema_tables: int = 20
    schema_types: int = 20
    schema_functions: int = 10
    schema_policies: int = 10
    schema_relationships: int = 10
    supabase_files: int = 30
    supabase_usage: int = 15
    definition_preview: int = 200
    structure_files: int = 100


@dataclass
class ScanConfig:
    """File enumeration and loading settings."""

    exclude_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    include_dotfiles: bool = False
    read_concurrency: int = DEFAULT_READ_CONCURRENCY


@dataclass
class AnalyzerConfig:
    """Analyzer enablement."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class WebmapConfig:
    """Represents the settings defined in .webmap.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    analyzers: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    limits: Limits = field(default_factory=Limits)
    manifest: str = DEFAULT_MANIFEST


def load_config(config_path: Path) -> WebmapConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    try:
        config_file = _resolve_config_path(config_path)
        present = config_file.is_file()
    except OSError as exc:
        # An unreadable project root is reported by the scanner, not here.
        _LOGGER.debug("Cannot inspect %s: %s", config_path, exc)
        return WebmapConfig(root=_fallback_root(config_path))
    root = config_file.parent.resolve()

    if not present:
        return WebmapConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        if "exclude_dirs" in scan_data:
            scan.exclude_dirs = _as_str_list(scan_data.get("exclude_dirs"))
        include_dotfiles = _as_bool(scan_data.get("include_dotfiles"))
        if include_dotfiles is not None:
            scan.include_dotfiles = include_dotfiles
        concurrency = _as_int(scan_data.get("read_concurrency"))
        if concurrency is not None and concurrency > 0:
            scan.read_concurrency = concurrency

    analyzers = AnalyzerConfig()
    analyzer_data = _as_dict(data.get("analyzers"))
    if analyzer_data:
        analyzers.enabled = _as_str_list(analyzer_data.get("enabled"))

    limits = _parse_limits(_as_dict(data.get("limits")))
    manifest = _as_str(data.get("manifest")) or DEFAULT_MANIFEST

    return WebmapConfig(
        root=root,
        scan=scan,
        analyzers=analyzers,
        limits=limits,
        manifest=manifest,
    )


def _parse_limits(data: Dict[str, Any]) -> Limits:
    overrides: Dict[str, int] = {}
    known = {item.name for item in fields(Limits)}
    for key, value in data.items():
        if key not in known:
            continue
        number = _as_int(value)
        if number is not None and number >= 0:
            overrides[key] = number
    return replace(Limits(), **overrides)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _fallback_root(config_path: Path) -> Path:
    config_path = config_path.expanduser().absolute()
    return config_path.parent if config_path.name == CONFIG_FILENAME else config_path


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalyzerConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_EXCLUDE_DIRS",
    "Limits",
    "ScanConfig",
    "WebmapConfig",
    "load_config",
]
