"""Analyzer implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from .api_calls import ApiCallAnalyzer
from .base import AnalysisContext, Analyzer, FileAnalyzer, PatternRule
from .components import ComponentAnalyzer
from .dependencies import DependencyAnalyzer
from .hooks import HookAnalyzer
from .project import ProjectAnalyzer, StructureAnalyzer
from .routes import RouteAnalyzer
from .schema import SchemaAnalyzer
from .styling import StylingAnalyzer

_ENTRY_POINT_GROUP = "webmap.analyzers"

_BUILTIN_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    ProjectAnalyzer.name: ProjectAnalyzer,
    ComponentAnalyzer.name: ComponentAnalyzer,
    RouteAnalyzer.name: RouteAnalyzer,
    DependencyAnalyzer.name: DependencyAnalyzer,
    StylingAnalyzer.name: StylingAnalyzer,
    HookAnalyzer.name: HookAnalyzer,
    ApiCallAnalyzer.name: ApiCallAnalyzer,
    SchemaAnalyzer.name: SchemaAnalyzer,
}

OPERATION_NAMES: tuple[str, ...] = tuple(_BUILTIN_FACTORIES)


def discover_analyzers(enabled: Sequence[str] | None = None) -> List[Analyzer]:
    """Return instantiated analyzers, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    analyzers: List[Analyzer] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Analyzer]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, Analyzer):
            raise TypeError(f"Analyzer factory for '{name}' did not return an Analyzer instance")
        analyzers.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken third-party plugin
            raise RuntimeError(f"Failed to load analyzer entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Analyzer:
            return _coerce_analyzer(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown analyzers requested: {missing}")

    return analyzers


def _coerce_analyzer(obj: object) -> Analyzer:
    if isinstance(obj, Analyzer):
        return obj
    if isinstance(obj, type) and issubclass(obj, Analyzer):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Analyzer):
            return instance
    raise TypeError("Analyzer entry point must be an Analyzer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "AnalysisContext",
    "Analyzer",
    "ApiCallAnalyzer",
    "ComponentAnalyzer",
    "DependencyAnalyzer",
    "FileAnalyzer",
    "HookAnalyzer",
    "OPERATION_NAMES",
    "PatternRule",
    "ProjectAnalyzer",
    "RouteAnalyzer",
    "SchemaAnalyzer",
    "StructureAnalyzer",
    "StylingAnalyzer",
    "discover_analyzers",
]
