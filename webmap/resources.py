"""Read-only ``project://`` resource views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from .analyzers import ComponentAnalyzer, RouteAnalyzer, StructureAnalyzer
from .analyzers.base import AnalysisContext
from .errors import ManifestMissing, UnknownResource

SCHEME = "project://"
MIME_TYPE = "application/json"


@dataclass(frozen=True)
class ResourceSpec:
    identifier: str
    name: str
    description: str
    reader: Callable[[AnalysisContext], Dict[str, Any]]

    @property
    def uri(self) -> str:
        return f"{SCHEME}{self.identifier}"

    def describe(self) -> Dict[str, str]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": MIME_TYPE,
        }


def _read_structure(context: AnalysisContext) -> Dict[str, Any]:
    return StructureAnalyzer().run(context).to_dict()


def _read_package(context: AnalysisContext) -> Dict[str, Any]:
    manifest = context.manifest()
    if manifest is None:
        raise ManifestMissing(context.config.manifest)
    return dict(manifest.raw)


def _read_components(context: AnalysisContext) -> Dict[str, Any]:
    return ComponentAnalyzer().run(context).to_dict()


def _read_routes(context: AnalysisContext) -> Dict[str, Any]:
    return RouteAnalyzer().run(context).to_dict()


RESOURCES: tuple[ResourceSpec, ...] = (
    ResourceSpec(
        "structure",
        "Project Structure",
        "Current project file tree and organization",
        _read_structure,
    ),
    ResourceSpec(
        "package",
        "Package Information",
        "Package.json with dependencies and scripts",
        _read_package,
    ),
    ResourceSpec(
        "components",
        "Component Inventory",
        "React components with their relationships",
        _read_components,
    ),
    ResourceSpec(
        "routes",
        "Routing Configuration",
        "Application routing structure and parameters",
        _read_routes,
    ),
)

_RESOURCES_BY_ID: Dict[str, ResourceSpec] = {spec.identifier: spec for spec in RESOURCES}


def list_resources() -> List[Dict[str, str]]:
    return [spec.describe() for spec in RESOURCES]


def resolve_resource(uri: str) -> ResourceSpec:
    """Return the resource registered for ``uri``; raises UnknownResource otherwise."""
    if not uri.startswith(SCHEME):
        raise UnknownResource(uri)
    identifier = uri[len(SCHEME) :]
    spec = _RESOURCES_BY_ID.get(identifier)
    if spec is None:
        raise UnknownResource(identifier)
    return spec


__all__ = ["MIME_TYPE", "RESOURCES", "ResourceSpec", "list_resources", "resolve_resource"]
