"""Core data models shared across webmap components."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class FileRecord:
    """A file discovered under the project root."""

    path: str
    extension: str

    @classmethod
    def from_relative(cls, path: str) -> "FileRecord":
        name = path.rsplit("/", 1)[-1]
        extension = name.rsplit(".", 1)[-1].lower() if "." in name.lstrip(".") else ""
        return cls(path=path, extension=extension)


@dataclass(frozen=True)
class PackageManifest:
    """Parsed package.json contents relevant to analysis."""

    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    def has(self, package: str) -> bool:
        """Return True when the package is declared as a runtime or dev dependency."""
        return bool(self.dependencies.get(package) or self.dev_dependencies.get(package))

    def has_runtime(self, package: str) -> bool:
        return bool(self.dependencies.get(package))


@dataclass(frozen=True)
class Fact:
    """Base for facet-specific observations; every fact remembers its source file."""

    path: str


@dataclass(frozen=True)
class Report:
    """Aggregated output of one analysis kind plus the metadata it was built from."""

    kind: str
    root: str
    generated_at: str
    files_scanned: int
    body: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-serialisable report payload."""
        return dict(self.body)

    def metadata(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "root": self.root,
            "generatedAt": self.generated_at,
            "filesScanned": self.files_scanned,
        }
