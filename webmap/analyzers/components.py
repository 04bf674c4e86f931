"""UI component catalog analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import Limits
from ..models import Fact, FileRecord
from ..repo_scanner import COMPONENT_PATTERNS
from .base import FileAnalyzer, PatternRule, rule

# Order here is the order flags appear in each component entry.
FLAG_RULES: tuple[PatternRule, ...] = (
    rule("hasDefaultExport", r"export\s+default"),
    rule("hasNamedExports", r"export\s+(?:const|function|class|interface|type)"),
    rule("hasJSX", r"\A(?=[\s\S]*<)(?=[\s\S]*>)"),
    rule("hasProps", r"props|Props"),
    rule("hasState", r"useState|setState|state"),
    rule("hasEffects", r"useEffect"),
    rule("isComponent", r"export\s+(?:default\s+)?(?:function|const|class)"),
)


@dataclass(frozen=True)
class ComponentFact(Fact):
    name: str
    size: int
    flags: Mapping[str, bool] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"path": self.path, "name": self.name, "size": self.size}
        entry.update(self.flags)
        return entry


def component_name(path: str) -> str:
    """Derive a component name from the file's base name minus its extension."""
    return PurePosixPath(path).stem


def extract_component(text: str, path: str) -> List[ComponentFact]:
    flags = {item.name: item.search(text) for item in FLAG_RULES}
    return [ComponentFact(path=path, name=component_name(path), size=len(text), flags=flags)]


def aggregate_components(facts: Sequence[ComponentFact], total_files: int) -> Dict[str, Any]:
    return {
        "totalComponents": total_files,
        "analyzed": len(facts),
        "components": [fact.to_dict() for fact in facts],
    }


class ComponentAnalyzer(FileAnalyzer):
    """Catalogs component files with export, props, state and effect markers."""

    name = "get_components"
    description = "Get React components in the project with detailed analysis"
    patterns = COMPONENT_PATTERNS

    def file_limit(self, limits: Limits) -> Optional[int]:
        return limits.component_files

    def extract(self, text: str, path: str) -> Iterable[Fact]:
        return extract_component(text, path)

    def aggregate(
        self, facts: Sequence[Fact], records: Sequence[FileRecord], limits: Limits
    ) -> Dict[str, Any]:
        components = [fact for fact in facts if isinstance(fact, ComponentFact)]
        return aggregate_components(components, len(records))
