"""Dependency taxonomy analyzer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from ..config import DEFAULT_MANIFEST
from ..errors import ManifestMissing
from ..models import Fact, PackageManifest, Report
from .base import AnalysisContext, Analyzer

FALLBACK_CATEGORY = "other"

# First match wins, so order matters: "react-router-dom" is filed under react.
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("react", ("react", "@types/react")),
    ("ui", ("ui", "component", "material", "ant", "chakra")),
    ("state", ("redux", "zustand", "jotai", "recoil")),
    ("routing", ("router", "navigation", "reach")),
    ("styling", ("styled", "emotion", "tailwind", "css", "sass")),
    ("database", ("supabase", "prisma", "mongoose", "firebase")),
    ("build", ("vite", "webpack", "rollup", "babel", "esbuild")),
    ("testing", ("test", "jest", "vitest", "cypress", "playwright")),
    ("utilities", ("lodash", "axios", "dayjs", "uuid", "clsx")),
)

CATEGORIES: Tuple[str, ...] = tuple(name for name, _ in CATEGORY_RULES) + (FALLBACK_CATEGORY,)

FRAMEWORK_FLAGS: Tuple[Tuple[str, str, bool], ...] = (
    # (flag, package, also check devDependencies)
    ("hasReact", "react", False),
    ("hasNext", "next", False),
    ("hasVite", "vite", True),
    ("hasTailwind", "tailwindcss", True),
    ("hasSupabase", "@supabase/supabase-js", False),
    ("hasTypeScript", "typescript", True),
)


@dataclass(frozen=True)
class DependencyFact(Fact):
    name: str
    version: str
    category: str
    dev: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "version": self.version}


def categorize(name: str) -> str:
    """Return the single category for a package name."""
    for category, keywords in CATEGORY_RULES:
        if any(keyword in name for keyword in keywords):
            return category
    return FALLBACK_CATEGORY


def extract_dependencies(
    manifest: PackageManifest, source: str = DEFAULT_MANIFEST
) -> List[DependencyFact]:
    facts: List[DependencyFact] = []
    for dev, mapping in ((False, manifest.dependencies), (True, manifest.dev_dependencies)):
        for name, version in mapping.items():
            facts.append(
                DependencyFact(
                    path=source,
                    name=name,
                    version=version,
                    category=categorize(name),
                    dev=dev,
                )
            )
    return facts


def aggregate_dependencies(
    facts: Sequence[DependencyFact], manifest: PackageManifest
) -> Dict[str, Any]:
    categories: Dict[str, List[Dict[str, Any]]] = {name: [] for name in CATEGORIES}
    for fact in facts:
        categories[fact.category].append(fact.to_dict())

    frameworks = {
        flag: manifest.has(package) if include_dev else manifest.has_runtime(package)
        for flag, package, include_dev in FRAMEWORK_FLAGS
    }
    return {
        "totalDependencies": len(manifest.dependencies),
        "totalDevDependencies": len(manifest.dev_dependencies),
        "categories": categories,
        "frameworks": frameworks,
    }


class DependencyAnalyzer(Analyzer):
    """Sorts manifest dependencies into framework, UI, state and tooling buckets."""

    name = "analyze_dependencies"
    description = "Analyze project dependencies and categorize them by type"

    def run(self, context: AnalysisContext) -> Report:
        manifest = context.manifest()
        if manifest is None:
            raise ManifestMissing(context.config.manifest)
        facts = extract_dependencies(manifest, context.config.manifest)
        return context.assemble(self.name, 1, aggregate_dependencies(facts, manifest))
