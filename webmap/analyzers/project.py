"""Project overview and file-tree analyzers."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from ..models import FileRecord, PackageManifest, Report
from ..repo_scanner import ALL_FILES, SOURCE_PATTERNS
from .base import AnalysisContext, Analyzer, timestamp
from .ranking import truncate, unique

UNKNOWN = "Unknown"

SOURCE_EXTENSIONS: Tuple[str, ...] = ("tsx", "jsx", "ts", "js")

STACK_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("hasReact", "react"),
    ("hasTypeScript", "typescript"),
    ("hasVite", "vite"),
    ("hasNext", "next"),
    ("hasTailwind", "tailwindcss"),
    ("hasSupabase", "@supabase/supabase-js"),
)


def summarize_project(
    root: str,
    records: Sequence[FileRecord],
    manifest: Optional[PackageManifest],
    generated_at: str,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "projectPath": root,
        "packageName": (manifest.name if manifest else None) or UNKNOWN,
        "packageVersion": (manifest.version if manifest else None) or UNKNOWN,
        "totalFiles": len(records),
        "fileTypes": {
            extension: sum(1 for record in records if record.extension == extension)
            for extension in SOURCE_EXTENSIONS
        },
    }
    for flag, package in STACK_MARKERS:
        body[flag] = manifest.has(package) if manifest else False
    body["timestamp"] = generated_at
    return body


def summarize_structure(records: Sequence[FileRecord], limit: int) -> Dict[str, Any]:
    paths = [record.path for record in records]
    return {
        "totalFiles": len(paths),
        "files": truncate(paths, limit),
        "directories": unique(path.split("/", 1)[0] for path in paths if "/" in path),
    }


class ProjectAnalyzer(Analyzer):
    """Summarizes package metadata, source file counts and detected stack."""

    name = "analyze_project"
    description = "Analyze the project structure and configuration"
    patterns = SOURCE_PATTERNS

    def run(self, context: AnalysisContext) -> Report:
        records = context.enumerate(self.patterns)
        manifest = context.manifest()
        body = summarize_project(str(context.root), records, manifest, timestamp())
        return context.assemble(self.name, len(records), body)


class StructureAnalyzer(Analyzer):
    """Lists project files and top-level directories."""

    name = "structure"
    description = "Current project file tree and organization"

    def run(self, context: AnalysisContext) -> Report:
        records = context.enumerate(ALL_FILES)
        body = summarize_structure(records, context.limits.structure_files)
        return context.assemble(self.name, len(records), body)
