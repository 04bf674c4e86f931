"""Base classes for analyzer plugins."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..config import Limits, WebmapConfig
from ..loader import load_many
from ..logging import get_logger
from ..manifest import load_manifest
from ..models import Fact, FileRecord, PackageManifest, Report
from ..repo_scanner import SOURCE_PATTERNS, ProjectScanner

_LOGGER = get_logger("analyzers")


@dataclass(frozen=True)
class PatternRule:
    """One named textual extraction rule within a facet's ordered rule table."""

    name: str
    pattern: re.Pattern[str]

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        try:
            matches = list(self.pattern.finditer(text))
        except (re.error, TypeError, RecursionError) as exc:
            _LOGGER.debug("Rule %s failed: %s", self.name, exc)
            return iter(())
        return iter(matches)

    def search(self, text: str) -> bool:
        try:
            return self.pattern.search(text) is not None
        except (re.error, TypeError, RecursionError) as exc:
            _LOGGER.debug("Rule %s failed: %s", self.name, exc)
            return False


def rule(name: str, pattern: str, flags: int = 0) -> PatternRule:
    return PatternRule(name=name, pattern=re.compile(pattern, flags))


def apply_rules(
    rules: Sequence[PatternRule], text: str
) -> Iterator[Tuple[PatternRule, re.Match[str]]]:
    """Yield every match of every rule, rule by rule in table order."""
    for item in rules:
        for match in item.finditer(text):
            yield item, match


def timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class AnalysisContext:
    """Per-invocation view of the project shared by the analyzers of one request."""

    root: Path
    config: WebmapConfig
    scanner: ProjectScanner = field(init=False)

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser().resolve()
        self.scanner = ProjectScanner.from_config(self.config.scan)

    @property
    def limits(self) -> Limits:
        return self.config.limits

    def enumerate(self, patterns: Sequence[str]) -> List[FileRecord]:
        return self.scanner.scan(self.root, patterns)

    def read(self, records: Sequence[FileRecord]) -> Iterator[Tuple[FileRecord, str]]:
        return load_many(self.root, records, self.config.scan.read_concurrency)

    def manifest(self) -> Optional[PackageManifest]:
        return load_manifest(self.root, self.config.manifest)

    def assemble(self, kind: str, files_scanned: int, body: Dict[str, Any]) -> Report:
        return Report(
            kind=kind,
            root=str(self.root),
            generated_at=timestamp(),
            files_scanned=files_scanned,
            body=body,
        )


class Analyzer(ABC):
    """Contract for analyzers: one named analysis kind producing one report."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    @abstractmethod
    def run(self, context: AnalysisContext) -> Report:
        """Compute the report for the project described by ``context``."""


class FileAnalyzer(Analyzer):
    """Enumerates a file scope, extracts facts per file and aggregates them."""

    patterns: ClassVar[Tuple[str, ...]] = SOURCE_PATTERNS

    def file_limit(self, limits: Limits) -> Optional[int]:
        """Return how many enumerated files to read, or None to read them all."""
        return None

    def run(self, context: AnalysisContext) -> Report:
        records = context.enumerate(self.patterns)
        limit = self.file_limit(context.limits)
        selected = records if limit is None else records[:limit]

        facts: List[Fact] = []
        for record, text in context.read(selected):
            facts.extend(self.extract(text, record.path))
        _LOGGER.debug("%s extracted %d facts from %d files", self.name, len(facts), len(selected))

        body = self.aggregate(facts, records, context.limits)
        return context.assemble(self.name, len(records), body)

    @abstractmethod
    def extract(self, text: str, path: str) -> Iterable[Fact]:
        """Produce facts for a single file's text."""

    @abstractmethod
    def aggregate(
        self, facts: Sequence[Fact], records: Sequence[FileRecord], limits: Limits
    ) -> Dict[str, Any]:
        """Fold the facts of one analysis pass into a report body."""
