"""Tailwind-style utility class usage analyzer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import Limits
from ..models import Fact, FileRecord
from .base import FileAnalyzer, PatternRule, apply_rules, rule
from .ranking import group_by, rank_counts, tally, truncate, unique

CLASS_RULES: tuple[PatternRule, ...] = (
    rule("className", r"className\s*=\s*[\"']([^\"']+)[\"']"),
    rule("className-expression", r"className\s*=\s*{[^}]*[\"']([^\"']+)[\"'][^}]*}"),
    rule("class", r"class\s*=\s*[\"']([^\"']+)[\"']"),
)

# Buckets are independent; a token such as ``text-lg`` lands in several.
BUCKET_RULES: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("layout", re.compile(r"^(flex|grid|block|inline|hidden|w-|h-|p-|m-|space-|gap-)")),
    ("colors", re.compile(r"^(bg-|text-|border-|from-|to-|via-)")),
    ("typography", re.compile(r"^(text-|font-|leading-|tracking-|uppercase|lowercase)")),
    ("responsive", re.compile(r"^(sm:|md:|lg:|xl:|2xl:)")),
)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ClassUsageFact(Fact):
    rule: str
    classes: Tuple[str, ...]


def split_classes(value: str) -> Tuple[str, ...]:
    return tuple(token for token in _WHITESPACE.split(value) if token)


def classify(token: str) -> List[str]:
    """Return every bucket whose prefix rule matches ``token``."""
    return [bucket for bucket, pattern in BUCKET_RULES if pattern.match(token)]


def extract_classes(text: str, path: str) -> List[ClassUsageFact]:
    facts: List[ClassUsageFact] = []
    for item, match in apply_rules(CLASS_RULES, text):
        classes = split_classes(match.group(1))
        if classes:
            facts.append(ClassUsageFact(path=path, rule=item.name, classes=classes))
    return facts


def _entries(pairs: Sequence[Tuple[str, int]]) -> List[Dict[str, Any]]:
    return [{"class": name, "count": count} for name, count in pairs]


def aggregate_classes(
    facts: Sequence[ClassUsageFact], total_files: int, limits: Limits
) -> Dict[str, Any]:
    counts = tally(token for fact in facts for token in fact.classes)
    most_used = truncate(rank_counts(counts), limits.top_classes)

    patterns = {
        bucket: _entries(
            truncate(
                [pair for pair in most_used if bucket in classify(pair[0])],
                limits.class_bucket,
            )
        )
        for bucket, _ in BUCKET_RULES
    }

    file_usage: List[Dict[str, Any]] = []
    for path, file_facts in group_by(facts, lambda fact: fact.path).items():
        tokens = [token for fact in file_facts for token in fact.classes]
        distinct = unique(tokens)
        file_usage.append(
            {
                "file": path,
                "uniqueClasses": len(distinct),
                "totalClasses": len(tokens),
                "topClasses": truncate(distinct, limits.classes_per_file),
            }
        )

    return {
        "totalFiles": total_files,
        "analyzedFiles": len(file_usage),
        "totalUniqueClasses": len(counts),
        "mostUsedClasses": _entries(most_used),
        "patterns": patterns,
        "fileUsage": truncate(file_usage, limits.class_file_usage),
    }


class StylingAnalyzer(FileAnalyzer):
    """Tallies utility classes from class attributes and buckets the most used ones."""

    name = "get_tailwind_usage"
    description = "Analyze Tailwind CSS class usage patterns and statistics"

    def file_limit(self, limits: Limits) -> Optional[int]:
        return limits.styling_files

    def extract(self, text: str, path: str) -> Iterable[Fact]:
        return extract_classes(text, path)

    def aggregate(
        self, facts: Sequence[Fact], records: Sequence[FileRecord], limits: Limits
    ) -> Dict[str, Any]:
        usage = [fact for fact in facts if isinstance(fact, ClassUsageFact)]
        return aggregate_classes(usage, len(records), limits)
