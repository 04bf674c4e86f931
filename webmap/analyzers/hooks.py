"""React hook usage analyzer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config import Limits
from ..models import Fact, FileRecord
from .base import FileAnalyzer, PatternRule, rule
from .ranking import group_by, rank_counts, tally, truncate, unique

BUILTIN_HOOKS: tuple[str, ...] = (
    "useState",
    "useEffect",
    "useContext",
    "useReducer",
    "useCallback",
    "useMemo",
    "useRef",
    "useLayoutEffect",
    "useDebugValue",
    "useId",
)

BUILTIN_RULES: tuple[PatternRule, ...] = tuple(
    rule(hook, rf"\b{hook}\b") for hook in BUILTIN_HOOKS
)
CUSTOM_RULE = rule("custom", r"\buse[A-Z][a-zA-Z0-9]*\b")


@dataclass(frozen=True)
class HookFact(Fact):
    hook: str
    builtin: bool


def extract_hooks(text: str, path: str) -> List[HookFact]:
    facts: List[HookFact] = []
    for item in BUILTIN_RULES:
        facts.extend(HookFact(path=path, hook=item.name, builtin=True) for _ in item.finditer(text))
    for match in CUSTOM_RULE.finditer(text):
        name = match.group(0)
        if name not in BUILTIN_HOOKS:
            facts.append(HookFact(path=path, hook=name, builtin=False))
    return facts


def aggregate_hooks(facts: Sequence[HookFact], total_files: int, limits: Limits) -> Dict[str, Any]:
    counts = tally(fact.hook for fact in facts)

    file_usage = [
        {
            "file": path,
            "builtInHooks": unique(fact.hook for fact in file_facts if fact.builtin),
            "customHooks": [fact.hook for fact in file_facts if not fact.builtin],
        }
        for path, file_facts in group_by(facts, lambda fact: fact.path).items()
    ]

    return {
        "totalFiles": total_files,
        "analyzedFiles": len(file_usage),
        "totalHooksUsage": sum(counts.values()),
        "mostUsedHooks": [
            {"hook": hook, "count": count}
            for hook, count in truncate(rank_counts(counts), limits.top_hooks)
        ],
        "customHooksFound": unique(fact.hook for fact in facts if not fact.builtin),
        "fileUsage": truncate(file_usage, limits.hook_file_usage),
    }


class HookAnalyzer(FileAnalyzer):
    """Counts built-in and custom hook usage across source files."""

    name = "get_hooks_usage"
    description = "Analyze React hooks usage patterns in the codebase"

    def file_limit(self, limits: Limits) -> Optional[int]:
        return limits.hook_files

    def extract(self, text: str, path: str) -> Iterable[Fact]:
        return extract_hooks(text, path)

    def aggregate(
        self, facts: Sequence[Fact], records: Sequence[FileRecord], limits: Limits
    ) -> Dict[str, Any]:
        hooks = [fact for fact in facts if isinstance(fact, HookFact)]
        return aggregate_hooks(hooks, len(records), limits)
