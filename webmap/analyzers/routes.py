"""Routing table analyzer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

from ..config import Limits
from ..models import Fact, FileRecord
from .base import FileAnalyzer, PatternRule, apply_rules, rule
from .components import component_name
from .ranking import group_by, line_of, truncate

ROUTING_PATTERNS: tuple[str, ...] = (
    "**/router*.{ts,tsx,js,jsx}",
    "**/routes*.{ts,tsx,js,jsx}",
    "**/App.{ts,tsx,js,jsx}",
    "**/main.{ts,tsx,js,jsx}",
    "**/index.{ts,tsx,js,jsx}",
)

ROUTE_RULES: tuple[PatternRule, ...] = (
    rule("path-assignment", r"path\s*[:=]\s*[\"']([^\"']+)[\"']"),
    rule("route-assignment", r"route\s*[:=]\s*[\"']([^\"']+)[\"']"),
    rule("jsx-route", r"<Route[^>]+path\s*=\s*[\"']([^\"']+)[\"']"),
    rule("route-object", r"\{\s*path\s*:\s*[\"']([^\"']+)[\"']"),
)

# Matched anywhere in the file, not near the route: a whole file mentioning auth
# marks every route it declares as protected.
PROTECTED_MARKER = re.compile(r"protected|private|auth", re.IGNORECASE)


@dataclass(frozen=True)
class RouteFact(Fact):
    route: str
    component: str
    is_protected: bool
    rule: str
    offset: int
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.route,
            "file": self.path,
            "component": self.component,
            "isProtected": self.is_protected,
            "line": self.line,
        }


def extract_routes(text: str, path: str) -> List[RouteFact]:
    is_protected = PROTECTED_MARKER.search(text) is not None
    component = component_name(path)
    return [
        RouteFact(
            path=path,
            route=match.group(1),
            component=component,
            is_protected=is_protected,
            rule=item.name,
            offset=match.start(1),
            line=line_of(text, match.start(1)),
        )
        for item, match in apply_rules(ROUTE_RULES, text)
    ]


def dedupe_routes(facts: Sequence[RouteFact]) -> List[RouteFact]:
    """Collapse rules that matched the same string literal, ordering routes by position.

    ``<Route path="/x">`` satisfies both the JSX rule and the generic ``path=``
    rule; both report the literal at the same offset, so it is one route.
    """
    routes: List[RouteFact] = []
    for file_facts in group_by(facts, lambda fact: fact.path).values():
        seen: Dict[int, RouteFact] = {}
        for fact in file_facts:
            seen.setdefault(fact.offset, fact)
        routes.extend(sorted(seen.values(), key=lambda fact: fact.offset))
    return routes


def aggregate_routes(
    facts: Sequence[RouteFact], routing_files: Sequence[str], limit: int
) -> Dict[str, Any]:
    routes = dedupe_routes(facts)
    return {
        "routingFiles": list(routing_files),
        "routes": [route.to_dict() for route in truncate(routes, limit)],
        "totalRoutes": len(routes),
        "hasReactRouter": any("/" in route.route for route in routes),
    }


class RouteAnalyzer(FileAnalyzer):
    """Finds route declarations in router, App, main and index modules."""

    name = "get_routing_structure"
    description = "Analyze the application routing structure and routes"
    patterns = ROUTING_PATTERNS

    def extract(self, text: str, path: str) -> Iterable[Fact]:
        return extract_routes(text, path)

    def aggregate(
        self, facts: Sequence[Fact], records: Sequence[FileRecord], limits: Limits
    ) -> Dict[str, Any]:
        routes = [fact for fact in facts if isinstance(fact, RouteFact)]
        return aggregate_routes(routes, [record.path for record in records], limits.routes)
