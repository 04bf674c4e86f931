"""Outbound API call site analyzer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from ..config import Limits
from ..models import Fact, FileRecord
from .base import FileAnalyzer, PatternRule, rule
from .ranking import tally, truncate


@dataclass(frozen=True)
class ApiCallFact(Fact):
    type: str
    url: Optional[str] = None
    method: Optional[str] = None
    table: Optional[str] = None
    endpoint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"type": self.type}
        for key in ("method", "url", "table", "endpoint"):
            value = getattr(self, key)
            if value is not None:
                entry[key] = value
        entry["file"] = self.path
        return entry


def _fetch(match: re.Match[str], path: str) -> ApiCallFact:
    # fetch(url) defaults to GET; options objects are not inspected.
    return ApiCallFact(path=path, type="fetch", url=match.group(1), method="GET")


def _axios(match: re.Match[str], path: str) -> ApiCallFact:
    return ApiCallFact(path=path, type="axios", method=match.group(1).upper(), url=match.group(2))


def _supabase(match: re.Match[str], path: str) -> ApiCallFact:
    return ApiCallFact(path=path, type="supabase", table=match.group(1))


def _endpoint(match: re.Match[str], path: str) -> ApiCallFact:
    return ApiCallFact(path=path, type="api_endpoint", endpoint=match.group(1))


CALL_RULES: Tuple[Tuple[PatternRule, Callable[[re.Match[str], str], ApiCallFact]], ...] = (
    (rule("fetch", r"fetch\s*\(\s*[\"']([^\"']+)[\"']"), _fetch),
    (
        rule("axios", r"axios\s*\.\s*(get|post|put|delete|patch)\s*\(\s*[\"']([^\"']+)[\"']"),
        _axios,
    ),
    (rule("supabase", r"supabase\s*\.\s*from\s*\(\s*[\"']([^\"']+)[\"']\)"), _supabase),
    (rule("api_endpoint", r"[\"']/api/([^\"']+)[\"']"), _endpoint),
)


def extract_api_calls(text: str, path: str) -> List[ApiCallFact]:
    facts: List[ApiCallFact] = []
    for item, build in CALL_RULES:
        facts.extend(build(match, path) for match in item.finditer(text))
    return facts


def url_domain(url: str) -> Optional[str]:
    """Return the hostname of an absolute URL, ``relative`` for paths, else None."""
    try:
        parts = urlsplit(url)
    except ValueError:
        parts = None
    if parts is not None and parts.scheme and parts.hostname:
        return parts.hostname
    if url.startswith("/"):
        return "relative"
    return None


def aggregate_api_calls(facts: Sequence[ApiCallFact], limit: int) -> Dict[str, Any]:
    api_types = tally(fact.type for fact in facts)
    methods = tally(fact.method for fact in facts if fact.method)
    domains = tally(
        domain
        for domain in (url_domain(fact.url) for fact in facts if fact.url)
        if domain is not None
    )
    return {
        "totalApiCalls": len(facts),
        "apiTypes": dict(api_types),
        "methods": dict(methods),
        "domains": dict(domains),
        "calls": [fact.to_dict() for fact in truncate(facts, limit)],
        "hasSupabase": "supabase" in api_types,
        "hasAxios": "axios" in api_types,
        "hasFetch": "fetch" in api_types,
    }


class ApiCallAnalyzer(FileAnalyzer):
    """Finds fetch, axios, Supabase table and ``/api/`` call sites."""

    name = "analyze_api_calls"
    description = "Analyze external API calls and data fetching patterns"

    def file_limit(self, limits: Limits) -> Optional[int]:
        return limits.api_files

    def extract(self, text: str, path: str) -> Iterable[Fact]:
        return extract_api_calls(text, path)

    def aggregate(
        self, facts: Sequence[Fact], records: Sequence[FileRecord], limits: Limits
    ) -> Dict[str, Any]:
        calls = [fact for fact in facts if isinstance(fact, ApiCallFact)]
        return aggregate_api_calls(calls, limits.api_calls)
