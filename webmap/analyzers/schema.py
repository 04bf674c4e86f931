"""Database schema artifact analyzer.

Scans SQL migrations and schema/type modules for table, policy, function and
foreign-key declarations plus TypeScript types that look like generated
database typings. A second pass over ordinary source files records Supabase
``.from("table")`` queries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..config import Limits
from ..models import Fact, Report
from ..repo_scanner import SOURCE_PATTERNS
from .base import AnalysisContext, Analyzer, PatternRule, rule
from .ranking import preview, truncate

SCHEMA_PATTERNS: tuple[str, ...] = (
    "**/schema*.{sql,ts,js}",
    "**/database*.{sql,ts,js}",
    "**/migrations/**/*.{sql,ts,js}",
    "**/supabase/**/*.{sql,ts,js}",
    "**/types/**/*database*.{ts,js}",
    "**/types/**/*supabase*.{ts,js}",
)

DEFINITION_PREVIEW = 200

_SCHEMA_NAME = r"\w*(?:Database|Table|Row|Insert|Update)\w*"
_I = re.IGNORECASE

TABLE = "table"
TYPE = "type"
POLICY = "policy"
FUNCTION = "function"
RELATIONSHIP = "relationship"
TABLE_REFERENCE = "table_reference"
USAGE = "usage"


@dataclass(frozen=True)
class SchemaFact(Fact):
    kind: str
    name: str
    table: Optional[str] = None
    declaration: Optional[str] = None
    definition: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == TABLE:
            return {"name": self.name, "file": self.path, "definition": self.definition}
        if self.kind == TYPE:
            return {
                "name": self.name,
                "file": self.path,
                "type": self.declaration,
                "definition": self.definition,
            }
        if self.kind == POLICY:
            return {"name": self.name, "table": self.table, "file": self.path}
        if self.kind == RELATIONSHIP:
            return {"referencedTable": self.name, "file": self.path}
        if self.kind == USAGE:
            return {"table": self.name, "file": self.path, "operation": "query"}
        if self.kind == TABLE_REFERENCE:
            return {"table": self.name, "file": self.path, "context": "supabase_query"}
        return {"name": self.name, "file": self.path}


_Builder = Callable[[re.Match[str], str, int], SchemaFact]


def _table(match: re.Match[str], path: str, size: int) -> SchemaFact:
    return SchemaFact(path=path, kind=TABLE, name=match.group(1), definition=preview(match.group(0), size))


def _interface(match: re.Match[str], path: str, size: int) -> SchemaFact:
    return SchemaFact(
        path=path,
        kind=TYPE,
        name=match.group(1),
        declaration="interface",
        definition=preview(match.group(0), size),
    )


def _type_alias(match: re.Match[str], path: str, size: int) -> SchemaFact:
    return SchemaFact(
        path=path,
        kind=TYPE,
        name=match.group(1),
        declaration="type",
        definition=preview(match.group(0), size),
    )


def _policy(match: re.Match[str], path: str, size: int) -> SchemaFact:
    return SchemaFact(path=path, kind=POLICY, name=match.group(1), table=match.group(2))


def _function(match: re.Match[str], path: str, size: int) -> SchemaFact:
    return SchemaFact(path=path, kind=FUNCTION, name=match.group(1))


def _relationship(match: re.Match[str], path: str, size: int) -> SchemaFact:
    return SchemaFact(path=path, kind=RELATIONSHIP, name=match.group(1))


SCHEMA_RULES: Tuple[Tuple[PatternRule, _Builder], ...] = (
    (
        rule(
            "create-table",
            r"CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?:\w+\.)?(\w+)\s*\([^)]+\)",
            _I,
        ),
        _table,
    ),
    (rule("interface", rf"interface\s+({_SCHEMA_NAME})\s*\{{[^}}]+\}}", _I), _interface),
    (rule("type-alias", rf"type\s+({_SCHEMA_NAME})\s*=[^;]+", _I), _type_alias),
    (rule("create-policy", r"CREATE\s+POLICY\s+(\w+)\s+ON\s+(?:\w+\.)?(\w+)", _I), _policy),
    (
        rule("create-function", r"CREATE\s+(?:OR\s+REPLACE\s+)?FUNCTION\s+(?:\w+\.)?(\w+)", _I),
        _function,
    ),
    (rule("references", r"REFERENCES\s+(?:\w+\.)?(\w+)\s*\(", _I), _relationship),
)

# Only consulted in schema files that mention Supabase or a Database type.
TABLE_REFERENCE_RULE = rule("table-reference", r"from\s*\(\s*[\"'](\w+)[\"']\s*\)", _I)
CLIENT_QUERY_RULE = rule("client-query", r"\.from\s*\(\s*[\"'](\w+)[\"']\s*\)")


def extract_schema(
    text: str, path: str, preview_size: int = DEFINITION_PREVIEW
) -> List[SchemaFact]:
    facts: List[SchemaFact] = []
    for item, build in SCHEMA_RULES:
        facts.extend(build(match, path, preview_size) for match in item.finditer(text))
    if "supabase" in text or "Database" in text:
        facts.extend(
            SchemaFact(path=path, kind=TABLE_REFERENCE, name=match.group(1))
            for match in TABLE_REFERENCE_RULE.finditer(text)
        )
    return facts


def extract_supabase_usage(text: str, path: str) -> List[SchemaFact]:
    if "supabase" not in text:
        return []
    return [
        SchemaFact(path=path, kind=USAGE, name=match.group(1))
        for match in CLIENT_QUERY_RULE.finditer(text)
    ]


def aggregate_schema(
    facts: Sequence[SchemaFact],
    usage: Sequence[SchemaFact],
    schema_files: Sequence[str],
    limits: Limits,
) -> Dict[str, Any]:
    by_kind: Dict[str, List[SchemaFact]] = {
        kind: [] for kind in (TABLE, TYPE, FUNCTION, POLICY, RELATIONSHIP, TABLE_REFERENCE)
    }
    for fact in facts:
        by_kind.setdefault(fact.kind, []).append(fact)

    def _sample(kind: str, limit: int) -> List[Dict[str, Any]]:
        return [fact.to_dict() for fact in truncate(by_kind[kind], limit)]

    return {
        "schemaFiles": list(schema_files),
        "totalFiles": len(schema_files),
        "schema": {
            "tables": _sample(TABLE, limits.schema_tables),
            "types": _sample(TYPE, limits.schema_types),
            "functions": _sample(FUNCTION, limits.schema_functions),
            "policies": _sample(POLICY, limits.schema_policies),
            "relationships": _sample(RELATIONSHIP, limits.schema_relationships),
        },
        "supabaseUsage": [fact.to_dict() for fact in truncate(usage, limits.supabase_usage)],
        "statistics": {
            "totalTables": len(by_kind[TABLE]),
            "totalTypes": len(by_kind[TYPE]),
            "totalFunctions": len(by_kind[FUNCTION]),
            "totalPolicies": len(by_kind[POLICY]),
            "totalRelationships": len(by_kind[RELATIONSHIP]),
            "supabaseReferences": len(usage),
        },
        "hasSupabase": bool(usage) or bool(by_kind[TABLE_REFERENCE]),
        "hasSQL": any(path.endswith(".sql") for path in schema_files),
        "hasTypeScript": any(path.endswith(".ts") for path in schema_files),
    }


class SchemaAnalyzer(Analyzer):
    """Collects SQL and typed schema declarations plus Supabase table queries.

    Two passes: every schema-looking file, then the first ``supabase_files``
    source files for client queries.
    """

    name = "analyze_database_schema"
    description = "Analyze Supabase database schema, tables, types, and RLS policies"
    patterns = SCHEMA_PATTERNS

    def run(self, context: AnalysisContext) -> Report:
        limits = context.limits
        schema_records = context.enumerate(self.patterns)
        facts: List[SchemaFact] = []
        for record, text in context.read(schema_records):
            facts.extend(extract_schema(text, record.path, limits.definition_preview))

        code_records = context.enumerate(SOURCE_PATTERNS)[: limits.supabase_files]
        usage: List[SchemaFact] = []
        for record, text in context.read(code_records):
            usage.extend(extract_supabase_usage(text, record.path))

        body = aggregate_schema(facts, usage, [record.path for record in schema_records], limits)
        return context.assemble(self.name, len(schema_records) + len(code_records), body)

