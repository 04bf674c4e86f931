"""Maps operation names, resource URIs and prompt names onto analysis pipelines."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .analyzers import Analyzer, discover_analyzers
from .analyzers.base import AnalysisContext
from .config import CONFIG_FILENAME, WebmapConfig, load_config
from .errors import UnknownOperation, WebmapError
from .logging import get_logger
from .models import Report
from .prompts import get_prompt, list_prompts
from .resources import list_resources, resolve_resource


def error_payload(message: str) -> Dict[str, Any]:
    return {"error": message}


def is_error(payload: Mapping[str, Any]) -> bool:
    return set(payload) == {"error"}


def render_json(payload: Any) -> str:
    """Serialise a report or error payload as pretty-printed JSON."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


class Dispatcher:
    """Runs analyses for one project root.

    Each call enumerates and reads the project afresh; nothing is cached between
    calls. ``run``, ``read_resource`` and ``get_prompt`` never raise: failures
    come back as ``{"error": message}``.
    """

    def __init__(
        self,
        root: str | Path,
        config: Optional[WebmapConfig] = None,
        analyzers: Optional[Iterable[Analyzer]] = None,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.config = config or load_config(self.root / CONFIG_FILENAME)
        self.logger = get_logger("dispatcher")
        if analyzers is None:
            analyzers = discover_analyzers(self.config.analyzers.enabled or None)
        self._analyzers: Dict[str, Analyzer] = {}
        for analyzer in analyzers:
            self._analyzers.setdefault(analyzer.name, analyzer)

    def list_operations(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": name,
                "description": analyzer.description,
                "inputSchema": {"type": "object", "properties": {}},
            }
            for name, analyzer in self._analyzers.items()
        ]

    def list_resources(self) -> List[Dict[str, str]]:
        return list_resources()

    def list_prompts(self) -> List[Dict[str, Any]]:
        return list_prompts()

    def analyze(self, name: str) -> Report:
        """Run the named analysis and return the full report; raises on failure."""
        analyzer = self._analyzers.get(name)
        if analyzer is None:
            raise UnknownOperation(name)
        self.logger.info("Running %s for %s", name, self.root)
        report = analyzer.run(self._context())
        self.logger.debug("%s finished after scanning %d files", name, report.files_scanned)
        return report

    def run(self, name: str, *, include_metadata: bool = False) -> Dict[str, Any]:
        """Return the report body for ``name`` or an error payload.

        With ``include_metadata`` the body is wrapped as
        ``{"metadata": {kind, root, generatedAt, filesScanned}, "report": body}``.
        """

        def _run() -> Dict[str, Any]:
            report = self.analyze(name)
            if include_metadata:
                return {"metadata": report.metadata(), "report": report.to_dict()}
            return report.to_dict()

        return self._guard(f"tool {name}", _run)

    def read_resource(self, uri: str) -> Dict[str, Any]:
        def _read() -> Dict[str, Any]:
            spec = resolve_resource(uri)
            self.logger.info("Reading resource %s", spec.uri)
            return spec.reader(self._context())

        return self._guard(f"resource {uri}", _read)

    def get_prompt(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self._guard(f"prompt {name}", lambda: get_prompt(name, arguments or {}))

    def _context(self) -> AnalysisContext:
        return AnalysisContext(root=self.root, config=self.config)

    def _guard(self, label: str, action: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        try:
            return action()
        except WebmapError as exc:
            self.logger.warning("Error handling %s: %s", label, exc)
            return error_payload(str(exc))
        except Exception as exc:
            self.logger.exception("Unexpected failure handling %s", label)
            return error_payload(str(exc) or exc.__class__.__name__)


__all__ = ["Dispatcher", "error_payload", "is_error", "render_json"]
