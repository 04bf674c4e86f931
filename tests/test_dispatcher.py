"""End-to-end tests for the dispatcher facade."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from webmap.analyzers import OPERATION_NAMES
from webmap.dispatcher import Dispatcher, error_payload, is_error, render_json


APP = """
import { useEffect } from "react";
import { Route } from "react-router-dom";

export default function App() {
  useEffect(() => {}, []);
  return <Route path="/home" element={<Home />} />;
}
"""


@pytest.fixture
def react_project(project):
    project.write_manifest(
        {
            "name": "shop",
            "version": "1.2.3",
            "dependencies": {"react": "^18.2.0", "@supabase/supabase-js": "^2.39.0"},
        }
    )
    project.write({"src/App.tsx": APP})
    return project


def test_operations_are_listed_in_order(project) -> None:
    operations = project.dispatcher().list_operations()

    assert [operation["name"] for operation in operations] == list(OPERATION_NAMES)
    assert all(operation["inputSchema"] == {"type": "object", "properties": {}} for operation in operations)
    assert all(operation["description"] for operation in operations)


def test_react_supabase_project(react_project) -> None:
    dispatcher = react_project.dispatcher()

    overview = dispatcher.run("analyze_project")
    assert overview["packageName"] == "shop"
    assert overview["hasReact"] is True
    assert overview["hasSupabase"] is True
    assert overview["fileTypes"]["tsx"] == 1

    routing = dispatcher.run("get_routing_structure")
    assert [route["path"] for route in routing["routes"]] == ["/home"]
    assert routing["totalRoutes"] == 1
    assert routing["routes"][0]["file"] == "src/App.tsx"

    hooks = dispatcher.run("get_hooks_usage")
    counts = {entry["hook"]: entry["count"] for entry in hooks["mostUsedHooks"]}
    assert counts["useEffect"] >= 1

    dependencies = dispatcher.run("analyze_dependencies")
    assert dependencies["frameworks"]["hasSupabase"] is True
    assert dependencies["categories"]["database"][0]["name"] == "@supabase/supabase-js"


def test_empty_project_yields_zero_counts(project) -> None:
    project.write_manifest({"name": "empty"})
    dispatcher = project.dispatcher()

    results = {name: dispatcher.run(name) for name in OPERATION_NAMES}

    assert not any(is_error(result) for result in results.values())
    assert results["analyze_project"]["totalFiles"] == 0
    assert results["get_components"]["totalComponents"] == 0
    assert results["get_routing_structure"]["totalRoutes"] == 0
    assert results["analyze_dependencies"]["totalDependencies"] == 0
    assert results["get_tailwind_usage"]["totalUniqueClasses"] == 0
    assert results["get_hooks_usage"]["totalHooksUsage"] == 0
    assert results["analyze_api_calls"]["totalApiCalls"] == 0
    assert results["analyze_database_schema"]["statistics"]["totalTables"] == 0


def test_missing_manifest(project) -> None:
    project.write({"src/App.jsx": "export default () => <div />;"})
    dispatcher = project.dispatcher()

    overview = dispatcher.run("analyze_project")
    assert overview["packageName"] == "Unknown"
    assert overview["packageVersion"] == "Unknown"
    assert overview["hasReact"] is False

    assert dispatcher.run("analyze_dependencies") == {"error": "No package.json found"}


def test_class_tokens_and_responsive_bucket(project) -> None:
    project.write({"src/Card.tsx": '<div className="flex p-4 md:p-8" />'})

    body = project.dispatcher().run("get_tailwind_usage")

    assert body["totalUniqueClasses"] == 3
    assert {"class": "md:p-8", "count": 1} in body["patterns"]["responsive"]


def test_unreadable_file_does_not_change_other_facts(project) -> None:
    project.write({"src/A.tsx": "useState(); useCart();"})
    baseline = project.dispatcher().run("get_hooks_usage")

    (project.path() / "src" / "Blob.tsx").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
    with_binary = project.dispatcher().run("get_hooks_usage")

    assert with_binary["mostUsedHooks"] == baseline["mostUsedHooks"]
    assert with_binary["fileUsage"] == baseline["fileUsage"]
    assert with_binary["totalFiles"] == baseline["totalFiles"] + 1


def test_runs_are_deterministic(react_project) -> None:
    dispatcher = react_project.dispatcher()
    for name in OPERATION_NAMES:
        first = dispatcher.run(name)
        second = dispatcher.run(name)
        first.pop("timestamp", None)
        second.pop("timestamp", None)
        assert first == second


def test_unknown_tool(project) -> None:
    assert project.dispatcher().run("nope") == {"error": "Unknown tool: nope"}


def test_missing_root_reports_error(tmp_path: Path) -> None:
    result = Dispatcher(tmp_path / "missing").run("get_components")

    assert is_error(result)
    assert "not found" in result["error"]


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)
def test_unreadable_root_reports_error(tmp_path: Path) -> None:
    root = tmp_path / "locked"
    root.mkdir()
    root.chmod(0)
    try:
        dispatcher = Dispatcher(root)
        result = dispatcher.run("get_components")
        resource = dispatcher.read_resource("project://structure")
    finally:
        root.chmod(0o755)

    assert is_error(result)
    assert "not readable" in result["error"]
    assert is_error(resource)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_file_outside_root_is_not_read(project, tmp_path: Path) -> None:
    secret = tmp_path / "outside" / "secret.ts"
    secret.parent.mkdir()
    secret.write_text("useSecretHook()", encoding="utf-8")
    project.write({"src/A.tsx": "useCart();"})
    try:
        (project.path() / "src" / "leak.ts").symlink_to(secret)
    except OSError:  # pragma: no cover - platform without symlink permission
        pytest.skip("cannot create symlink")

    body = project.dispatcher().run("get_hooks_usage")

    assert body["customHooksFound"] == ["useCart"]
    assert body["totalFiles"] == 1


def test_run_with_metadata(react_project) -> None:
    result = react_project.dispatcher().run("get_components", include_metadata=True)

    metadata = result["metadata"]
    assert metadata["kind"] == "get_components"
    assert metadata["root"] == str(react_project.path().resolve())
    assert metadata["filesScanned"] == 1
    assert metadata["generatedAt"].endswith("Z")
    assert result["report"]["totalComponents"] == 1


def test_run_with_metadata_keeps_error_shape(project) -> None:
    assert project.dispatcher().run("nope", include_metadata=True) == {
        "error": "Unknown tool: nope"
    }


def test_root_that_is_a_file_reports_error(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    assert is_error(Dispatcher(target).run("analyze_project"))


def test_enabled_analyzers_from_config(project) -> None:
    (project.path() / ".webmap.yml").write_text(
        "analyzers:\n  enabled: [get_components]\n", encoding="utf-8"
    )
    dispatcher = project.dispatcher()

    assert [operation["name"] for operation in dispatcher.list_operations()] == ["get_components"]
    assert dispatcher.run("get_hooks_usage") == {"error": "Unknown tool: get_hooks_usage"}


def test_unexpected_exceptions_become_payloads(project, monkeypatch) -> None:
    dispatcher = project.dispatcher()

    def _boom(self, context):
        raise KeyError("broken")

    monkeypatch.setattr("webmap.analyzers.hooks.HookAnalyzer.run", _boom)

    result = dispatcher.run("get_hooks_usage")
    assert is_error(result)
    assert "broken" in result["error"]


def test_resources_are_listed(project) -> None:
    resources = project.dispatcher().list_resources()

    assert [resource["uri"] for resource in resources] == [
        "project://structure",
        "project://package",
        "project://components",
        "project://routes",
    ]
    assert {resource["mimeType"] for resource in resources} == {"application/json"}


def test_read_resources(react_project) -> None:
    dispatcher = react_project.dispatcher()

    package = dispatcher.read_resource("project://package")
    assert package["name"] == "shop"
    assert "react" in package["dependencies"]

    structure = dispatcher.read_resource("project://structure")
    assert structure["files"] == ["package.json", "src/App.tsx"]
    assert structure["directories"] == ["src"]

    components = dispatcher.read_resource("project://components")
    assert components["components"][0]["name"] == "App"

    routes = dispatcher.read_resource("project://routes")
    assert routes["totalRoutes"] == 1


def test_read_unknown_resources(project) -> None:
    dispatcher = project.dispatcher()

    assert dispatcher.read_resource("project://nope") == {"error": "Unknown resource: nope"}
    assert dispatcher.read_resource("file:///etc/passwd") == {
        "error": "Unknown resource: file:///etc/passwd"
    }
    assert dispatcher.read_resource("project://package") == {"error": "No package.json found"}


def test_prompts(project) -> None:
    dispatcher = project.dispatcher()

    assert [prompt["name"] for prompt in dispatcher.list_prompts()] == [
        "code_review",
        "refactor_suggest",
        "performance_audit",
    ]

    rendered = dispatcher.get_prompt("code_review", {"component_path": "src/Cart.tsx"})
    [message] = rendered["messages"]
    assert message["role"] == "user"
    assert message["content"]["type"] == "text"
    assert message["content"]["text"].startswith(
        "Please review the React component at src/Cart.tsx"
    )

    audit = dispatcher.get_prompt("performance_audit", {"component_name": "Cart"})
    assert 'component "Cart"' in audit["messages"][0]["content"]["text"]


def test_prompt_errors(project) -> None:
    dispatcher = project.dispatcher()

    assert dispatcher.get_prompt("nope", {}) == {"error": "Unknown prompt: nope"}
    missing = dispatcher.get_prompt("refactor_suggest", {})
    assert is_error(missing)
    assert "file_path" in missing["error"]


def test_render_json_and_error_helpers() -> None:
    payload = error_payload("boom")
    assert is_error(payload)
    assert not is_error({"error": "x", "other": 1})
    assert render_json({"name": "café"}) == '{\n  "name": "café"\n}'
