"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from webmap.dispatcher import Dispatcher
from webmap.service import create_app


@pytest.fixture
def client(project) -> TestClient:
    project.write_manifest({"name": "shop", "dependencies": {"react": "^18.2.0"}})
    project.write(
        {
            "src/App.tsx": """
                import { useState } from "react";
                export default function App() {
                  const [n] = useState(0);
                  return <Route path="/home" element={<div className="flex" />} />;
                }
            """,
        }
    )
    return TestClient(create_app(project.dispatcher))


def test_health_endpoint(client: TestClient, project) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "root": str(project.path().resolve())}


def test_list_tools(client: TestClient) -> None:
    response = client.get("/tools")
    assert response.status_code == 200
    names = [tool["name"] for tool in response.json()["tools"]]
    assert names[0] == "analyze_project"
    assert "analyze_database_schema" in names


def test_call_tool(client: TestClient) -> None:
    response = client.post("/tools/get_routing_structure")
    assert response.status_code == 200
    body = response.json()
    assert [route["path"] for route in body["routes"]] == ["/home"]


def test_call_tool_with_metadata(client: TestClient, project) -> None:
    response = client.post("/tools/get_components", params={"metadata": "true"})
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["kind"] == "get_components"
    assert body["metadata"]["root"] == str(project.path().resolve())
    assert body["report"]["totalComponents"] == 1


def test_call_tool_returns_error_payload(tmp_path) -> None:
    root = tmp_path / "bare"
    root.mkdir()
    client = TestClient(create_app(lambda: Dispatcher(root)))

    response = client.post("/tools/analyze_dependencies")

    assert response.status_code == 200
    assert response.json() == {"error": "No package.json found"}


def test_unknown_tool_is_404(client: TestClient) -> None:
    response = client.post("/tools/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown tool: nope"


def test_resources(client: TestClient) -> None:
    listing = client.get("/resources").json()["resources"]
    assert [item["uri"] for item in listing][0] == "project://structure"

    response = client.get("/resources/read", params={"uri": "project://package"})
    assert response.status_code == 200
    body = response.json()
    assert body["uri"] == "project://package"
    assert body["mimeType"] == "application/json"
    assert body["data"]["name"] == "shop"


def test_unknown_resource_is_404(client: TestClient) -> None:
    response = client.get("/resources/read", params={"uri": "project://nope"})
    assert response.status_code == 404


def test_prompts(client: TestClient) -> None:
    listing = client.get("/prompts").json()["prompts"]
    assert listing[0]["arguments"][0] == {
        "name": "component_path",
        "description": "Path to the component file",
        "required": True,
    }

    response = client.post(
        "/prompts/code_review", json={"arguments": {"component_path": "src/App.tsx"}}
    )
    assert response.status_code == 200
    text = response.json()["messages"][0]["content"]["text"]
    assert "src/App.tsx" in text


def test_prompt_missing_argument_returns_error_payload(client: TestClient) -> None:
    response = client.post("/prompts/refactor_suggest", json={})
    assert response.status_code == 200
    assert "error" in response.json()


def test_unknown_prompt_is_404(client: TestClient) -> None:
    response = client.post("/prompts/nope", json={})
    assert response.status_code == 404
