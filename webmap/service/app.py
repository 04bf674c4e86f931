"""FastAPI application exposing webmap tools, resources and prompts over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from .. import __version__
from ..dispatcher import Dispatcher
from ..errors import UnknownOperation, UnknownPrompt, UnknownResource
from ..prompts import PROMPTS
from ..resources import MIME_TYPE, RESOURCES


class HealthResponse(BaseModel):
    status: str
    root: str


class ToolInfo(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class ToolsResponse(BaseModel):
    tools: List[ToolInfo]


class ResourceInfo(BaseModel):
    uri: str
    name: str
    description: str
    mimeType: str


class ResourcesResponse(BaseModel):
    resources: List[ResourceInfo]


class ResourceContent(BaseModel):
    uri: str
    mimeType: str = MIME_TYPE
    data: Dict[str, Any]


class PromptArgument(BaseModel):
    name: str
    description: str
    required: bool


class PromptInfo(BaseModel):
    name: str
    description: str
    arguments: List[PromptArgument]


class PromptsResponse(BaseModel):
    prompts: List[PromptInfo]


class PromptRequest(BaseModel):
    arguments: Dict[str, str] = Field(default_factory=dict)


_RESOURCE_URIS = {spec.uri for spec in RESOURCES}
_PROMPT_NAMES = {prompt.name for prompt in PROMPTS}


async def _in_executor(func: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(dispatcher_factory: Callable[[], Dispatcher]) -> FastAPI:
    """Create the FastAPI application for the project bound by ``dispatcher_factory``."""

    app = FastAPI(title="webmap", version=__version__)

    async def get_dispatcher() -> Dispatcher:
        return dispatcher_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health(dispatcher: Dispatcher = Depends(get_dispatcher)) -> HealthResponse:
        return HealthResponse(status="ok", root=str(dispatcher.root))

    @app.get("/tools", response_model=ToolsResponse)
    async def list_tools(dispatcher: Dispatcher = Depends(get_dispatcher)) -> ToolsResponse:
        return ToolsResponse(tools=[ToolInfo(**item) for item in dispatcher.list_operations()])

    @app.post("/tools/{name}")
    async def call_tool(
        name: str,
        metadata: bool = False,
        dispatcher: Dispatcher = Depends(get_dispatcher),
    ) -> Dict[str, Any]:
        if name not in {item["name"] for item in dispatcher.list_operations()}:
            raise HTTPException(status_code=404, detail=str(UnknownOperation(name)))
        return await _in_executor(lambda: dispatcher.run(name, include_metadata=metadata))

    @app.get("/resources", response_model=ResourcesResponse)
    async def list_resources(dispatcher: Dispatcher = Depends(get_dispatcher)) -> ResourcesResponse:
        return ResourcesResponse(
            resources=[ResourceInfo(**item) for item in dispatcher.list_resources()]
        )

    @app.get("/resources/read", response_model=ResourceContent)
    async def read_resource(
        uri: str, dispatcher: Dispatcher = Depends(get_dispatcher)
    ) -> ResourceContent:
        if uri not in _RESOURCE_URIS:
            raise HTTPException(status_code=404, detail=str(UnknownResource(uri)))
        data = await _in_executor(lambda: dispatcher.read_resource(uri))
        return ResourceContent(uri=uri, data=data)

    @app.get("/prompts", response_model=PromptsResponse)
    async def list_prompts(dispatcher: Dispatcher = Depends(get_dispatcher)) -> PromptsResponse:
        return PromptsResponse(prompts=[PromptInfo(**item) for item in dispatcher.list_prompts()])

    @app.post("/prompts/{name}")
    async def get_prompt(
        name: str,
        payload: PromptRequest,
        dispatcher: Dispatcher = Depends(get_dispatcher),
    ) -> Dict[str, Any]:
        if name not in _PROMPT_NAMES:
            raise HTTPException(status_code=404, detail=str(UnknownPrompt(name)))
        return dispatcher.get_prompt(name, payload.arguments)

    return app


def run_service(
    dispatcher: Dispatcher, host: str = "127.0.0.1", port: int = 8765
) -> None:  # pragma: no cover - integration path
    app = create_app(lambda: dispatcher)
    uvicorn.run(app, host=host, port=port, log_level="warning")
