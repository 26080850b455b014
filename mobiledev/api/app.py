import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request

from ..container import Container
from ..domains.tools.result import ToolResult
from .schemas import ToolCallRequest, ToolCallResponse, ToolContentModel, ToolInfo

router = APIRouter()


def _container(request: Request) -> Container:
    return request.app.state.container


def _to_response(result: ToolResult) -> ToolCallResponse:
    return ToolCallResponse(
        content=[
            ToolContentModel(
                type=item.type, text=item.text, data=item.data, mime_type=item.mime_type
            )
            for item in result.content
        ],
        is_error=result.is_error,
    )


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/tools", response_model=List[ToolInfo], response_model_by_alias=True)
async def list_tools(request: Request) -> List[ToolInfo]:
    dispatcher = _container(request).dispatcher
    specs = await asyncio.to_thread(dispatcher.list_tools)
    return [
        ToolInfo(
            name=spec.name,
            description=spec.description,
            tier=spec.tier.value,
            input_schema=spec.input_schema(),
        )
        for spec in specs
    ]


@router.post(
    "/tools/{name}", response_model=ToolCallResponse, response_model_by_alias=True
)
async def call_tool(name: str, payload: ToolCallRequest, request: Request) -> ToolCallResponse:
    dispatcher = _container(request).dispatcher
    if name not in dispatcher.catalogue:
        raise HTTPException(status_code=404, detail="Unknown tool: {}".format(name))
    result = await asyncio.to_thread(dispatcher.call, name, payload.arguments)
    return _to_response(result)


@router.get("/license")
async def license_status(request: Request) -> Dict[str, Any]:
    license_service = _container(request).license
    return await asyncio.to_thread(license_service.status)
