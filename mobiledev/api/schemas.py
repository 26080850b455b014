from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolContentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    text: Optional[str] = None
    data: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")


class ToolCallResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: List[ToolContentModel]
    is_error: bool = Field(default=False, alias="isError")


class ToolInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    tier: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")
