import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ToolContent:
    type: str
    text: Optional[str] = None
    data: Optional[str] = None
    mime_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        if self.text is not None:
            payload["text"] = self.text
        if self.data is not None:
            payload["data"] = self.data
        if self.mime_type is not None:
            payload["mimeType"] = self.mime_type
        return payload


@dataclass
class ToolResult:
    content: List[ToolContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ToolResult":
        return cls(content=[ToolContent(type="text", text=text)], is_error=is_error)

    @classmethod
    def json(cls, payload: Any) -> "ToolResult":
        return cls.text(json.dumps(payload, indent=2))

    @classmethod
    def image(cls, caption: str, data: str, mime_type: str = "image/png") -> "ToolResult":
        return cls(
            content=[
                ToolContent(type="text", text=caption),
                ToolContent(type="image", data=data, mime_type=mime_type),
            ]
        )

    @property
    def first_text(self) -> str:
        for item in self.content:
            if item.type == "text" and item.text is not None:
                return item.text
        return ""

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": [item.to_dict() for item in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload
