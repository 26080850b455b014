import logging
import re
from dataclasses import asdict, dataclass
from html import unescape
from typing import Dict, List, Optional, Tuple

from shared.utils.geometry import bounds_center

logger = logging.getLogger("infra.uiautomator")

MAX_DUMP_CHARS = 10 * 1024 * 1024
MAX_ELEMENTS = 50000

_NODE_RE = re.compile(r"<node[^>]+>")
_BOUNDS_RE = re.compile(r"\[(\d+),(\d+)\]\[(\d+),(\d+)\]")
_ATTR_RES = {
    name: re.compile(r'(?<![\w-]){}="([^"]*)"'.format(re.escape(name)))
    for name in (
        "text",
        "resource-id",
        "class",
        "content-desc",
        "bounds",
        "clickable",
        "enabled",
        "focused",
        "selected",
        "checked",
        "scrollable",
    )
}


class DumpTooLargeError(ValueError):
    def __init__(self, size, limit):
        super().__init__(
            "UI dump exceeds maximum size ({} > {} chars)".format(size, limit)
        )
        self.size = size
        self.limit = limit


@dataclass(frozen=True)
class UiElement:
    text: str = ""
    resource_id: str = ""
    class_name: str = ""
    content_desc: str = ""
    bounds: str = ""
    clickable: bool = False
    enabled: bool = False
    focused: bool = False
    selected: bool = False
    checked: bool = False
    scrollable: bool = False
    center_x: Optional[int] = None
    center_y: Optional[int] = None

    @property
    def center(self) -> Optional[Tuple[int, int]]:
        if self.center_x is None or self.center_y is None:
            return None
        return self.center_x, self.center_y

    @property
    def label(self) -> str:
        return self.text or self.content_desc

    @property
    def short_class(self) -> str:
        return self.class_name.rsplit(".", 1)[-1]

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class UiTreeParser:
    """Flattens a uiautomator XML dump into ``UiElement`` records.

    Nodes are found by scanning for ``<node ...>`` declarations rather than by
    building an XML tree, so truncated or slightly malformed dumps still yield
    every complete node that precedes the damage. Results keep document order.
    """

    def __init__(self, max_chars: int = MAX_DUMP_CHARS, max_elements: int = MAX_ELEMENTS):
        self.max_chars = max_chars
        self.max_elements = max_elements

    def parse_bounds(self, bounds: str) -> Optional[Tuple[int, int, int, int]]:
        match = _BOUNDS_RE.search(bounds or "")
        if not match:
            return None
        left, top, right, bottom = (int(group) for group in match.groups())
        return left, top, right, bottom

    def parse(self, dump: str) -> List[UiElement]:
        dump = dump or ""
        if len(dump) > self.max_chars:
            raise DumpTooLargeError(len(dump), self.max_chars)
        elements: List[UiElement] = []
        for match in _NODE_RE.finditer(dump):
            if len(elements) >= self.max_elements:
                logger.debug("ui dump truncated at %d elements", self.max_elements)
                break
            elements.append(self._build_element(match.group(0)))
        return elements

    def _build_element(self, node: str) -> UiElement:
        def attr(name):
            match = _ATTR_RES[name].search(node)
            return unescape(match.group(1)) if match else ""

        bounds = attr("bounds")
        center_x = center_y = None
        rect = self.parse_bounds(bounds)
        if rect:
            center_x, center_y = bounds_center(rect)
        return UiElement(
            text=attr("text"),
            resource_id=attr("resource-id"),
            class_name=attr("class"),
            content_desc=attr("content-desc"),
            bounds=bounds,
            clickable=attr("clickable") == "true",
            enabled=attr("enabled") == "true",
            focused=attr("focused") == "true",
            selected=attr("selected") == "true",
            checked=attr("checked") == "true",
            scrollable=attr("scrollable") == "true",
            center_x=center_x,
            center_y=center_y,
        )


DEFAULT_PARSER = UiTreeParser()


def parse_bounds(bounds: str) -> Optional[Tuple[int, int, int, int]]:
    return DEFAULT_PARSER.parse_bounds(bounds)


def parse_ui_tree(dump: str) -> List[UiElement]:
    return DEFAULT_PARSER.parse(dump)
