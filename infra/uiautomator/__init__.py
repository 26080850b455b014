from infra.uiautomator.parser import (
    DEFAULT_PARSER,
    DumpTooLargeError,
    UiElement,
    UiTreeParser,
    parse_bounds,
    parse_ui_tree,
)
from infra.uiautomator.query import (
    Criteria,
    WaitResult,
    clamp_timeout,
    find_first,
    wait_for,
)

__all__ = [
    "DEFAULT_PARSER",
    "DumpTooLargeError",
    "UiElement",
    "UiTreeParser",
    "parse_bounds",
    "parse_ui_tree",
    "Criteria",
    "WaitResult",
    "clamp_timeout",
    "find_first",
    "wait_for",
]
