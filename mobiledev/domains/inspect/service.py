import time
from typing import Any, Callable, Dict, List, Optional

from infra.adb import AdbClient
from infra.uiautomator import (
    Criteria,
    UiElement,
    UiTreeParser,
    find_first,
    wait_for,
)
from ...constants import MAX_GOAL_LEN, MAX_SEARCH_LEN
from ..policy import TierLimits
from ..tools.result import ToolResult
from ..tools.schemas import (
    AssertElementArgs,
    DeviceArgs,
    ElementPropertyArgs,
    ElementQueryArgs,
    SuggestActionArgs,
    UiTreeArgs,
    WaitForElementArgs,
)

SEARCH_TOO_LONG = "Search parameters too long (max {} chars)".format(MAX_SEARCH_LEN)

ELEMENT_PROPERTIES = {
    "text": "text",
    "resourceId": "resource_id",
    "className": "class_name",
    "contentDescription": "content_desc",
    "bounds": "bounds",
    "clickable": "clickable",
    "enabled": "enabled",
    "focused": "focused",
    "selected": "selected",
    "checked": "checked",
    "scrollable": "scrollable",
    "centerX": "center_x",
    "centerY": "center_y",
}

# goal keyword -> (element keywords, reasoning)
GOAL_HINTS = (
    ("login", ("login", "log in", "sign in"), "This button appears to initiate login"),
    ("settings", ("setting",), "This navigates to settings"),
    ("back", ("back",), "This goes back"),
)


def criteria_from(args: ElementQueryArgs) -> Criteria:
    return Criteria(
        text=args.text,
        resource_id=args.resource_id,
        content_desc=args.content_desc,
        class_name=args.class_name,
    )


def center_of(element: UiElement) -> Optional[Dict[str, int]]:
    center = element.center
    if center is None:
        return None
    return {"x": center[0], "y": center[1]}


def describe_element(element: UiElement) -> Dict[str, Any]:
    return {
        "text": element.text,
        "resourceId": element.resource_id,
        "className": element.class_name,
        "contentDescription": element.content_desc,
        "bounds": element.bounds,
        "center": center_of(element),
        "clickable": element.clickable,
        "enabled": element.enabled,
    }


def read_property(element: UiElement, name: str):
    if name == "center":
        return center_of(element)
    attr = ELEMENT_PROPERTIES.get(name)
    return getattr(element, attr) if attr else None


def _too_long(criteria: Criteria) -> bool:
    return any(
        value and len(value) > MAX_SEARCH_LEN
        for value in (
            criteria.text,
            criteria.resource_id,
            criteria.content_desc,
            criteria.class_name,
        )
    )


class InspectService:
    def __init__(
        self,
        adb: AdbClient,
        parser: UiTreeParser,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.adb = adb
        self.parser = parser
        self._clock = clock
        self._sleep = sleep

    def elements(self, device: Optional[str]) -> List[UiElement]:
        return self.parser.parse(self.adb.for_device(device).dump_ui())

    def get_ui_tree(self, args: UiTreeArgs, limits: TierLimits) -> ToolResult:
        elements = self.elements(args.device)
        if args.compressed:
            elements = [
                el for el in elements if el.clickable or el.text or el.content_desc
            ]
        return ToolResult.json(
            {
                "elementCount": len(elements),
                "elements": [
                    {
                        "text": el.text,
                        "resourceId": el.resource_id,
                        "className": el.short_class,
                        "contentDescription": el.content_desc,
                        "bounds": el.bounds,
                        "clickable": el.clickable,
                        "center": center_of(el),
                    }
                    for el in elements
                ],
            }
        )

    def find_element(self, args: ElementQueryArgs, limits: TierLimits) -> ToolResult:
        criteria = criteria_from(args)
        if _too_long(criteria):
            return ToolResult.text(SEARCH_TOO_LONG)
        found = find_first(
            self.elements(args.device),
            text=criteria.text,
            resource_id=criteria.resource_id,
            content_desc=criteria.content_desc,
            class_name=criteria.class_name,
        )
        if found is None:
            return ToolResult.json({"found": False})
        return ToolResult.json({"found": True, "element": describe_element(found)})

    def wait_for_element(self, args: WaitForElementArgs, limits: TierLimits) -> ToolResult:
        criteria = criteria_from(args)
        if _too_long(criteria):
            return ToolResult.text(SEARCH_TOO_LONG)
        adb = self.adb.for_device(args.device)
        result = wait_for(
            adb.dump_ui,
            criteria,
            timeout_ms=args.timeout,
            parser=self.parser,
            clock=self._clock,
            sleep=self._sleep,
        )
        if not result.found:
            return ToolResult.json(
                {"found": False, "timeout": True, "waitTime": result.elapsed_ms}
            )
        return ToolResult.json(
            {
                "found": True,
                "waitTime": result.elapsed_ms,
                "element": {
                    "text": result.element.text,
                    "center": center_of(result.element),
                },
            }
        )

    def _lookup(self, args: ElementQueryArgs) -> Optional[UiElement]:
        criteria = criteria_from(args)
        return find_first(
            self.elements(args.device),
            text=criteria.text,
            resource_id=criteria.resource_id,
            content_desc=criteria.content_desc,
            class_name=criteria.class_name,
        )

    def get_element_property(self, args: ElementPropertyArgs, limits: TierLimits) -> ToolResult:
        if _too_long(criteria_from(args)):
            return ToolResult.text(SEARCH_TOO_LONG)
        found = self._lookup(args)
        if found is None:
            return ToolResult.json({"error": "Element not found"})
        if args.prop not in ELEMENT_PROPERTIES and args.prop != "center":
            return ToolResult.json({"error": "Unknown property: {}".format(args.prop)})
        return ToolResult.json({args.prop: read_property(found, args.prop)})

    def assert_element(self, args: AssertElementArgs, limits: TierLimits) -> ToolResult:
        if _too_long(criteria_from(args)):
            return ToolResult.text(SEARCH_TOO_LONG)
        found = self._lookup(args)
        exists = found is not None
        passed = exists == args.should_exist
        failures = []
        if not passed:
            failures.append("expected exists={}".format(args.should_exist))
        if exists and args.should_exist:
            if args.is_enabled is not None and found.enabled != args.is_enabled:
                failures.append("expected enabled={}".format(args.is_enabled))
            if args.is_checked is not None and found.checked != args.is_checked:
                failures.append("expected checked={}".format(args.is_checked))
        return ToolResult.json(
            {
                "passed": not failures,
                "exists": exists,
                "shouldExist": args.should_exist,
                "failures": failures,
                "element": {
                    "text": found.text,
                    "enabled": found.enabled,
                    "checked": found.checked,
                }
                if found
                else None,
            }
        )

    def suggest_action(self, args: SuggestActionArgs, limits: TierLimits) -> ToolResult:
        goal = args.goal
        if not goal.strip():
            return ToolResult.text("Goal parameter is required and must be a string")
        if len(goal) > MAX_GOAL_LEN:
            return ToolResult.text("Goal too long (max {} chars)".format(MAX_GOAL_LEN))
        clickable = [el for el in self.elements(args.device) if el.clickable and el.label]
        goal_lower = goal.lower()
        suggestions = []
        for el in clickable:
            label = el.label.lower()
            for goal_word, keywords, reasoning in GOAL_HINTS:
                if goal_word in goal_lower and any(word in label for word in keywords):
                    suggestions.append(
                        {"action": "tap", "target": el.label, "reasoning": reasoning}
                    )
            if "search" in goal_lower and ("search" in label or "EditText" in el.class_name):
                suggestions.append(
                    {
                        "action": "input" if "EditText" in el.class_name else "tap",
                        "target": el.label or "search field",
                        "reasoning": "This appears to be a search input",
                    }
                )
        if not suggestions and clickable:
            suggestions.append(
                {
                    "action": "analyze",
                    "target": "screen",
                    "reasoning": 'No direct match for "{}". {} clickable elements found. '
                    "Use analyze_screen for details.".format(goal, len(clickable)),
                }
            )
        return ToolResult.json(
            {
                "goal": goal,
                "suggestions": suggestions,
                "clickableElementCount": len(clickable),
                "note": "These are SUGGESTIONS only. This server is read-only and does not perform actions.",
            }
        )

    def analyze_screen(self, args: DeviceArgs, limits: TierLimits) -> ToolResult:
        elements = self.elements(args.device)
        return ToolResult.json(
            {
                "totalElements": len(elements),
                "clickableElements": sum(1 for el in elements if el.clickable),
                "textElements": sum(1 for el in elements if el.text),
                "inputFields": sum(1 for el in elements if "EditText" in el.class_name),
                "buttons": sum(1 for el in elements if "Button" in el.class_name),
                "visibleText": [el.text for el in elements if el.text][:20],
                "interactiveElements": [
                    {"text": el.label, "type": el.short_class, "bounds": el.bounds}
                    for el in elements
                    if el.clickable and el.label
                ][:15],
            }
        )

    def get_screen_text(self, args: DeviceArgs, limits: TierLimits) -> ToolResult:
        texts: List[str] = []
        for el in self.elements(args.device):
            if el.label and el.label not in texts:
                texts.append(el.label)
        return ToolResult.json({"textCount": len(texts), "text": texts})
