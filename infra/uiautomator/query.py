import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from infra.uiautomator.parser import DEFAULT_PARSER, UiElement, UiTreeParser
from shared.utils.geometry import clamp

logger = logging.getLogger("infra.uiautomator")

MIN_WAIT_MS = 1000
MAX_WAIT_MS = 60000
DEFAULT_WAIT_MS = 5000
POLL_INTERVAL_MS = 500


@dataclass(frozen=True)
class Criteria:
    text: Optional[str] = None
    resource_id: Optional[str] = None
    content_desc: Optional[str] = None
    class_name: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.text or self.resource_id or self.content_desc or self.class_name)

    def matches(self, element: UiElement) -> bool:
        # Any one criterion is enough; they are checked in this fixed order.
        if self.text and self.text.lower() in element.text.lower():
            return True
        if self.resource_id and self.resource_id in element.resource_id:
            return True
        if self.content_desc and self.content_desc.lower() in element.content_desc.lower():
            return True
        if self.class_name and self.class_name in element.class_name:
            return True
        return False


@dataclass(frozen=True)
class WaitResult:
    element: Optional[UiElement]
    elapsed_ms: int
    timeout_ms: int

    @property
    def found(self) -> bool:
        return self.element is not None


def find_first(
    elements: Iterable[UiElement],
    text: Optional[str] = None,
    resource_id: Optional[str] = None,
    content_desc: Optional[str] = None,
    class_name: Optional[str] = None,
) -> Optional[UiElement]:
    """Return the first element, in document order, matching any criterion.

    Matching is disjunctive: passing both ``text`` and ``resource_id`` returns
    the first element that satisfies either of them. ``text`` and
    ``content_desc`` are case-insensitive substring checks, ``resource_id``
    and ``class_name`` are case-sensitive substring checks.
    """
    criteria = Criteria(text, resource_id, content_desc, class_name)
    if criteria.is_empty():
        return None
    for element in elements:
        if criteria.matches(element):
            return element
    return None


def clamp_timeout(timeout_ms) -> int:
    if not timeout_ms:
        timeout_ms = DEFAULT_WAIT_MS
    return int(clamp(int(timeout_ms), MIN_WAIT_MS, MAX_WAIT_MS))


def wait_for(
    acquire: Callable[[], str],
    criteria: Criteria,
    timeout_ms=None,
    interval_ms: int = POLL_INTERVAL_MS,
    parser: Optional[UiTreeParser] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    parser = parser or DEFAULT_PARSER
    timeout = clamp_timeout(timeout_ms)
    start = clock()

    def elapsed_ms():
        return int((clock() - start) * 1000)

    while elapsed_ms() < timeout:
        try:
            elements = parser.parse(acquire())
        except Exception as exc:
            logger.debug("ui poll failed: %s", exc)
        else:
            found = find_first(
                elements,
                text=criteria.text,
                resource_id=criteria.resource_id,
                content_desc=criteria.content_desc,
                class_name=criteria.class_name,
            )
            if found:
                return WaitResult(found, elapsed_ms(), timeout)
        sleep(interval_ms / 1000.0)
    return WaitResult(None, min(elapsed_ms(), timeout), timeout)
