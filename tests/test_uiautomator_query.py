from infra.uiautomator import Criteria, UiElement, clamp_timeout, find_first, wait_for

from fakes import hierarchy, node


def test_text_match_is_case_insensitive_and_first_in_document_order():
    elements = [
        UiElement(text="cancel", clickable=True),
        UiElement(text="submit", clickable=True),
        UiElement(text="Submit again", clickable=True),
    ]

    found = find_first(elements, text="Submit")

    assert found is elements[1]


def test_criteria_are_disjunctive():
    elements = [
        UiElement(text="Other", resource_id="com.example:id/login"),
        UiElement(text="Login", resource_id="com.example:id/other"),
    ]

    # the first element matches on resource id alone
    found = find_first(elements, text="login", resource_id="id/login")

    assert found is elements[0]


def test_resource_id_and_class_name_are_case_sensitive():
    elements = [UiElement(resource_id="com.example:id/Login", class_name="android.widget.Button")]

    assert find_first(elements, resource_id="id/login") is None
    assert find_first(elements, resource_id="id/Login") is elements[0]
    assert find_first(elements, class_name="button") is None
    assert find_first(elements, class_name="Button") is elements[0]


def test_content_desc_is_case_insensitive():
    elements = [UiElement(content_desc="Navigate up")]

    assert find_first(elements, content_desc="NAVIGATE") is elements[0]


def test_no_match_or_empty_inputs_return_none():
    elements = [UiElement(text="Hello")]

    assert find_first(elements, text="bye") is None
    assert find_first([], text="Hello") is None
    assert find_first(elements) is None
    assert find_first(elements, text="") is None


def test_clamp_timeout_bounds():
    assert clamp_timeout(None) == 5000
    assert clamp_timeout(0) == 5000
    assert clamp_timeout(10) == 1000
    assert clamp_timeout(2500) == 2500
    assert clamp_timeout(10 ** 9) == 60000


class Ticker:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_wait_for_returns_match_after_polling():
    ticker = Ticker()
    dumps = [hierarchy(node(text="Loading")), hierarchy(node(text="Loading")), hierarchy(node(text="Ready"))]

    result = wait_for(
        lambda: dumps.pop(0),
        Criteria(text="ready"),
        timeout_ms=5000,
        clock=ticker.clock,
        sleep=ticker.sleep,
    )

    assert result.found
    assert result.element.text == "Ready"
    assert result.elapsed_ms == 1000
    assert ticker.sleeps == [0.5, 0.5]


def test_wait_for_timeout_reports_clamped_elapsed_time():
    ticker = Ticker()

    result = wait_for(
        lambda: hierarchy(node(text="Loading")),
        Criteria(text="never"),
        timeout_ms=10 ** 7,
        clock=ticker.clock,
        sleep=ticker.sleep,
    )

    assert not result.found
    assert result.timeout_ms == 60000
    assert result.elapsed_ms <= 60000


def test_wait_for_ignores_errors_while_polling():
    ticker = Ticker()
    calls = []

    def acquire():
        calls.append(1)
        if len(calls) < 3:
            raise RuntimeError("device offline")
        return hierarchy(node(text="Ready"))

    result = wait_for(acquire, Criteria(text="Ready"), clock=ticker.clock, sleep=ticker.sleep)

    assert result.found
    assert len(calls) == 3
