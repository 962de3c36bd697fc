import threading
import time

import pytest

from utils.exceptions import NotClickableError, WaitTimeoutError
from utils.wait_helper import WaitHelper
from fake_driver import FakeElement, FakePage

BUTTON = "[data-test='finish']"
ERROR = "[data-test='error']"
LIST = "[data-test='inventory-list']"


def later(seconds: float, fn):
    timer = threading.Timer(seconds, fn)
    timer.start()
    return timer


@pytest.fixture
def waiter(fake_page):
    return WaitHelper(fake_page, poll_interval=10)


class TestWaitForVisible:

    def test_visible_immediately(self, fake_page, waiter):
        fake_page.elements[BUTTON] = [FakeElement("Finish")]
        start = time.monotonic()
        waiter.wait_for_visible(BUTTON, timeout=1000)
        assert time.monotonic() - start < 0.5

    def test_becomes_visible_later(self, fake_page, waiter):
        element = FakeElement("Finish", visible=False)
        fake_page.elements[BUTTON] = [element]
        timer = later(0.1, lambda: setattr(element, "visible", True))
        waiter.wait_for_visible(BUTTON, timeout=2000)
        timer.join()

    def test_timeout_carries_selector_and_timeout(self, waiter):
        start = time.monotonic()
        with pytest.raises(WaitTimeoutError) as exc:
            waiter.wait_for_visible(BUTTON, timeout=200)
        elapsed = time.monotonic() - start
        assert 0.19 <= elapsed < 1.0, "超时上限要被遵守"
        assert exc.value.selector == BUTTON
        assert exc.value.timeout == 200
        assert isinstance(exc.value, TimeoutError)


class TestWaitForClickable:

    def test_disabled_element_raises_not_clickable(self, fake_page, waiter):
        fake_page.elements[BUTTON] = [FakeElement("Finish", enabled=False)]
        with pytest.raises(NotClickableError) as exc:
            waiter.wait_for_clickable(BUTTON, timeout=150)
        assert exc.value.selector == BUTTON

    def test_missing_element_raises_timeout(self, waiter):
        with pytest.raises(WaitTimeoutError):
            waiter.wait_for_clickable(BUTTON, timeout=100)

    def test_becomes_enabled(self, fake_page, waiter):
        element = FakeElement("Finish", enabled=False)
        fake_page.elements[BUTTON] = [element]
        timer = later(0.1, lambda: setattr(element, "enabled", True))
        waiter.wait_for_clickable(BUTTON, timeout=2000)
        timer.join()


class TestWaitForHidden:

    def test_absent_element_is_hidden(self, waiter):
        waiter.wait_for_hidden(BUTTON, timeout=100)

    def test_still_visible_raises(self, fake_page, waiter):
        fake_page.elements[BUTTON] = [FakeElement()]
        with pytest.raises(WaitTimeoutError):
            waiter.wait_for_hidden(BUTTON, timeout=100)


class TestWaitForStablePosition:

    def test_resolves_only_after_movement_stops(self, fake_page):
        """前 400ms 一直在动，stable_time=500ms：至少 ~0.9s 后才返回"""
        start = time.monotonic()

        def moving_box():
            elapsed = time.monotonic() - start
            y = 0 if elapsed >= 0.4 else round(elapsed * 1000) + 1
            return {"x": 0, "y": y, "width": 10, "height": 10}

        fake_page.elements[BUTTON] = [FakeElement(box=moving_box)]
        WaitHelper(fake_page).wait_for_stable_position(BUTTON, poll_interval=100, stable_time=500, timeout=5000)
        elapsed = time.monotonic() - start
        assert elapsed >= 0.85, f"位置稳定判定过早：{elapsed:.2f}s"
        assert elapsed < 3.0

    def test_never_stable_times_out(self, fake_page):
        fake_page.elements[BUTTON] = [FakeElement(box=lambda: {"x": 0, "y": time.monotonic(), "width": 1, "height": 1})]
        start = time.monotonic()
        with pytest.raises(WaitTimeoutError):
            WaitHelper(fake_page).wait_for_stable_position(BUTTON, poll_interval=20, stable_time=100, timeout=300)
        assert time.monotonic() - start < 1.0

    def test_timeout_not_overrun_by_poll_interval(self, fake_page):
        """poll_interval 接近 timeout 时，也要在 timeout 附近超时"""
        fake_page.elements[BUTTON] = [FakeElement(box=lambda: {"x": 0, "y": time.monotonic(), "width": 1, "height": 1})]
        start = time.monotonic()
        with pytest.raises(WaitTimeoutError):
            WaitHelper(fake_page).wait_for_stable_position(BUTTON, poll_interval=500, stable_time=1000, timeout=600)
        elapsed = time.monotonic() - start
        assert 0.55 <= elapsed < 0.85, f"超时时间不准：{elapsed:.2f}s"

    def test_missing_box_never_counts_as_stable(self, fake_page):
        fake_page.elements[BUTTON] = [FakeElement(visible=False)]
        with pytest.raises(WaitTimeoutError):
            WaitHelper(fake_page).wait_for_stable_position(BUTTON, poll_interval=20, stable_time=60, timeout=300)


class TestWaitForAnyOf:

    def test_returns_the_visible_one(self, fake_page, waiter):
        fake_page.elements[LIST] = [FakeElement()]
        assert waiter.wait_for_any_of([ERROR, LIST], timeout=500) == LIST

    def test_first_to_appear_wins(self, fake_page, waiter):
        timer = later(0.1, lambda: fake_page.elements.update({ERROR: [FakeElement("Epic sadface")]}))
        assert waiter.wait_for_any_of([ERROR, LIST], timeout=2000) == ERROR
        timer.join()

    def test_none_visible_lists_all_selectors(self, waiter):
        with pytest.raises(WaitTimeoutError) as exc:
            waiter.wait_for_any_of([ERROR, LIST], timeout=100)
        assert exc.value.selectors == [ERROR, LIST]


class TestOtherWaits:

    def test_wait_for_text(self, fake_page, waiter):
        element = FakeElement("Loading")
        fake_page.elements[ERROR] = [element]
        timer = later(0.05, lambda: setattr(element, "text", "Epic sadface: Username is required"))
        waiter.wait_for_text(ERROR, "Username is required", timeout=2000)
        timer.join()

    def test_wait_for_url(self, fake_page, waiter):
        fake_page.url = "https://shop.test/"
        with pytest.raises(WaitTimeoutError):
            waiter.wait_for_url(r"/inventory\.html", timeout=50)
        fake_page.url = "https://shop.test/inventory.html"
        waiter.wait_for_url(r"/inventory\.html", timeout=50)

    def test_wait_for_load_wraps_driver_error(self):
        page = FakePage()
        page.load_error = "Timeout 100ms exceeded"
        with pytest.raises(WaitTimeoutError):
            WaitHelper(page).wait_for_load("load", timeout=100)

    def test_delay(self):
        start = time.monotonic()
        WaitHelper.delay(50)
        WaitHelper.delay(0)
        assert time.monotonic() - start >= 0.05
