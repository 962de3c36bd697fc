import math
import re
import time
from typing import Callable, Optional, Sequence

from playwright.sync_api import Page, Error as PlaywrightError

from utils.exceptions import NotClickableError, WaitTimeoutError


class WaitHelper:
    """
    轮询式等待：只用 driver 的即时查询（is_visible / is_enabled / bounding_box ...）拼出等待，
    每个等待都有明确的 timeout 上限，超时抛带 selector + timeout 的异常。
    时间单位都是毫秒。
    """

    def __init__(self, page: Page, poll_interval: int = 100):
        self.page = page
        self.poll_interval = poll_interval

    # ========= 轮询核心 =========
    @staticmethod
    def _check(condition: Callable[[], bool]) -> bool:
        try:
            return bool(condition())
        except PlaywrightError:
            # 元素正在重渲染/已脱离DOM，本次采样视为不满足
            return False

    def _poll(self, condition: Callable[[], bool], timeout: float) -> bool:
        deadline = time.monotonic() + timeout / 1000
        while True:
            if self._check(condition):
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(self.poll_interval / 1000, remaining))

    def _first(self, selector: str):
        return self.page.locator(selector).first

    def _box(self, selector: str) -> Optional[dict]:
        try:
            return self._first(selector).bounding_box()
        except PlaywrightError:
            return None

    # ========= 元素状态等待 =========
    def wait_for_visible(self, selector: str, timeout: float = 10_000):
        if not self._poll(lambda: self._first(selector).is_visible(), timeout):
            raise WaitTimeoutError(f"元素 {selector} 在 {timeout}ms 内未出现", selector, timeout)

    def wait_for_clickable(self, selector: str, timeout: float = 10_000):
        start = time.monotonic()
        self.wait_for_visible(selector, timeout)
        remaining = max(timeout - (time.monotonic() - start) * 1000, 0)
        if not self._poll(lambda: self._first(selector).is_enabled(), remaining):
            raise NotClickableError(f"元素 {selector} 可见但在 {timeout}ms 内一直是 disabled", selector, timeout)

    def wait_for_hidden(self, selector: str, timeout: float = 10_000):
        if not self._poll(lambda: not self._first(selector).is_visible(), timeout):
            raise WaitTimeoutError(f"元素 {selector} 在 {timeout}ms 内未消失", selector, timeout)

    def wait_for_stable_position(self, selector: str, poll_interval: float = 100, stable_time: float = 500,
                                 timeout: float = 10_000):
        """
        等元素位置稳定（动画/重排结束）：
        每 poll_interval 采样一次 bounding box，和上一次相同则计数+1，不同则清零，
        连续相同的次数覆盖 stable_time 后才返回。
        """
        required = max(1, math.ceil(stable_time / poll_interval))
        deadline = time.monotonic() + timeout / 1000
        last = self._box(selector)
        stable_count = 0

        while stable_count < required:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise WaitTimeoutError(
                    f"元素 {selector} 在 {timeout}ms 内位置未稳定（需连续 {stable_time}ms 不变）", selector, timeout)
            if remaining < poll_interval / 1000:
                # 剩余不足一个采样间隔，等到 deadline 后超时
                time.sleep(remaining)
                continue
            time.sleep(poll_interval / 1000)
            current = self._box(selector)
            if current is not None and current == last:
                stable_count += 1
            else:
                stable_count = 0
                last = current

    def wait_for_any_of(self, selectors: Sequence[str], timeout: float = 10_000) -> str:
        """多个 selector 竞争，返回最先可见的那个"""
        found = []

        def any_visible() -> bool:
            for selector in selectors:
                if self._check(lambda: self._first(selector).is_visible()):
                    found.append(selector)
                    return True
            return False

        if not self._poll(any_visible, timeout):
            raise WaitTimeoutError(
                f"{timeout}ms 内以下元素均未出现：{', '.join(selectors)}", selectors, timeout)
        return found[0]

    def wait_for_text(self, selector: str, expected_text: str, timeout: float = 10_000):
        def has_text() -> bool:
            return expected_text in (self._first(selector).text_content() or "")

        if not self._poll(has_text, timeout):
            raise WaitTimeoutError(
                f"文本 {expected_text!r} 在 {timeout}ms 内未出现在 {selector} 中", selector, timeout)

    # ========= 页面级等待 =========
    def wait_for_url(self, pattern: str, timeout: float = 10_000):
        if not self._poll(lambda: re.search(pattern, self.page.url) is not None, timeout):
            raise WaitTimeoutError(
                f"{timeout}ms 内页面未跳转到 {pattern}，当前url：{self.page.url}", pattern, timeout)

    def wait_for_load(self, state: str = "domcontentloaded", timeout: float = 10_000):
        try:
            self.page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightError as err:
            raise WaitTimeoutError(f"页面 {state} 在 {timeout}ms 内未完成：{err}", "page", timeout) from err

    # ========= 固定等待 =========
    @staticmethod
    def delay(duration: float):
        """无条件等待，只用于没有任何DOM信号的动画窗口"""
        if duration > 0:
            time.sleep(duration / 1000)
