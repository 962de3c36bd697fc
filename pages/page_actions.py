from typing import List, Optional

from playwright.sync_api import Page, Error as PlaywrightError

from config.settings import Settings
from utils.exceptions import ActionError, UiFlowError
from utils.logger import RunLogger
from utils.wait_helper import WaitHelper


class PageActions:
    """
    单个动作的统一写法：先等就绪 -> 再执行 -> 记日志。
    - 改变页面状态的动作：等待失败或执行失败都直接抛异常（带 selector + 动作）
    - 只读探测（is_visible / count / is_enabled）：从不抛异常，返回 False / 0
    每个页面对象通过组合持有自己的 PageActions。
    """

    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.page = page
        self.logger = logger
        self.settings = settings or Settings()
        self.waiter = WaitHelper(page, poll_interval=self.settings.poll_interval)

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.settings.default_timeout if timeout is None else timeout

    def _run(self, action: str, selector: Optional[str], fn):
        try:
            return fn()
        except UiFlowError as err:
            self.logger.error(f"{action} 失败：{selector}", err)
            raise
        except PlaywrightError as err:
            self.logger.error(f"{action} 失败：{selector}", err)
            raise ActionError(action, selector, err) from err

    # ========= 基础动作 =========
    def navigate(self, url: str):
        def go():
            self.page.goto(url, wait_until="domcontentloaded")
            self.logger.info(f"打开页面 {url}")

        self._run("navigate", url, go)

    def click(self, selector: str, timeout: Optional[float] = None):
        def do_click():
            self.waiter.wait_for_clickable(selector, self._timeout(timeout))
            locator = self.page.locator(selector).first
            locator.scroll_into_view_if_needed()
            locator.click()
            self.logger.info(f"点击 {selector}")

        self._run("click", selector, do_click)

    def type_text(self, selector: str, text: str, clear_first: bool = True, timeout: Optional[float] = None):
        def do_type():
            self.waiter.wait_for_visible(selector, self._timeout(timeout))
            locator = self.page.locator(selector).first
            if clear_first:
                locator.clear()
            locator.fill(text)
            self.logger.info(f"输入 {selector}")

        self._run("type", selector, do_type)

    def select_option(self, selector: str, value: str, timeout: Optional[float] = None):
        def do_select():
            self.waiter.wait_for_visible(selector, self._timeout(timeout))
            self.page.locator(selector).first.select_option(value)
            self.logger.info(f"下拉框 {selector} 选择 {value!r}")

        self._run("select_option", selector, do_select)

    def hover(self, selector: str, timeout: Optional[float] = None):
        def do_hover():
            self.waiter.wait_for_visible(selector, self._timeout(timeout))
            self.page.locator(selector).first.hover()
            self.logger.info(f"悬停 {selector}")

        self._run("hover", selector, do_hover)

    def scroll_into_view(self, selector: str):
        def do_scroll():
            self.page.locator(selector).first.scroll_into_view_if_needed()
            self.logger.info(f"滚动到 {selector}")

        self._run("scroll_into_view", selector, do_scroll)

    # ========= 读取 =========
    def read_text(self, selector: str, timeout: Optional[float] = None) -> str:
        def do_read():
            self.waiter.wait_for_visible(selector, self._timeout(timeout))
            return (self.page.locator(selector).first.inner_text() or "").strip()

        return self._run("read_text", selector, do_read)

    def read_attribute(self, selector: str, name: str, timeout: Optional[float] = None) -> Optional[str]:
        def do_read():
            self.waiter.wait_for_visible(selector, self._timeout(timeout))
            return self.page.locator(selector).first.get_attribute(name)

        return self._run("read_attribute", selector, do_read)

    def read_texts(self, selector: str) -> List[str]:
        """所有匹配元素的文本，没有匹配时返回空list"""
        locator = self.page.locator(selector)
        return self._run("read_texts", selector,
                         lambda: [(locator.nth(i).inner_text() or "").strip() for i in range(locator.count())])

    def read_attributes(self, selector: str, name: str) -> List[Optional[str]]:
        locator = self.page.locator(selector)
        return self._run("read_attributes", selector,
                         lambda: [locator.nth(i).get_attribute(name) for i in range(locator.count())])

    # ========= 探测（不抛异常）=========
    def count(self, selector: str) -> int:
        try:
            return self.page.locator(selector).count()
        except PlaywrightError:
            return 0

    def is_visible(self, selector: str, timeout: Optional[float] = None) -> bool:
        timeout = self.settings.probe_timeout if timeout is None else timeout
        try:
            self.waiter.wait_for_visible(selector, timeout)
            return True
        except UiFlowError:
            return False

    def is_enabled(self, selector: str) -> bool:
        try:
            return self.page.locator(selector).first.is_enabled()
        except PlaywrightError:
            return False

    # ========= 页面信息 =========
    def current_url(self) -> str:
        return self.page.url

    def title(self) -> str:
        return self.page.title()

    def wait_for_page_load(self):
        self.waiter.wait_for_load("domcontentloaded", self.settings.default_timeout)

    def wait_url(self, pattern: str, timeout: Optional[float] = None):
        self.waiter.wait_for_url(pattern, self._timeout(timeout))

    def delay(self, duration: Optional[float] = None):
        self.waiter.delay(self.settings.animation_delay if duration is None else duration)
