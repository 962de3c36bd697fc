import time
import traceback
from datetime import datetime
from decimal import Decimal
from typing import Optional

from playwright.sync_api import Page, Error as PlaywrightError

from assertions.inventory_assert import InventoryAssert
from config.settings import Settings
from data.models import CheckoutInfo, UserCredential
from flows.workflow_state import Stage, WorkflowState
from pages.cart_page import CartPage
from pages.checkout_complete_page import CheckoutCompletePage
from pages.checkout_overview_page import CheckoutOverviewPage
from pages.checkout_page import CheckoutPage
from pages.inventory_page import InventoryPage
from pages.login_page import LoginPage, LoginOutcome, Rejected
from reporting.result_sink import RunRecord, ResultSink, PASSED, FAILED
from utils.common_utils import format_money
from utils.exceptions import AuthenticationError, InvalidTransitionError
from utils.logger import RunLogger
from utils.screenshot_helper import ScreenshotHelper


class PurchaseFlow:
    """
    完整下单流程（一个账号一次运行）：
    登录 -> 选最贵的N个商品 -> 加购 -> 校验购物车 -> 删除一件 -> 填写收货人 -> 校验金额 -> 完成

    每一步成功后推进 WorkflowState；任何一步失败 -> Failed，截图、记录后重新抛出。
    无论成功失败，结束时都会往 ResultSink 写且只写一条 RunRecord。
    """

    def __init__(self, page: Page, credential: UserCredential, checkout_info: CheckoutInfo, sink: ResultSink,
                 settings: Optional[Settings] = None, logger: Optional[RunLogger] = None,
                 screenshots: Optional[ScreenshotHelper] = None):
        self.page = page
        self.credential = credential
        self.checkout_info = checkout_info
        self.sink = sink
        self.settings = settings or Settings()
        self.scenario_name = f"Complete Purchase Flow - {credential.type}"
        self.logger = logger or RunLogger(f"purchase_flow_{credential.type}", self.settings.reports_dir / "logs")
        if screenshots is None and self.settings.screenshots_enabled:
            screenshots = ScreenshotHelper(page, f"purchase_{credential.type}", self.settings.reports_dir / "screenshots")
        self.screenshots = screenshots

        self.state = WorkflowState(identity=credential)
        self.record = RunRecord(self.scenario_name, credential.username, credential.type)
        self._started = False

        # 页面对象
        self.login_page = LoginPage(page, self.logger, self.settings)
        self.inventory_page = InventoryPage(page, self.logger, self.settings)
        self.cart_page = CartPage(page, self.logger, self.settings)
        self.checkout_page = CheckoutPage(page, self.logger, self.settings)
        self.overview_page = CheckoutOverviewPage(page, self.logger, self.settings)
        self.complete_page = CheckoutCompletePage(page, self.logger, self.settings)

    @property
    def started(self) -> bool:
        return self._started

    # ================= 运行入口 =================
    def run(self) -> RunRecord:
        if self._started:
            raise InvalidTransitionError("同一个 PurchaseFlow 只能运行一次")
        self._started = True

        start = time.monotonic()
        self.record.start_time = datetime.now().isoformat(timespec="seconds")
        try:
            self.logger.info(f"========== 开始测试：{self.credential.username} ==========")
            self.authenticate()
            if self.state.stage is Stage.LOCKED_OUT:
                self.record.status = PASSED
                return self.record

            self.check_problem_user()
            self.browse_catalog()
            self.add_selected_to_cart()
            self.verify_cart()
            if self.settings.remove_one_item and len(self.state.selected_products) > 1:
                self.remove_one_item()
            self.enter_checkout_info()
            self.verify_overview()
            self.complete_order()

            self.logger.success(f"========== 测试通过：{self.credential.username} ==========")
            self.record.status = PASSED
            return self.record
        except Exception as err:
            self._handle_failure(err)
            raise
        finally:
            self.record.stage = self.state.stage.value
            self.record.end_time = datetime.now().isoformat(timespec="seconds")
            self.record.duration = round(time.monotonic() - start, 2)
            self.record.logs = self.logger.get_logs()
            try:
                self.sink.append(self.record)
            finally:
                self.logger.close()

    # ================= 各步骤 =================
    def authenticate(self) -> LoginOutcome:
        self.logger.info("Step 1: 打开登录页")
        self.state.advance(Stage.AUTHENTICATING)
        self.login_page.open_login(self.settings.base_url)
        self._snap("01_landing_page")

        self.logger.info("Step 2: 登录")
        outcome = self.login_page.login(self.credential.username, self.credential.password)

        if not self.credential.should_succeed:
            if isinstance(outcome, Rejected) and outcome.locked_out:
                self.logger.success("锁定账号被正确拒绝登录")
                self._snap("02_locked_out_error")
                self.state.advance(Stage.LOCKED_OUT)
                return outcome
            if isinstance(outcome, Rejected):
                raise AuthenticationError(f"预期账号被锁定，实际拒绝原因：{outcome.message}")
            raise AuthenticationError(f"预期 {self.credential.username} 登录失败，但实际登录成功")

        if isinstance(outcome, Rejected):
            raise AuthenticationError(f"{self.credential.username} 登录失败：{outcome.message}")
        self._snap("02_after_login")
        self.state.advance(Stage.AUTHENTICATED)
        return outcome

    def check_problem_user(self):
        if not self.credential.has_issues:
            return
        self.logger.info("Step 3: 检查 problem user 的页面问题（图片损坏）")
        broken = self.inventory_page.check_for_broken_images()
        if broken:
            self.logger.warning(f"problem user：发现 {len(broken)} 张损坏图片")
            self._snap("03_problem_user_issues")

    def browse_catalog(self):
        count = self.settings.product_count
        self.logger.info(f"Step 4: 选取最贵的 {count} 个商品")
        products = self.inventory_page.get_most_expensive_products(count)
        InventoryAssert.enough_products(len(products), count)
        self.state.selected_products = list(products)
        self.logger.info("已选商品：" + ", ".join(p.name for p in products))
        self.state.advance(Stage.CATALOG_BROWSED)

    def add_selected_to_cart(self):
        self.logger.info("Step 5: 加购商品")
        for product in self.state.selected_products:
            self.inventory_page.add_product_to_cart(product.name)
        self._snap("05_products_added")
        self.state.advance(Stage.ITEMS_IN_CART)

    def verify_cart(self):
        self.logger.info("Step 6: 校验购物车角标")
        self.inventory_page.verify_cart_badge_count(len(self.state.selected_products))
        self._snap("06_cart_badge")

        self.logger.info("Step 7: 进入购物车")
        self.inventory_page.go_to_cart()
        self.cart_page.wait_until_loaded()
        self._snap("07_cart_page")

        self.logger.info("Step 8: 校验购物车商品、计算小计")
        self.cart_page.verify_cart_items(self.state.selected_products)
        self.state.last_known_subtotal = self.cart_page.calculate_subtotal()
        self.state.advance(Stage.CART_VERIFIED)

    def remove_one_item(self):
        removed = self.state.selected_products[0]
        self.logger.info(f"Step 9: 删除购物车商品 {removed.name}")
        self.cart_page.remove_item(removed.name)
        self._snap("09_item_removed")

        remaining = self.state.selected_products[1:]
        expected = sum((p.price for p in remaining), Decimal("0"))
        self.cart_page.verify_cart_items(remaining)
        subtotal = self.cart_page.verify_subtotal(expected)

        self.state.selected_products = remaining
        self.state.last_known_subtotal = subtotal
        self.logger.success(f"删除后购物车小计正确：{format_money(subtotal)}")
        self.state.advance(Stage.CART_VERIFIED)

    def enter_checkout_info(self):
        self.logger.info("Step 10: 填写收货人信息")
        self.cart_page.proceed_to_checkout()
        self.checkout_page.submit_checkout_information(self.checkout_info)
        self._snap("10_checkout_info_filled")
        self.state.advance(Stage.CHECKOUT_INFO_ENTERED)

    def verify_overview(self):
        self.logger.info("Step 11: 校验订单金额")
        self.overview_page.wait_until_settled()
        self._snap("11_overview")
        self.overview_page.verify_item_count(len(self.state.selected_products))
        self.overview_page.verify_order_totals(self.state.last_known_subtotal)
        self.state.advance(Stage.OVERVIEW_VERIFIED)

    def complete_order(self):
        self.logger.info("Step 12: 提交订单")
        self.overview_page.finish_checkout()
        self.complete_page.actions.waiter.wait_for_visible(
            self.complete_page.complete_header, self.settings.default_timeout)
        self._snap("12_order_complete")
        self.complete_page.verify_checkout_complete()
        self.state.advance(Stage.COMPLETED)

    # ================= 辅助 =================
    def _snap(self, step: str):
        if self.screenshots is None:
            return
        self.record.add_screenshot(step, self.screenshots.capture(step))

    def _handle_failure(self, err: Exception):
        self.logger.error(f"========== 测试失败：{self.credential.username} ==========", err)
        if not self.state.is_terminal:
            self.state.fail(err)
        self.record.status = FAILED
        self.record.error = "".join(traceback.format_exception(type(err), err, err.__traceback__))

        if self.screenshots is None:
            return
        # 失败截图尽力而为，截图本身失败不能掩盖原始异常
        try:
            self.record.add_screenshot("ERROR_SCREENSHOT", self.screenshots.capture_on_failure("test_failure"))
        except (PlaywrightError, OSError) as snap_err:
            self.logger.error("失败截图保存失败", snap_err)
