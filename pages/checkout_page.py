from typing import Optional

from playwright.sync_api import Page

from assertions.check_out_assert import CheckOutAssert
from config.locators import CHECKOUT_LOCATORS, OVERVIEW_LOCATORS
from config.settings import Settings
from data.models import CheckoutInfo
from pages.page_actions import PageActions
from utils.exceptions import RequiredFieldError, ValidationError
from utils.logger import RunLogger


class CheckoutPage:
    """checkout-step-one.html 收货人信息"""

    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.actions = PageActions(page, logger, settings)
        self.logger = logger
        self.firstName_input = CHECKOUT_LOCATORS["firstName_input"]  # firstName输入框
        self.lastName_input = CHECKOUT_LOCATORS["lastName_input"]  # lastName输入框
        self.postalCode_input = CHECKOUT_LOCATORS["postalCode_input"]  # postalCode输入框
        self.container_error_msg = CHECKOUT_LOCATORS["container_error_msg"]  # 收货人未填写点击下一步错误提示文案
        self.cancel_button = CHECKOUT_LOCATORS["cancel_button"]  # 取消按钮
        self.continue_button = CHECKOUT_LOCATORS["continue_button"]  # 继续按钮
        self.overview_marker = OVERVIEW_LOCATORS["finish_button"]  # step two 已加载的标志

    # ========== 页面行为 ==========
    def fill_checkout_information(self, first_name: str, last_name: str, postal_code: str):
        self.logger.info("填写收货人信息")
        self.actions.type_text(self.firstName_input, first_name)
        self.actions.type_text(self.lastName_input, last_name)
        self.actions.type_text(self.postalCode_input, postal_code)
        self.logger.success("收货人信息填写完成")

    def fill_only_first_name(self, first_name: str):
        self.actions.type_text(self.firstName_input, first_name)

    def fill_only_last_name(self, last_name: str):
        self.actions.type_text(self.lastName_input, last_name)

    def fill_only_postal_code(self, postal_code: str):
        self.actions.type_text(self.postalCode_input, postal_code)

    def clear_checkout_form(self):
        self.actions.type_text(self.firstName_input, "", clear_first=False)
        self.actions.type_text(self.lastName_input, "", clear_first=False)
        self.actions.type_text(self.postalCode_input, "", clear_first=False)
        self.logger.info("清空收货人信息")

    def continue_checkout(self):
        """点击Checkout-step-one页面continue按钮"""
        self.actions.click(self.continue_button)
        self.logger.info("点击 continue")

    def cancel(self):
        self.actions.click(self.cancel_button)
        self.logger.info("点击 cancel")

    def submit_checkout_information(self, info: CheckoutInfo):
        """
        填写并提交：
        - 跳转到 step two -> 正常返回
        - 出现错误提示 -> 停留在当前页，抛 RequiredFieldError / ValidationError
        """
        self.fill_checkout_information(info.first_name, info.last_name, info.postal_code)
        self.continue_checkout()
        winner = self.actions.waiter.wait_for_any_of(
            [self.container_error_msg, self.overview_marker], self.actions.settings.default_timeout)
        if winner == self.container_error_msg:
            message = self.get_error_message()
            self.logger.error(f"收货人信息提交失败：{message}")
            if "required" in message.lower():
                raise RequiredFieldError(f"收货人信息必填项为空：{message}", self.container_error_msg)
            raise ValidationError(f"收货人信息提交失败：{message}", self.container_error_msg)

    # ================= 数据获取 =================
    def get_error_message(self) -> str:
        if self.actions.is_visible(self.container_error_msg, timeout=0):
            return self.actions.read_text(self.container_error_msg)
        return ""

    def has_required_field_error(self) -> bool:
        return "required" in self.get_error_message().lower()

    # ========== checkout-step-one 基本验证 ==========
    def verify_container_empty(self, expect_error_msg: str):
        CheckOutAssert.tips_message(self.get_error_message(), expect_error_msg)
