from typing import Optional

from playwright.sync_api import Page

from assertions.check_out_assert import CheckOutAssert
from config.locators import COMPLETE_LOCATORS
from config.settings import Settings
from pages.page_actions import PageActions
from utils.exceptions import ValidationError
from utils.logger import RunLogger


class CheckoutCompletePage:
    """checkout-complete.html 下单完成"""

    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.actions = PageActions(page, logger, settings)
        self.logger = logger
        self.complete_header = COMPLETE_LOCATORS["complete_header"]  # 完成页面提示信息
        self.complete_text = COMPLETE_LOCATORS["complete_text"]
        self.back_home_button = COMPLETE_LOCATORS["back_home_button"]
        self.pony_express_img = COMPLETE_LOCATORS["pony_express_img"]

    def is_checkout_complete(self) -> bool:
        return self.actions.is_visible(self.complete_header)

    def get_complete_message(self) -> str:
        return self.actions.read_text(self.complete_header)

    def get_complete_description(self) -> str:
        return self.actions.read_text(self.complete_text)

    def is_pony_express_image_displayed(self) -> bool:
        return self.actions.is_visible(self.pony_express_img)

    def back_to_products(self):
        self.actions.click(self.back_home_button)
        self.logger.info("返回商品列表")

    def get_order_confirmation_details(self) -> dict:
        is_complete = self.is_checkout_complete()
        return {
            "header": self.get_complete_message() if is_complete else "",
            "description": self.get_complete_description() if is_complete else "",
            "is_complete": is_complete,
        }

    def verify_checkout_complete(self):
        """完成标志可见，且提示信息包含 complete / thank you（不区分大小写）"""
        if not self.is_checkout_complete():
            self.logger.error("订单完成页面未显示")
            raise ValidationError("订单完成页面未显示", self.complete_header)
        CheckOutAssert.complete_message(self.get_complete_message())
        self.logger.success("下单完成")
