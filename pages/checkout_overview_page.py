from decimal import Decimal
from typing import Optional

from playwright.sync_api import Page

from assertions.check_out_assert import CheckOutAssert
from config.locators import OVERVIEW_LOCATORS
from config.settings import Settings
from data.models import OrderSummary
from pages.page_actions import PageActions
from utils.common_utils import parse_money, format_money
from utils.logger import RunLogger


class CheckoutOverviewPage:
    """checkout-step-two.html 订单确认"""

    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.actions = PageActions(page, logger, settings)
        self.logger = logger
        self.cart_item = OVERVIEW_LOCATORS["cart_item"]
        self.summary_info = OVERVIEW_LOCATORS["summary_info"]
        self.payment_information = OVERVIEW_LOCATORS["payment_information"]  # 支付信息value
        self.shipping_information = OVERVIEW_LOCATORS["shipping_information"]  # 运费信息value
        self.item_total = OVERVIEW_LOCATORS["item_total"]  # 商品总价格
        self.tax = OVERVIEW_LOCATORS["tax"]  # 税
        self.total = OVERVIEW_LOCATORS["total"]  # 订单价格
        self.cancel_button = OVERVIEW_LOCATORS["cancel_button"]
        self.finish_button = OVERVIEW_LOCATORS["finish_button"]

    # ========== 页面行为 ==========
    def wait_until_settled(self):
        """价格区块有位移动画，等位置稳定后再读数"""
        settings = self.actions.settings
        self.actions.waiter.wait_for_visible(self.summary_info, settings.default_timeout)
        self.actions.waiter.wait_for_stable_position(
            self.summary_info, settings.stable_poll_interval, settings.stable_time, settings.default_timeout)

    def finish_checkout(self):
        self.actions.click(self.finish_button)
        self.logger.info("点击 finish")

    def cancel_checkout(self):
        self.actions.click(self.cancel_button)
        self.logger.info("点击 cancel")

    # ================= 数据获取 =================
    def get_item_total(self) -> Decimal:
        return parse_money(self.actions.read_text(self.item_total))

    def get_tax(self) -> Decimal:
        return parse_money(self.actions.read_text(self.tax))

    def get_total(self) -> Decimal:
        return parse_money(self.actions.read_text(self.total))

    def get_item_count(self) -> int:
        return self.actions.count(self.cart_item)

    def get_payment_information(self) -> str:
        return self.actions.read_text(self.payment_information)

    def get_shipping_information(self) -> str:
        return self.actions.read_text(self.shipping_information)

    def get_order_summary(self) -> OrderSummary:
        return OrderSummary(
            item_total=self.get_item_total(),
            tax=self.get_tax(),
            total=self.get_total(),
            item_count=self.get_item_count())

    # ========== checkout-step-two 基本验证 ==========
    def verify_order_totals(self, expected_subtotal: Decimal) -> OrderSummary:
        """Item total ≈ 购物车小计；Total ≈ Item total + Tax（容差 0.01）"""
        self.logger.info("校验订单金额")
        summary = self.get_order_summary()
        CheckOutAssert.item_total(summary.item_total, expected_subtotal)
        CheckOutAssert.order_price(summary.item_total, summary.tax, summary.total)
        self.logger.success(
            f"订单金额校验通过 - Item total: {format_money(summary.item_total)}, "
            f"Tax: {format_money(summary.tax)}, Total: {format_money(summary.total)}")
        return summary

    def verify_item_count(self, expected_count: int):
        CheckOutAssert.product_count(self.get_item_count(), expected_count)
        self.logger.success(f"订单商品数量正确：{expected_count}")

    def verify_order_base_info(self):
        CheckOutAssert.not_empty(self.get_payment_information(), "支付信息")
        CheckOutAssert.not_empty(self.get_shipping_information(), "配送信息")
        CheckOutAssert.price_format(self.actions.read_text(self.item_total))
        CheckOutAssert.price_format(self.actions.read_text(self.tax))
        CheckOutAssert.price_format(self.actions.read_text(self.total))
