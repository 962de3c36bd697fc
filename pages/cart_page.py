from decimal import Decimal
from typing import List, Optional

from playwright.sync_api import Page

from assertions.cart_assert import CartAssert
from config.locators import CART_LOCATORS, nth, within
from config.pages import URL_PATTERNS
from config.settings import Settings
from data.models import CartItem, Product
from pages.page_actions import PageActions
from utils.common_utils import parse_money, parse_quantity, to_cents, format_money
from utils.exceptions import ElementNotFoundError
from utils.logger import RunLogger


class CartPage:
    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.actions = PageActions(page, logger, settings)
        self.logger = logger

        self.cart_item = CART_LOCATORS["cart_item"]  # 购物车商品行
        self.item_product_name = CART_LOCATORS["item_product_name"]
        self.item_product_price = CART_LOCATORS["item_product_price"]
        self.item_product_desc = CART_LOCATORS["item_product_desc"]
        self.item_quantity = CART_LOCATORS["item_quantity"]
        self.remove_product_button = CART_LOCATORS["remove_product_button"]
        self.checkout_button = CART_LOCATORS["checkout_button"]
        self.continue_shopping_button = CART_LOCATORS["continue"]

    # ================= 页面行为 =================
    def wait_until_loaded(self):
        """购物车行出现才算加载完成（空购物车不要调用）"""
        self.actions.waiter.wait_for_visible(self.cart_item, self.actions.settings.default_timeout)
        self.actions.wait_url(URL_PATTERNS["cart"])

    def remove_item(self, product_name: str):
        """按名称精确匹配删除一行，找不到抛 ElementNotFoundError"""
        self.logger.info(f"从购物车删除商品：{product_name}")
        for i in range(self.actions.count(self.cart_item)):
            row = nth(self.cart_item, i)
            if self.actions.read_text(within(row, self.item_product_name)) == product_name.strip():
                self.actions.click(within(row, self.remove_product_button))
                self.actions.delay()  # 删除动画
                self.logger.success(f"已删除 {product_name}")
                return
        self.logger.error(f"购物车中不存在商品：{product_name}")
        raise ElementNotFoundError(f"购物车中不存在商品：{product_name}", self.cart_item)

    def remove_all_items(self):
        for item in self.get_cart_items():
            self.remove_item(item.name)
        self.logger.success("购物车已清空")

    def proceed_to_checkout(self):
        self.actions.click(self.checkout_button)
        self.logger.info("进入结算页面")

    def continue_shopping(self):
        self.actions.click(self.continue_shopping_button)
        self.logger.info("继续购物")

    # ================= 数据获取 =================
    def get_cart_items(self) -> List[CartItem]:
        """每次都重新读取页面，不缓存"""
        self.logger.info("读取购物车商品")
        count = self.actions.count(self.cart_item)
        if count == 0:
            self.logger.info("购物车为空")
            return []

        items = []
        for i in range(count):
            row = nth(self.cart_item, i)
            quantity_selector = within(row, self.item_quantity)
            # 没有数量元素按 1 件处理；数量元素存在但解析失败直接报错
            quantity = 1
            if self.actions.count(quantity_selector) > 0:
                quantity = parse_quantity(self.actions.read_text(quantity_selector))
            items.append(CartItem(
                name=self.actions.read_text(within(row, self.item_product_name)),
                price=parse_money(self.actions.read_text(within(row, self.item_product_price))),
                quantity=quantity,
                description=self.actions.read_text(within(row, self.item_product_desc))))

        self.logger.info(f"购物车共 {len(items)} 个商品")
        return items

    def calculate_subtotal(self) -> Decimal:
        subtotal = to_cents(sum((item.line_total for item in self.get_cart_items()), Decimal("0")))
        self.logger.info(f"购物车小计：{format_money(subtotal)}")
        return subtotal

    def get_item_count(self) -> int:
        return self.actions.count(self.cart_item)

    def is_cart_empty(self) -> bool:
        return self.get_item_count() == 0

    def is_product_in_cart(self, product_name: str) -> bool:
        return any(item.name == product_name for item in self.get_cart_items())

    # ================= 基础验证 =================
    def verify_cart_items(self, expected_products: List[Product]):
        cart_items = self.get_cart_items()
        CartAssert.added_product_count(expected_products, cart_items)
        CartAssert.product_in_cart(expected_products, cart_items)
        self.logger.success("购物车商品校验通过")

    def verify_subtotal(self, expected: Decimal) -> Decimal:
        actual = self.calculate_subtotal()
        CartAssert.subtotal(actual, expected)
        return actual
